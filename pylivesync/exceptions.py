"""Custom exceptions for PyLiveSync."""


class LiveSyncError(Exception):
    """Base exception for all PyLiveSync errors."""


class SyncPassError(LiveSyncError):
    """A synchronization pass could not complete.

    Raised only when a source tree cannot be scanned at all. Per-file copy
    errors never raise; they are logged and skipped.
    """


class SchedulerStateError(LiveSyncError):
    """Illegal scheduler lifecycle transition."""


class DeployerError(LiveSyncError):
    """Base exception for remote deployer failures."""


class DeployerConfigError(DeployerError):
    """Deployer connection is not configured or disabled."""


class DeployerNetworkError(DeployerError):
    """Deployer could not be reached."""


class DeployerAuthenticationError(DeployerError):
    """Deployer rejected the credentials (401)."""


class DeployerPermissionError(DeployerError):
    """Deployer refused the operation (403)."""


class DeployerNotFoundError(DeployerError):
    """Deployer endpoint or application not found (404)."""


class DeployerInvalidResponseError(DeployerError):
    """Deployer returned a body that could not be decoded."""
