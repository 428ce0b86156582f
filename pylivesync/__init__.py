"""PyLiveSync - copy build output into a running server and reload it."""

from .deployer import DeployerClient
from .exceptions import (
    DeployerAuthenticationError,
    DeployerConfigError,
    DeployerError,
    DeployerInvalidResponseError,
    DeployerNetworkError,
    DeployerNotFoundError,
    DeployerPermissionError,
    LiveSyncError,
    SchedulerStateError,
    SyncPassError,
)
from .utils import strip_archive_suffix

__all__ = [
    "DeployerClient",
    "LiveSyncError",
    "SyncPassError",
    "SchedulerStateError",
    "DeployerError",
    "DeployerAuthenticationError",
    "DeployerConfigError",
    "DeployerInvalidResponseError",
    "DeployerNetworkError",
    "DeployerNotFoundError",
    "DeployerPermissionError",
    "strip_archive_suffix",
]
