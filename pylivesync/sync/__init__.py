"""Live sync engine for PyLiveSync - polling copy and reload scheduling."""

from .comparator import FileComparator, SyncAction, SyncDecision
from .config import (
    BuildLayout,
    LiveSyncConfig,
    SyncConfigError,
    load_sync_config_from_json,
    parse_sync_config,
)
from .operations import SyncOperations
from .scanner import DirectoryScanner, LocalFile
from .scheduler import SchedulerState, SyncScheduler
from .selector import (
    ExtensionSelector,
    FileSelector,
    PatternSelector,
    create_selector,
)
from .synchronizer import Synchronizer
from .unit import SyncUnit

__all__ = [
    "SyncScheduler",
    "SchedulerState",
    "Synchronizer",
    "SyncUnit",
    "SyncOperations",
    "SyncConfigError",
    "BuildLayout",
    "LiveSyncConfig",
    "load_sync_config_from_json",
    "parse_sync_config",
    "DirectoryScanner",
    "LocalFile",
    "FileComparator",
    "SyncAction",
    "SyncDecision",
    "FileSelector",
    "ExtensionSelector",
    "PatternSelector",
    "create_selector",
]
