"""Change detection for sync passes."""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from .scanner import LocalFile


class SyncAction(str, Enum):
    """Actions that can be taken for a scanned file."""

    CREATE = "create"
    """Copy a file that does not exist in the target yet"""

    UPDATE = "update"
    """Overwrite an existing target file"""

    SKIP = "skip"
    """File not modified since the watermark"""


@dataclass
class SyncDecision:
    """Represents a decision about how to sync a file."""

    action: SyncAction
    """Action to take"""

    reason: str
    """Human-readable reason for this decision"""

    local_file: LocalFile
    """Source file"""

    target_path: Path
    """Mirrored path under the target root"""

    @property
    def relative_path(self) -> str:
        """Relative path of the file."""
        return self.local_file.relative_path


class FileComparator:
    """Compares source files against a watermark timestamp.

    A file is stale, and therefore copied, unless its modification time is
    strictly earlier than the watermark. The target tree is never compared
    against, so a target that differs from an old source file is left alone.
    """

    def __init__(self, watermark: float):
        """Initialize file comparator.

        Args:
            watermark: Unix timestamp of the start of the previous pass
        """
        self.watermark = watermark

    def compare_file(self, local_file: LocalFile, target_root: Path) -> SyncDecision:
        """Decide what to do with one source file.

        Args:
            local_file: Scanned source file
            target_root: Root of the target tree

        Returns:
            SyncDecision for this file
        """
        target_path = target_root.joinpath(*local_file.relative_path.split("/"))

        if local_file.mtime < self.watermark:
            return SyncDecision(
                action=SyncAction.SKIP,
                reason="Not modified since last pass",
                local_file=local_file,
                target_path=target_path,
            )

        if target_path.exists():
            return SyncDecision(
                action=SyncAction.UPDATE,
                reason="Modified since last pass",
                local_file=local_file,
                target_path=target_path,
            )

        return SyncDecision(
            action=SyncAction.CREATE,
            reason="Missing in target",
            local_file=local_file,
            target_path=target_path,
        )

    def compare_files(
        self, local_files: list[LocalFile], target_root: Path
    ) -> list[SyncDecision]:
        """Decide what to do with every scanned source file."""
        return [self.compare_file(f, target_root) for f in local_files]
