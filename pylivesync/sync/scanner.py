"""Directory scanning utilities for sync operations."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .selector import ExtensionSelector, FileSelector

logger = logging.getLogger(__name__)


@dataclass
class LocalFile:
    """Represents a local file with metadata."""

    path: Path
    """Absolute path to the file"""

    relative_path: str
    """Relative path (using forward slashes for cross-platform compatibility)"""

    mtime: float
    """Last modification time (Unix timestamp)"""

    @classmethod
    def from_path(cls, file_path: Path, base_path: Path) -> "LocalFile":
        """Create LocalFile from a path.

        Args:
            file_path: Absolute path to the file
            base_path: Base path for calculating relative paths

        Returns:
            LocalFile instance
        """
        stat = file_path.stat()
        # Use as_posix() to ensure forward slashes on all platforms
        relative_path = file_path.relative_to(base_path).as_posix()
        return cls(
            path=file_path,
            relative_path=relative_path,
            mtime=stat.st_mtime,
        )


class DirectoryScanner:
    """Recursively collects the files of a directory accepted by a selector.

    Examples:
        >>> scanner = DirectoryScanner(ExtensionSelector([".html"]))
        >>> files = scanner.scan_local(Path("/project/src/main/webapp"))
    """

    def __init__(self, selector: Optional[FileSelector] = None):
        """Initialize directory scanner.

        Args:
            selector: File selector; without one every file is rejected
        """
        self.selector = selector or ExtensionSelector()

    def scan_local(
        self, directory: Path, base_path: Optional[Path] = None
    ) -> list[LocalFile]:
        """Recursively scan a local directory.

        Directories rejected by the selector are not entered. Entries are
        visited in name order so results are stable between passes.

        Args:
            directory: Directory to scan
            base_path: Base path for calculating relative paths (defaults to directory)

        Returns:
            List of LocalFile objects for the selected files

        Raises:
            OSError: If the top-level directory cannot be listed
        """
        is_root = base_path is None
        if base_path is None:
            base_path = directory

        files: list[LocalFile] = []

        try:
            entries = sorted(directory.iterdir())
        except OSError as e:
            if is_root:
                raise
            # Skip subdirectories we can't read
            logger.warning(f"Can't list {directory}: {e}")
            return files

        for item in entries:
            if not self.selector.accept(item):
                continue

            if item.is_dir():
                files.extend(self.scan_local(item, base_path))
            elif item.is_file():
                try:
                    files.append(LocalFile.from_path(item, base_path))
                except OSError as e:
                    # File vanished or became unreadable mid-scan
                    logger.debug(f"Skipping {item}: {e}")

        return files
