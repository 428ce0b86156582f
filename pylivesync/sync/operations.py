"""File operations used by sync passes."""

import os
import shutil
from pathlib import Path

from .scanner import LocalFile


class SyncOperations:
    """Filesystem operations for copying source files into a target tree."""

    def copy_file(self, local_file: LocalFile, target_path: Path, timestamp: float) -> Path:
        """Copy a source file and stamp the copy with the pass timestamp.

        The copy gets ``timestamp`` as its modification time, not the source
        file's own mtime.

        Args:
            local_file: Source file to copy
            target_path: Destination path
            timestamp: Unix timestamp of the current scan

        Returns:
            Path where file was written

        Raises:
            OSError: If the copy or the timestamp update fails
        """
        # Ensure parent directory exists
        target_path.parent.mkdir(parents=True, exist_ok=True)

        shutil.copyfile(local_file.path, target_path)
        os.utime(target_path, (timestamp, timestamp))
        return target_path
