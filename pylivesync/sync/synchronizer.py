"""Watermark-based synchronization of one sync unit."""

import logging
import time
from pathlib import Path
from typing import Callable, Optional

from ..exceptions import SyncPassError
from .comparator import FileComparator, SyncAction
from .operations import SyncOperations
from .scanner import DirectoryScanner
from .selector import FileSelector, create_selector
from .unit import SyncUnit

logger = logging.getLogger(__name__)


class Synchronizer:
    """Copies files changed since the last pass from a unit's sources to its targets.

    Each pass scans the resources pair and then the binaries pair, copies
    every selected file whose mtime is not older than the watermark, and
    finally moves the watermark to the time the pass started.

    The watermark moves even when some copies failed. A file whose copy
    failed is only retried once it is modified again.
    """

    def __init__(
        self,
        unit: SyncUnit,
        watermark: Optional[float] = None,
        clock: Callable[[], float] = time.time,
    ):
        """Initialize synchronizer.

        Args:
            unit: Sync unit to serve
            watermark: Initial watermark (Unix timestamp); defaults to now
            clock: Time source returning a Unix timestamp
        """
        self.unit = unit
        self.clock = clock
        self.selector: FileSelector = create_selector(unit.extensions, unit.pattern)
        self.scanner = DirectoryScanner(self.selector)
        self.operations = SyncOperations()
        self.watermark = clock() if watermark is None else watermark
        self.last_stats = self._create_empty_stats()

    @property
    def interval_ms(self) -> int:
        """Poll interval of the served unit in milliseconds."""
        return self.unit.interval_ms

    def _create_empty_stats(self) -> dict:
        """Create an empty statistics dictionary.

        Returns:
            Dictionary with zero counts for all stat categories
        """
        return {
            "created": 0,
            "updated": 0,
            "skips": 0,
            "failed": 0,
        }

    def run(self) -> int:
        """Run one synchronization pass.

        Returns:
            Number of files copied across both directory pairs

        Raises:
            SyncPassError: If a source directory exists but cannot be listed
        """
        scan_timestamp = self.clock()
        stats = self._create_empty_stats()

        updated = 0
        for source, target in self.unit.directory_pairs:
            updated += self._update_files(source, target, scan_timestamp, stats)

        self.watermark = scan_timestamp
        self.last_stats = stats
        return updated

    def _update_files(
        self,
        source: Optional[Path],
        target: Optional[Path],
        scan_timestamp: float,
        stats: dict,
    ) -> int:
        """Copy the stale files of one directory pair.

        Args:
            source: Source root
            target: Target root
            scan_timestamp: Timestamp captured at the start of the pass
            stats: Statistics dictionary (modified in place)

        Returns:
            Number of files copied
        """
        if source is None or not source.exists():
            logger.debug(f"{source} doesn't exist")
            return 0

        if not source.is_dir():
            logger.warning(f"{source.absolute()} is not a directory, skipping")
            return 0

        if target is None:
            logger.warning(f"No target directory for {source.absolute()}, skipping")
            return 0

        try:
            local_files = self.scanner.scan_local(source)
        except OSError as e:
            raise SyncPassError(f"Can't scan {source.absolute()}: {e}") from e

        comparator = FileComparator(self.watermark)
        updated = 0
        for decision in comparator.compare_files(local_files, target):
            if decision.action == SyncAction.SKIP:
                stats["skips"] += 1
                continue

            label = "Creating" if decision.action == SyncAction.CREATE else "Updating"
            logger.info(
                f"[{label}] {decision.local_file.path} to {decision.target_path}"
            )
            try:
                self.operations.copy_file(
                    decision.local_file, decision.target_path, scan_timestamp
                )
            except OSError as e:
                logger.error(f"Failed to copy {decision.local_file.path}: {e}")
                stats["failed"] += 1
                continue

            if decision.action == SyncAction.CREATE:
                stats["created"] += 1
            else:
                stats["updated"] += 1
            updated += 1

        return updated

    def __repr__(self) -> str:
        return f"Synchronizer({self.unit})"
