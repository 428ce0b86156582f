"""Sync unit definitions."""

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Union

from ..utils import normalize_interval


def _to_path(value: Union[str, Path, None]) -> Optional[Path]:
    if value is None or value == "":
        return None
    return Path(value)


@dataclass
class SyncUnit:
    """One live synchronization unit.

    A unit maps a resources directory and a binaries directory onto their
    counterparts inside a deployed application. Both pairs share one file
    filter and one poll interval.

    Examples:
        >>> unit = SyncUnit(
        ...     resources_dir=Path("src/main/webapp"),
        ...     target_resources_dir=Path("/opt/tomee/webapps/app"),
        ...     extensions=[".html", ".js"],
        ... )
    """

    resources_dir: Optional[Path] = None
    """Source directory for web resources"""

    target_resources_dir: Optional[Path] = None
    """Target directory for web resources inside the deployed application"""

    binaries_dir: Optional[Path] = None
    """Source directory for compiled classes"""

    target_binaries_dir: Optional[Path] = None
    """Target directory for compiled classes inside the deployed application"""

    extensions: Optional[list[str]] = None
    """File suffixes to synchronize. None means "not set"; an empty list
    matches nothing."""

    pattern: Optional[str] = None
    """Regular expression the absolute file path must fully match"""

    update_interval: int = 0
    """Poll interval in seconds (<= 0 means default)"""

    def __post_init__(self) -> None:
        """Normalize paths and interval."""
        self.resources_dir = _to_path(self.resources_dir)
        self.target_resources_dir = _to_path(self.target_resources_dir)
        self.binaries_dir = _to_path(self.binaries_dir)
        self.target_binaries_dir = _to_path(self.target_binaries_dir)
        if self.extensions is not None:
            self.extensions = list(self.extensions)
        if not self.pattern:
            self.pattern = None
        self.update_interval = int(self.update_interval or 0)

    @property
    def interval_seconds(self) -> int:
        """Effective poll interval in seconds."""
        return normalize_interval(self.update_interval)

    @property
    def interval_ms(self) -> int:
        """Effective poll interval in milliseconds."""
        return self.interval_seconds * 1000

    @property
    def directory_pairs(self) -> list[tuple[Optional[Path], Optional[Path]]]:
        """Source/target pairs in scan order: resources first, then binaries."""
        return [
            (self.resources_dir, self.target_resources_dir),
            (self.binaries_dir, self.target_binaries_dir),
        ]

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SyncUnit":
        """Create SyncUnit from a configuration dictionary.

        Args:
            data: Dictionary with camelCase keys (resourcesDir,
                targetResourcesDir, binariesDir, targetBinariesDir,
                extensions, regex or pattern, updateInterval)

        Returns:
            SyncUnit instance

        Raises:
            ValueError: If a field has the wrong type or the regex is invalid
        """
        extensions = data.get("extensions")
        if extensions is not None and (
            not isinstance(extensions, list)
            or not all(isinstance(ext, str) for ext in extensions)
        ):
            raise ValueError("'extensions' must be a list of suffixes")

        pattern = data.get("regex", data.get("pattern"))
        if pattern:
            if not isinstance(pattern, str):
                raise ValueError("'regex' must be a string")
            try:
                re.compile(pattern)
            except re.error as e:
                raise ValueError(f"Invalid regex {pattern!r}: {e}") from e

        interval = data.get("updateInterval", 0)
        try:
            interval = int(interval or 0)
        except (TypeError, ValueError) as e:
            raise ValueError(f"Invalid updateInterval: {interval!r}") from e

        return cls(
            resources_dir=data.get("resourcesDir"),
            target_resources_dir=data.get("targetResourcesDir"),
            binaries_dir=data.get("binariesDir"),
            target_binaries_dir=data.get("targetBinariesDir"),
            extensions=extensions,
            pattern=pattern,
            update_interval=interval,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert unit to a configuration dictionary."""

        def _str(path: Optional[Path]) -> Optional[str]:
            return str(path) if path is not None else None

        return {
            "resourcesDir": _str(self.resources_dir),
            "targetResourcesDir": _str(self.target_resources_dir),
            "binariesDir": _str(self.binaries_dir),
            "targetBinariesDir": _str(self.target_binaries_dir),
            "extensions": self.extensions,
            "regex": self.pattern,
            "updateInterval": self.update_interval,
        }

    def __str__(self) -> str:
        return (
            f"{self.resources_dir} -> {self.target_resources_dir}, "
            f"{self.binaries_dir} -> {self.target_binaries_dir} "
            f"(every {self.interval_seconds}s)"
        )
