"""Loading of live sync configuration files."""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from ..utils import DEFAULT_EXTENSIONS, DEFAULT_UPDATE_INTERVAL
from .unit import SyncUnit

logger = logging.getLogger(__name__)


class SyncConfigError(ValueError):
    """Invalid live sync configuration."""


@dataclass
class BuildLayout:
    """Conventional build and server directories used to fill unset unit paths."""

    build_dir: Optional[Path] = None
    """Build output directory (e.g. ``target``)"""

    base_dir: Optional[Path] = None
    """Project base directory"""

    catalina_base: Optional[Path] = None
    """Base directory of the running server"""

    webapp_dir: str = "webapps"
    """Deployment directory below the server base"""

    final_name: Optional[str] = None
    """Name of the deployed application"""

    @classmethod
    def from_dict(cls, data: dict[str, Any], root: Path) -> "BuildLayout":
        """Create BuildLayout from a configuration dictionary.

        Args:
            data: Dictionary with buildDir, baseDir, catalinaBase, webappDir
                and finalName keys
            root: Directory relative paths are resolved against
        """

        def _path(key: str) -> Optional[Path]:
            value = data.get(key)
            return _resolve(Path(value), root) if value else None

        return cls(
            build_dir=_path("buildDir"),
            base_dir=_path("baseDir"),
            catalina_base=_path("catalinaBase"),
            webapp_dir=data.get("webappDir") or "webapps",
            final_name=data.get("finalName"),
        )

    @property
    def deployed_webapp(self) -> Optional[Path]:
        """Exploded application directory on the server."""
        if self.catalina_base is None or not self.final_name:
            return None
        return self.catalina_base / self.webapp_dir / self.final_name

    def _require(self, value: Optional[Path], what: str) -> Path:
        if value is None:
            raise SyncConfigError(f"Can't derive {what}: layout is incomplete")
        return value

    def apply_defaults(self, unit: SyncUnit) -> SyncUnit:
        """Fill the unset fields of a unit from the build layout.

        Args:
            unit: Sync unit to complete (modified in place)

        Returns:
            The same unit

        Raises:
            SyncConfigError: If a default is needed but the layout lacks it
        """
        if unit.binaries_dir is None:
            build_dir = self._require(self.build_dir, "binariesDir")
            unit.binaries_dir = build_dir / "classes"
        if unit.resources_dir is None:
            base_dir = self._require(self.base_dir, "resourcesDir")
            unit.resources_dir = base_dir / "src" / "main" / "webapp"
        if unit.target_resources_dir is None:
            unit.target_resources_dir = self._require(
                self.deployed_webapp, "targetResourcesDir"
            )
        if unit.target_binaries_dir is None:
            webapp = self._require(self.deployed_webapp, "targetBinariesDir")
            unit.target_binaries_dir = webapp / "WEB-INF" / "classes"
        if unit.update_interval <= 0:
            unit.update_interval = DEFAULT_UPDATE_INTERVAL
        if unit.extensions is None:
            unit.extensions = list(DEFAULT_EXTENSIONS)
        return unit


@dataclass
class LiveSyncConfig:
    """Complete live sync configuration."""

    units: list[SyncUnit] = field(default_factory=list)
    """Sync units in configuration order"""

    reload_on_update: bool = False
    """Reload the deployed application when files were copied"""

    deployed_artifact: Optional[Path] = None
    """Deployed archive or directory of the application"""

    layout: BuildLayout = field(default_factory=BuildLayout)
    """Layout used for defaults"""


def _resolve(path: Path, root: Path) -> Path:
    path = path.expanduser()
    return path if path.is_absolute() else root / path


def _resolve_unit_paths(unit: SyncUnit, root: Path) -> None:
    for attr in (
        "resources_dir",
        "target_resources_dir",
        "binaries_dir",
        "target_binaries_dir",
    ):
        value = getattr(unit, attr)
        if value is not None:
            setattr(unit, attr, _resolve(value, root))


def parse_sync_config(data: Any, root: Path) -> LiveSyncConfig:
    """Build a LiveSyncConfig from decoded JSON data.

    Args:
        data: Decoded JSON document
        root: Directory relative paths are resolved against

    Returns:
        LiveSyncConfig with every unit fully resolved

    Raises:
        SyncConfigError: If the document is invalid
    """
    if not isinstance(data, dict):
        raise SyncConfigError("Configuration must be a JSON object")

    layout_data = data.get("layout") or {}
    if not isinstance(layout_data, dict):
        raise SyncConfigError("'layout' must be an object")
    layout = BuildLayout.from_dict(layout_data, root)

    raw_units: list[Any] = []
    if data.get("synchronization") is not None:
        raw_units.append(data["synchronization"])
    synchronizations = data.get("synchronizations")
    if synchronizations is not None:
        if not isinstance(synchronizations, list):
            raise SyncConfigError("'synchronizations' must be a list")
        raw_units.extend(synchronizations)

    units: list[SyncUnit] = []
    for i, raw in enumerate(raw_units):
        if not isinstance(raw, dict):
            raise SyncConfigError(f"Synchronization {i} must be an object")
        try:
            unit = SyncUnit.from_dict(raw)
        except ValueError as e:
            raise SyncConfigError(f"Synchronization {i}: {e}") from e
        _resolve_unit_paths(unit, root)
        units.append(layout.apply_defaults(unit))

    artifact = data.get("deployedArtifact")
    deployed_artifact = _resolve(Path(artifact), root) if artifact else None
    if deployed_artifact is None and layout.deployed_webapp is not None:
        deployed_artifact = layout.deployed_webapp

    reload_on_update = data.get("reloadOnUpdate", False)
    if not isinstance(reload_on_update, bool):
        raise SyncConfigError("'reloadOnUpdate' must be true or false")

    return LiveSyncConfig(
        units=units,
        reload_on_update=reload_on_update,
        deployed_artifact=deployed_artifact,
        layout=layout,
    )


def load_sync_config_from_json(path: Path) -> LiveSyncConfig:
    """Load live sync configuration from a JSON file.

    Relative paths inside the file are resolved against the file's directory.

    Args:
        path: Path to the JSON file

    Returns:
        LiveSyncConfig instance

    Raises:
        SyncConfigError: If the file can't be read or is invalid
    """
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError as e:
        raise SyncConfigError(f"Configuration file not found: {path}") from e
    except json.JSONDecodeError as e:
        raise SyncConfigError(f"Invalid JSON in {path}: {e}") from e

    live_config = parse_sync_config(data, path.parent.absolute())
    logger.debug(f"Loaded {len(live_config.units)} sync unit(s) from {path}")
    return live_config
