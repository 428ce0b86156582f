"""Configuration management for the remote deployer connection."""

import os
from pathlib import Path
from typing import Optional

from dotenv import dotenv_values, set_key

DEFAULT_DEPLOYER_HOST = "localhost"
DEFAULT_DEPLOYER_PORT = 8080
DEPLOYER_CONTEXT = "/tomee/ejb"

ENV_DEPLOYER_URL = "LIVESYNC_DEPLOYER_URL"
ENV_DEPLOYER_USER = "LIVESYNC_DEPLOYER_USER"
ENV_DEPLOYER_PASSWORD = "LIVESYNC_DEPLOYER_PASSWORD"


def build_deployer_url(
    host: str = DEFAULT_DEPLOYER_HOST, port: int = DEFAULT_DEPLOYER_PORT
) -> str:
    """Build the deployer endpoint URL for a server host and HTTP port.

    Examples:
        >>> build_deployer_url("example.org", 8181)
        'http://example.org:8181/tomee/ejb'
    """
    return f"http://{host}:{port}{DEPLOYER_CONTEXT}"


class Config:
    """Deployer settings read from the environment and a dotenv file.

    Environment variables take precedence over values stored in
    ``~/.config/pylivesync/config``.
    """

    def __init__(self, config_dir: Optional[Path] = None):
        if config_dir is None:
            config_dir = Path.home() / ".config" / "pylivesync"
        self.config_dir = config_dir
        self.config_file = config_dir / "config"

    def _get(self, key: str) -> Optional[str]:
        value = os.environ.get(key)
        if value:
            return value
        if not self.config_file.exists():
            return None
        return dotenv_values(self.config_file).get(key) or None

    @property
    def deployer_url(self) -> Optional[str]:
        """Deployer endpoint URL."""
        return self._get(ENV_DEPLOYER_URL)

    @property
    def deployer_user(self) -> Optional[str]:
        """User name for HTTP basic auth against the deployer."""
        return self._get(ENV_DEPLOYER_USER)

    @property
    def deployer_password(self) -> Optional[str]:
        """Password for HTTP basic auth against the deployer."""
        return self._get(ENV_DEPLOYER_PASSWORD)

    def is_configured(self) -> bool:
        """Check whether a deployer URL is available."""
        return self.deployer_url is not None

    def get_config_path(self) -> Path:
        """Get the path of the config file."""
        return self.config_file

    def save_deployer_url(self, url: str) -> None:
        """Store the deployer URL, keeping other stored settings.

        Args:
            url: Deployer endpoint URL
        """
        self.config_dir.mkdir(parents=True, exist_ok=True)
        self.config_file.touch(exist_ok=True)
        set_key(self.config_file, ENV_DEPLOYER_URL, url)
        # Credentials may live in this file
        self.config_file.chmod(0o600)


config = Config()
