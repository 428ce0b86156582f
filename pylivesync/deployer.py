"""Client for the application server's remote deployer."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from .config import config
from .exceptions import (
    DeployerAuthenticationError,
    DeployerConfigError,
    DeployerError,
    DeployerInvalidResponseError,
    DeployerNetworkError,
    DeployerNotFoundError,
    DeployerPermissionError,
)

logger = logging.getLogger(__name__)


class DeployerClient:
    """Client for the remote deploy/reload service of a running server.

    Every call opens its own HTTP connection and closes it when done, so a
    client instance holds no network state between calls.
    """

    def __init__(
        self,
        deployer_url: str | None = None,
        username: str | None = None,
        password: str | None = None,
        timeout: float = 30.0,
        enabled: bool = True,
        transport: httpx.BaseTransport | None = None,
    ):
        """Initialize deployer client.

        Args:
            deployer_url: Deployer endpoint URL (uses config if not provided)
            username: Optional user name for basic auth (uses config if not provided)
            password: Optional password for basic auth (uses config if not provided)
            timeout: Request timeout in seconds (default: 30.0)
            enabled: False when the server has no deployer webapp installed
            transport: Optional httpx transport, mainly for tests
        """
        self.deployer_url = deployer_url or config.deployer_url
        self.username = username or config.deployer_user
        self.password = password or config.deployer_password
        self.timeout = timeout
        self.enabled = enabled
        self._transport = transport

    def _new_client(self) -> httpx.Client:
        """Create a single-use httpx client."""
        auth = None
        if self.username:
            auth = httpx.BasicAuth(self.username, self.password or "")
        return httpx.Client(
            auth=auth,
            timeout=httpx.Timeout(self.timeout),
            follow_redirects=True,
            transport=self._transport,
        )

    def _handle_http_error(self, e: httpx.HTTPStatusError) -> DeployerError:
        """Map an HTTP error status to a deployer exception.

        Args:
            e: The HTTP error exception

        Returns:
            Exception to raise
        """
        status_code = e.response.status_code

        if status_code == 401:
            return DeployerAuthenticationError(
                "Deployer rejected the credentials"
            )
        elif status_code == 403:
            return DeployerPermissionError(
                "Access forbidden - check the deployer user roles"
            )
        elif status_code == 404:
            return DeployerNotFoundError("Deployer endpoint or application not found")

        error_msg = f"Deployer request failed with status {status_code}"
        try:
            if e.response.content:
                error_data = e.response.json()
                if isinstance(error_data, dict):
                    msg = error_data.get("message") or error_data.get("error")
                    if msg:
                        error_msg = f"{error_msg}: {msg}"
        except ValueError:
            # Body is not JSON, keep the status-based message
            pass
        return DeployerError(error_msg)

    def _request(self, method: str, endpoint: str, **kwargs: Any) -> Any:
        """Make a single request to the deployer.

        Args:
            method: HTTP method
            endpoint: Endpoint path relative to the deployer URL
            **kwargs: Additional arguments passed to httpx

        Returns:
            Response JSON data, or an empty dict for an empty body

        Raises:
            DeployerConfigError: If the deployer is disabled or not configured
            DeployerError: If the request fails
        """
        if not self.enabled:
            raise DeployerConfigError(
                "Can't use reload feature without the deployer webapp"
            )
        if not self.deployer_url:
            raise DeployerConfigError(
                "Deployer URL not configured. Please set LIVESYNC_DEPLOYER_URL "
                "environment variable."
            )

        url = f"{self.deployer_url.rstrip('/')}/{endpoint.lstrip('/')}"
        try:
            with self._new_client() as client:
                response = client.request(method, url, **kwargs)
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise self._handle_http_error(e) from e
        except httpx.RequestError as e:
            raise DeployerNetworkError(f"Can't reach deployer at {url}: {e}") from e

        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError as e:
            raise DeployerInvalidResponseError(
                f"Invalid JSON response from deployer at {url}"
            ) from e

    def reload(self, application_path: str) -> Any:
        """Reload a deployed application without undeploying it.

        Args:
            application_path: Exploded application path on the server

        Returns:
            Deployer response data

        Examples:
            >>> deployer = DeployerClient("http://localhost:8080/tomee/ejb")
            >>> deployer.reload("/opt/tomee/webapps/app")
        """
        logger.debug("Requesting reload of %s", application_path)
        return self._request("POST", "/reload", json={"path": application_path})
