# Author: Green Mountain Systems AI Inc.
# Donated to IAB Tech Lab

"""HTTP client for the DeepOne attribution service."""

import logging
from typing import Any, Optional, Protocol

import httpx

from ..models.fingerprint import DeviceFingerprint

logger = logging.getLogger(__name__)


class DeepOneClientError(Exception):
    """Error from the attribution service."""

    pass


class MissingCredentialsError(DeepOneClientError):
    """The service rejected the API credential."""

    pass


class AttributionTransport(Protocol):
    """Network capability used by the coordinator.

    Failures are reported by raising.
    """

    async def verify(
        self, fingerprint: DeviceFingerprint, api_key: str
    ) -> dict[str, Any]: ...

    async def create_link(
        self, params: dict[str, Any], api_key: str
    ) -> Optional[str]: ...


class DeepOneClient:
    """Async HTTP client for the attribution service."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize the client.

        Args:
            base_url: Base URL for the attribution API
            timeout: Request timeout in seconds
            transport: Optional httpx transport (e.g. httpx.MockTransport)
        """
        self.base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            headers={"Content-Type": "application/json", "Accept": "application/json"},
            timeout=timeout,
            transport=transport,
        )

    def _build_headers(self, api_key: str) -> dict[str, str]:
        """Build per-request headers."""
        return {"X-API-Key": api_key} if api_key else {}

    async def _post(self, path: str, payload: dict[str, Any], api_key: str) -> Any:
        response = await self._client.post(
            path, json=payload, headers=self._build_headers(api_key)
        )
        if response.status_code in (401, 403):
            logger.error(f"DeepOne {path} rejected credential: {response.status_code}")
            raise MissingCredentialsError(
                f"Credential rejected with status {response.status_code}"
            )
        response.raise_for_status()
        return response.json()

    async def verify(
        self, fingerprint: DeviceFingerprint, api_key: str
    ) -> dict[str, Any]:
        """Exchange a device fingerprint for attribution.

        Args:
            fingerprint: Device fingerprint
            api_key: Active API credential

        Returns:
            Response mapping with optional 'isFirstSession' and 'link'
        """
        data = await self._post("/verify", fingerprint.to_payload(), api_key)
        if not isinstance(data, dict):
            raise DeepOneClientError("Unexpected verify response")
        return data

    async def create_link(
        self, params: dict[str, Any], api_key: str
    ) -> Optional[str]:
        """Create an attributed link.

        Args:
            params: Link parameters (see CreateLinkBuilder.build_parameters)
            api_key: Active API credential

        Returns:
            The created link URL, or None if the response carries none
        """
        data = await self._post("/links", params, api_key)
        if not isinstance(data, dict):
            return None
        url = data.get("url", data.get("link"))
        return url if isinstance(url, str) else None

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> "DeepOneClient":
        """Async context manager entry."""
        return self

    async def __aexit__(self, *args: Any) -> None:
        """Async context manager exit."""
        await self.close()
