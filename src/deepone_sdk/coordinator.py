# Author: Green Mountain Systems AI Inc.
# Donated to IAB Tech Lab

"""Attribution coordinator.

Owns the SDK's mutable state (mode, handler, first-session flag), runs the
verify-then-resolve flow at startup, parses inbound URLs, and submits link
creation requests through the injected transport.

Handlers are always invoked on one event loop (given at construction or
captured by `configure()`), so they never run concurrently with each
other.
"""

import asyncio
import concurrent.futures
import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional, Union
from urllib.parse import urlsplit

from .clients.deepone_client import (
    AttributionTransport,
    DeepOneClient,
    MissingCredentialsError,
)
from .config.settings import Settings, get_settings
from .device.providers import FingerprintProvider, build_fingerprint
from .errors import DeepOneError
from .models.activity import UserActivity
from .models.attribution import AttributionData
from .models.link_builder import CreateLinkBuilder
from .storage.first_session import FirstSessionTracker
from .storage.key_value import FileKeyValueStore, KeyValueStore

logger = logging.getLogger(__name__)

AttributionHandler = Callable[[Optional[AttributionData], Optional[DeepOneError]], None]


@dataclass
class LinkResult:
    """Result of an attributed link creation."""

    url: Optional[str] = None
    error: Optional[DeepOneError] = None

    @property
    def success(self) -> bool:
        return self.error is None and self.url is not None


class DeepOne:
    """Attribution SDK entry point.

    Construct once at application startup and pass it to whatever needs
    attribution.

    Example:
        async with DeepOneClient(settings.api_base_url) as client:
            deepone = DeepOne(client)
            deepone.configure(development_mode=True, attribution_handler=on_attribution)
            ...
            deepone.track_url("myapp://product/123?utm_source=email")
    """

    def __init__(
        self,
        transport: AttributionTransport,
        store: Optional[KeyValueStore] = None,
        settings: Optional[Settings] = None,
        fingerprint_provider: Optional[FingerprintProvider] = None,
        loop: Optional[asyncio.AbstractEventLoop] = None,
    ):
        """Initialize the coordinator.

        Args:
            transport: Network capability for verify and link creation
            store: Marker storage (defaults to a file store in settings.storage_dir)
            settings: SDK settings (defaults to the cached environment settings)
            fingerprint_provider: Device signal provider (defaults to the platform's)
            loop: Event loop handlers are dispatched on (captured by configure otherwise)
        """
        self.settings = settings or get_settings()
        self._transport = transport
        self._tracker = FirstSessionTracker(
            store or FileKeyValueStore(self.settings.resolve_storage_dir())
        )
        self._fingerprint_provider = fingerprint_provider
        self._loop = loop

        self._development_mode = False
        self._attribution_handler: Optional[AttributionHandler] = None
        self._verify_task: Optional[asyncio.Task] = None

        self._is_first_session = self._tracker.load()
        # The local marker is consumed at startup; the server's answer decides later.
        self._set_first_session(False)

    @classmethod
    def from_settings(
        cls, settings: Optional[Settings] = None, **kwargs: Any
    ) -> "DeepOne":
        """Create a coordinator talking to the configured attribution service."""
        settings = settings or get_settings()
        client = DeepOneClient(
            base_url=settings.api_base_url,
            timeout=settings.request_timeout,
        )
        return cls(client, settings=settings, **kwargs)

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    @property
    def development_mode(self) -> bool:
        """Whether the test credential is used. Setting it starts no verify flow."""
        return self._development_mode

    @development_mode.setter
    def development_mode(self, value: bool) -> None:
        self._development_mode = value

    @property
    def is_first_session(self) -> bool:
        return self._is_first_session

    @property
    def transport(self) -> AttributionTransport:
        return self._transport

    @property
    def api_key(self) -> str:
        """Credential for the current mode, empty if not configured."""
        key = self.settings.get_api_key(self._development_mode)
        if not key:
            slot = "test" if self._development_mode else "live"
            logger.warning(f"No {slot} API key configured")
        return key

    def _set_first_session(self, value: bool) -> None:
        self._is_first_session = value
        if value:
            self._tracker.reset()
        else:
            self._tracker.mark_seen()

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    def configure(
        self,
        development_mode: bool = False,
        attribution_handler: Optional[AttributionHandler] = None,
    ) -> Optional[Union[asyncio.Task, concurrent.futures.Future]]:
        """Store mode and handler, then start the verify flow.

        A previous verify flow that has not completed is cancelled and never
        calls a handler.

        The flow runs on the event loop of the calling thread. From any other
        thread it is posted to the loop given at construction (or captured by
        an earlier configure). With no loop at all the flow runs to
        completion before this returns.

        Args:
            development_mode: Use the test credential instead of the live one
            attribution_handler: Called with (data, error) for every attribution

        Returns:
            The task running the verify flow on the calling thread's loop, a
            concurrent future when posted from another thread, or None when
            the flow already ran synchronously
        """
        self._development_mode = development_mode
        self._attribution_handler = attribution_handler

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            loop = None

        if loop is not None:
            self._loop = loop
            return self._start_verify()

        if self._loop is not None and self._loop.is_running():
            logger.debug("Posting attribution analysis to the event loop thread")
            return asyncio.run_coroutine_threadsafe(
                self._run_posted_verify(), self._loop
            )

        logger.debug("No event loop available, running attribution analysis inline")
        self._loop = None
        asyncio.run(self._perform_attribution_analysis())
        return None

    def resolve_universal_link(self, activity: UserActivity) -> bool:
        """Handle a 'continue activity' event.

        Returns:
            True if the activity was a web-browsing activity carrying a URL
        """
        if not activity.is_browsing_web or not activity.webpage_url:
            return False
        self._process_attribution_data(activity.webpage_url)
        return True

    def track_url(self, url: Optional[str]) -> bool:
        """Handle a URL opened by the host (custom scheme or link).

        Returns:
            True if a URL was supplied
        """
        return self._process_attribution_data(url)

    async def create_attributed_link(
        self, configuration: CreateLinkBuilder
    ) -> LinkResult:
        """Create an attributed link through the transport.

        Args:
            configuration: Link configuration

        Returns:
            LinkResult with the URL or the error
        """
        parameters = configuration.build_parameters()
        if parameters is None:
            return LinkResult(error=DeepOneError.invalid_configuration())

        try:
            url = await self._transport.create_link(parameters, self.api_key)
        except MissingCredentialsError as e:
            return LinkResult(error=DeepOneError.missing_credentials(e))
        except Exception as e:
            logger.error(f"Link creation failed: {e}")
            return LinkResult(error=DeepOneError.network_error(e))

        if not url:
            return LinkResult(error=DeepOneError.invalid_url())
        return LinkResult(url=url)

    def clear_attribution_data(self) -> None:
        """Reset the persisted marker to 'first session'. Does not notify."""
        self._tracker.reset()

    # -------------------------------------------------------------------------
    # Attribution flow
    # -------------------------------------------------------------------------

    def _start_verify(self) -> asyncio.Task:
        """Supersede any pending flow and start a new one. Loop thread only."""
        if self._verify_task is not None and not self._verify_task.done():
            logger.debug("Superseding pending attribution analysis")
            self._verify_task.cancel()

        self._verify_task = self._loop.create_task(self._perform_attribution_analysis())
        return self._verify_task

    async def _run_posted_verify(self) -> None:
        await self._start_verify()

    async def _perform_attribution_analysis(self) -> None:
        fingerprint = build_fingerprint(self._fingerprint_provider)
        logger.debug(f"Verifying device {fingerprint.device_id}")

        try:
            response = await self._transport.verify(fingerprint, self.api_key)
        except Exception as e:
            logger.error(f"Attribution analysis failed: {e}")
            self._dispatch(None, DeepOneError.attribution_failed(e))
            return

        if not isinstance(response, dict):
            self._dispatch(
                None,
                DeepOneError.attribution_failed(ValueError("Unusable verify response")),
            )
            return

        is_first_session = response.get("isFirstSession")
        if isinstance(is_first_session, bool):
            self._set_first_session(is_first_session)

        self._process_attribution_data(_destination_url(response.get("link")))

    def _process_attribution_data(self, url: Optional[str]) -> bool:
        attribution_data = AttributionData.from_url(url, self._is_first_session)
        self._dispatch(attribution_data, None)
        return url is not None

    def _dispatch(
        self, data: Optional[AttributionData], error: Optional[DeepOneError]
    ) -> None:
        handler = self._attribution_handler
        if handler is None:
            return

        loop = self._loop
        if loop is not None and loop.is_running():
            loop.call_soon_threadsafe(handler, data, error)
        else:
            handler(data, error)


def _destination_url(value: Any) -> Optional[str]:
    """Get the destination link from a verify response, None if unusable."""
    if not isinstance(value, str) or not value:
        return None
    try:
        components = urlsplit(value)
    except ValueError:
        return None
    return value if components.scheme else None
