"""Notification-driven fetch adapter for the Todoist dashboard widget."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Mapping
from typing import Any

from todofetch._api.sync import fetch_tasks
from todofetch._capabilities import Capabilities, load_capabilities
from todofetch._constants import FETCH_NOTIFICATION
from todofetch._redact import redact_for_log
from todofetch._transport import Transport
from todofetch.config import FetchConfig
from todofetch.exceptions import TodoistConfigError
from todofetch.markup import MarkupConverter
from todofetch.models import FetchError, FetchErrorKind, FetchOutcome

_logger = logging.getLogger(__name__)

#: Probed once at import; missing packages are reported here, not per call.
DEFAULT_CAPABILITIES: Capabilities = load_capabilities()

NotificationCallback = Callable[[str, dict[str, Any]], None]


class TodoistFetchAdapter:
    """Fetch the Todoist task list whenever the widget asks for it.

    Usage::

        async with TodoistFetchAdapter(on_notification=send) as adapter:
            await adapter.handle_notification("FETCH_TODOIST", widget_config)

    Every ``FETCH_TODOIST`` trigger produces exactly one ``TASKS`` or
    ``FETCH_ERROR`` notification.  The configuration of the latest trigger
    replaces the previous one (last trigger wins, no merging).

    Overlapping triggers are queued: cycles run one at a time in trigger
    order, each with the configuration it was triggered with, so outcomes
    are delivered in trigger order.  There is no deduplication, no
    cancellation and no timeout.
    """

    def __init__(
        self,
        *,
        on_notification: NotificationCallback | None = None,
        capabilities: Capabilities | None = None,
        transport: Transport | None = None,
        session: Any = None,
    ) -> None:
        self._on_notification = on_notification
        self._capabilities = capabilities if capabilities is not None else DEFAULT_CAPABILITIES
        self._transport = transport
        self._external_session = session is not None
        self._http_session = session
        self._config: FetchConfig | None = None
        self._cycle_lock = asyncio.Lock()
        self._pending: set[asyncio.Task[FetchOutcome | None]] = set()

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> TodoistFetchAdapter:
        self._ensure_transport()
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.close()

    async def close(self) -> None:
        """Wait for queued cycles, then release the HTTP session if owned."""
        if self._pending:
            await asyncio.gather(*self._pending, return_exceptions=True)
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
            self._transport = None

    # ------------------------------------------------------------------
    # Configuration slot
    # ------------------------------------------------------------------

    @property
    def config(self) -> FetchConfig | None:
        """Configuration of the most recent trigger."""
        return self._config

    # ------------------------------------------------------------------
    # Notifications
    # ------------------------------------------------------------------

    async def handle_notification(self, notification: str, payload: Any) -> FetchOutcome | None:
        """Handle one inbound notification; returns the outcome it produced.

        Unknown notifications are ignored and return ``None``.
        """
        if notification != FETCH_NOTIFICATION:
            _logger.debug("Ignoring notification %s", notification)
            return None

        try:
            config = FetchConfig.from_payload(payload)
        except TodoistConfigError as exc:
            _logger.error("Invalid configuration payload: %s", exc)
            outcome = FetchError(kind=FetchErrorKind.CONFIGURATION_ERROR, error=f"Invalid configuration: {exc}")
            self._emit(outcome)
            return outcome

        self._config = config
        _logger.debug("Stored configuration %s", redact_for_log(config.model_dump(by_alias=True)))
        return await self.fetch(config)

    def notify(self, notification: str, payload: Any) -> asyncio.Task[FetchOutcome | None]:
        """Schedule :meth:`handle_notification` without waiting for it.

        Must be called from a running event loop.  :meth:`close` waits for
        scheduled cycles to finish.
        """
        task = asyncio.get_running_loop().create_task(self.handle_notification(notification, payload))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def fetch(self, config: FetchConfig | None = None) -> FetchOutcome:
        """Run one fetch cycle and emit its outcome.

        Uses *config* when given, otherwise the stored configuration.
        """
        cycle_config = config if config is not None else (self._config or FetchConfig())
        async with self._cycle_lock:
            transport = self._ensure_transport()
            converter = self._make_converter()
            outcome = await fetch_tasks(cycle_config, transport, converter)
            self._emit(outcome)
        return outcome

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _ensure_transport(self) -> Transport | None:
        if self._transport is not None:
            return self._transport
        caps = self._capabilities
        if not caps.has_http:
            return None
        assert caps.session_factory is not None and caps.transport_factory is not None  # noqa: S101
        if self._http_session is None:
            self._http_session = caps.session_factory()
        self._transport = caps.transport_factory(self._http_session)
        return self._transport

    def _make_converter(self) -> MarkupConverter | None:
        factory = self._capabilities.converter_factory
        return factory() if factory is not None else None

    def _emit(self, outcome: FetchOutcome) -> None:
        if self._on_notification is None:
            return
        try:
            self._on_notification(outcome.notification, outcome.to_payload())
        except Exception:
            _logger.exception("Notification callback failed for %s", outcome.notification)
