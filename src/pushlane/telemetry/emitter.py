"""Fire-and-forget telemetry emission.

Every call returns immediately. Delivery to the analytics backend runs as a
detached task on the running event loop; failures are logged and dropped,
never retried and never raised to the caller. Delivery is at-most-once.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any, Awaitable, Callable, List, Mapping, Optional, Set, Union

from pushlane.errors import TelemetryDeliveryError, wrap_collaborator_error
from pushlane.telemetry.events import Scalar, TelemetryEvent, TelemetryEventName, to_scalar

if TYPE_CHECKING:
    from pushlane.push.ports import AnalyticsBackend

logger = logging.getLogger(__name__)


class TelemetryEmitter:
    """Best-effort event logger with fixed metadata enrichment.

    Example:
        emitter = TelemetryEmitter(backend, app_version="1.0.0")
        emitter.emit("notification_received", {"title": "Hi"})
        ...
        await emitter.drain()
    """

    def __init__(
        self,
        backend: "AnalyticsBackend",
        *,
        app_version: str,
        history_size: int = 1000,
    ) -> None:
        """Initialize emitter.

        Args:
            backend: Analytics collector the events are sent to
            app_version: Static version tag added to every event
            history_size: Number of recent events kept locally
        """
        self._backend = backend
        self._app_version = app_version
        self._pending: Set[asyncio.Task] = set()
        self._history: List[TelemetryEvent] = []
        self._max_history = history_size

    @property
    def app_version(self) -> str:
        return self._app_version

    @property
    def pending_count(self) -> int:
        """Number of deliveries still in flight."""
        return len(self._pending)

    def emit(
        self,
        event_name: Union[str, TelemetryEventName],
        properties: Optional[Mapping[str, Any]] = None,
    ) -> Optional[asyncio.Task]:
        """Enrich and dispatch an event without waiting for delivery.

        Args:
            event_name: Event name
            properties: Flat event properties

        Returns:
            The delivery task, or None if no event loop is running
        """
        event = TelemetryEvent.enriched(event_name, properties, app_version=self._app_version)
        self._remember(event)
        return self._dispatch(
            f"event {event.name}",
            lambda: self._backend.log_event(event.name, dict(event.properties)),
        )

    def set_user_property(self, key: str, value: Any) -> Optional[asyncio.Task]:
        scalar: Optional[Scalar] = None if value is None else to_scalar(value)
        return self._dispatch(
            f"user property {key}",
            lambda: self._backend.set_user_property(key, scalar),
        )

    def log_screen_view(
        self, screen_name: str, screen_class: Optional[str] = None
    ) -> Optional[asyncio.Task]:
        params = {"screen_name": screen_name, "screen_class": screen_class or screen_name}
        return self._dispatch(
            f"screen view {screen_name}",
            lambda: self._backend.log_screen_view(params),
        )

    def log_app_open(self) -> Optional[asyncio.Task]:
        self._remember(
            TelemetryEvent.enriched(
                TelemetryEventName.APP_OPEN, None, app_version=self._app_version
            )
        )
        return self._dispatch("app open", self._backend.log_app_open)

    async def drain(self) -> None:
        """Wait for every in-flight delivery to settle."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    def get_recent_events(
        self,
        name: Optional[Union[str, TelemetryEventName]] = None,
        limit: int = 100,
    ) -> List[TelemetryEvent]:
        """Get recently emitted events, oldest first.

        Args:
            name: Filter by event name (optional)
            limit: Maximum events to return
        """
        events = self._history
        if name is not None:
            wanted = name.value if isinstance(name, TelemetryEventName) else name
            events = [e for e in events if e.name == wanted]
        return events[-limit:]

    def _remember(self, event: TelemetryEvent) -> None:
        self._history.append(event)
        if len(self._history) > self._max_history:
            self._history = self._history[-self._max_history:]

    def _dispatch(
        self, label: str, call: Callable[[], Awaitable[None]]
    ) -> Optional[asyncio.Task]:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning(f"Telemetry {label} dropped: no running event loop")
            return None

        task = loop.create_task(self._deliver(label, call))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def _deliver(self, label: str, call: Callable[[], Awaitable[None]]) -> None:
        try:
            await call()
        except Exception as exc:
            error = wrap_collaborator_error(TelemetryDeliveryError, exc)
            logger.warning(f"Analytics error for {label}: {error}")
            return
        logger.debug(f"Logged telemetry {label}")
