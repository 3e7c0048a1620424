"""Data model for push deliveries and their local receipts.

- DeviceToken: the current push delivery identity
- PermissionState: outcome of the one-shot permission negotiation
- InboundMessage: one push delivery as handed over by the push provider
- NotificationRecord: receipt of a message the user saw live in the foreground
- ChannelConfig: the local rendering channel declaration
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple

# Local channels are always declared at the platform's highest importance.
MAX_IMPORTANCE = 5


class PermissionState(str, Enum):
    """Notification permission as negotiated with the host platform."""

    UNDETERMINED = "undetermined"
    AUTHORIZED = "authorized"
    PROVISIONAL = "provisional"
    DENIED = "denied"

    @property
    def is_enabled(self) -> bool:
        """Authorized and provisional both allow delivery."""
        return self in (PermissionState.AUTHORIZED, PermissionState.PROVISIONAL)


class LifecycleState(str, Enum):
    """Host application state at the moment a push event arrives."""

    FOREGROUND = "foreground"
    BACKGROUND = "background"
    TERMINATED = "terminated"


@dataclass(frozen=True)
class DeviceToken:
    """Opaque push delivery identity.

    The value is never written to telemetry; only its length is.
    """

    value: str

    @property
    def length(self) -> int:
        return len(self.value)

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class InboundMessage:
    """A single push delivery.

    Attributes:
        title: Notification title, if the sender supplied one
        body: Notification body, if the sender supplied one
        data: Opaque key/value payload
        message_id: Provider message identifier, if known
    """

    title: Optional[str] = None
    body: Optional[str] = None
    data: Mapping[str, str] = field(default_factory=dict)
    message_id: Optional[str] = None

    @property
    def has_payload(self) -> bool:
        return bool(self.data)

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "InboundMessage":
        """Build from a provider message shaped like ``{"notification": {...}, "data": {...}}``."""
        notification = payload.get("notification") or {}
        data = payload.get("data") or {}
        return cls(
            title=notification.get("title"),
            body=notification.get("body"),
            data={str(k): str(v) for k, v in data.items()},
            message_id=payload.get("messageId") or payload.get("message_id"),
        )


@dataclass(frozen=True)
class NotificationRecord:
    """Receipt of a foreground delivery.

    Attributes:
        record_id: Arrival-time based identifier, strictly increasing per process
        title: Displayed title (default applied)
        body: Displayed body (default applied)
        received_at: Local wall-clock arrival time
    """

    record_id: int
    title: str
    body: str
    received_at: datetime

    @property
    def time(self) -> str:
        """Display time, e.g. ``14:03:27``."""
        return self.received_at.strftime("%H:%M:%S")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.record_id,
            "title": self.title,
            "body": self.body,
            "time": self.time,
        }


@dataclass(frozen=True)
class ChannelConfig:
    """Local notification channel declaration."""

    channel_id: str
    name: str
    description: str
    importance: int = MAX_IMPORTANCE
    play_sound: bool = True
    sound_name: str = "default"
    vibrate: bool = True

    def to_platform(self) -> Dict[str, Any]:
        """Shape expected by the local notifier's ``create_channel``."""
        return {
            "channelId": self.channel_id,
            "channelName": self.name,
            "channelDescription": self.description,
            "playSound": self.play_sound,
            "soundName": self.sound_name,
            "importance": self.importance,
            "vibrate": self.vibrate,
        }


class NotificationLog:
    """Append-only, in-memory sequence of foreground notification records.

    Insertion order is arrival order. Records are only ever removed all at
    once through :meth:`clear`.
    """

    def __init__(self, clock=time.time) -> None:
        self._records: List[NotificationRecord] = []
        self._clock = clock
        self._last_id = 0

    def _next_id(self) -> int:
        # Millisecond arrival time, bumped when two arrivals share a tick.
        candidate = int(self._clock() * 1000)
        if candidate <= self._last_id:
            candidate = self._last_id + 1
        self._last_id = candidate
        return candidate

    def append(self, title: str, body: str) -> NotificationRecord:
        record = NotificationRecord(
            record_id=self._next_id(),
            title=title,
            body=body,
            received_at=datetime.now(),
        )
        self._records.append(record)
        return record

    def clear(self) -> int:
        """Remove every record.

        Returns:
            Number of records removed
        """
        count = len(self._records)
        self._records = []
        return count

    def snapshot(self) -> Tuple[NotificationRecord, ...]:
        return tuple(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[NotificationRecord]:
        return iter(tuple(self._records))
