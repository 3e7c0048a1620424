"""Tests for fire-and-forget telemetry emission."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime

import pytest

from pushlane.push.memory import RecordingAnalyticsBackend
from pushlane.telemetry import TelemetryEmitter, TelemetryEventName, flatten_properties
from pushlane.telemetry.events import OpenOrigin, TelemetryEvent


class PerEventDelayBackend(RecordingAnalyticsBackend):
    """Backend whose transport latency depends on the event name."""

    def __init__(self, delays):
        super().__init__()
        self.delays = delays

    async def log_event(self, name, params):
        await asyncio.sleep(self.delays.get(name, 0))
        self.events.append((name, dict(params)))


def test_flatten_properties_drops_none_and_coerces():
    flat = flatten_properties(
        {"title": None, "count": 3, "origin": OpenOrigin.QUIT, "tags": ["a", "b"], "ok": True}
    )

    assert flat == {"count": 3, "origin": "quit", "tags": "['a', 'b']", "ok": True}


def test_enriched_event_carries_timestamp_and_version():
    event = TelemetryEvent.enriched(
        TelemetryEventName.NOTIFICATIONS_CLEARED, {"cleared_count": 2}, app_version="1.2.3"
    )

    assert event.name == "notifications_cleared"
    assert event.properties["cleared_count"] == 2
    assert event.properties["app_version"] == "1.2.3"
    assert datetime.fromisoformat(event.properties["captured_at"]) == event.captured_at


@pytest.mark.asyncio()
async def test_emit_enriches_before_transmission(emitter, analytics):
    emitter.emit("custom_event", {"title": "Hello", "missing": None})
    await emitter.drain()

    assert len(analytics.events) == 1
    name, params = analytics.events[0]
    assert name == "custom_event"
    assert params["title"] == "Hello"
    assert "missing" not in params
    assert params["app_version"] == "9.9.9-test"
    assert "captured_at" in params


@pytest.mark.asyncio()
async def test_emit_does_not_wait_for_delivery(analytics):
    analytics.configure(delay=0.05)
    emitter = TelemetryEmitter(analytics, app_version="1.0.0")

    task = emitter.emit("slow_event")

    assert task is not None
    assert analytics.events == []
    assert emitter.pending_count == 1

    await emitter.drain()

    assert analytics.named("slow_event")
    assert emitter.pending_count == 0


@pytest.mark.asyncio()
async def test_transport_failure_is_swallowed_and_logged(emitter, analytics, caplog):
    analytics.configure(should_succeed=False, failure_reason="offline")

    with caplog.at_level(logging.WARNING, logger="pushlane.telemetry.emitter"):
        emitter.emit("doomed_event")
        await emitter.drain()

    assert analytics.events == []
    assert "Analytics error" in caplog.text
    assert "offline" in caplog.text


@pytest.mark.asyncio()
async def test_failed_event_is_not_retried(emitter, analytics):
    calls = []

    async def failing_log_event(name, params):
        calls.append(name)
        raise ConnectionError("boom")

    analytics.log_event = failing_log_event

    emitter.emit("once")
    await emitter.drain()
    await asyncio.sleep(0)

    assert calls == ["once"]


@pytest.mark.asyncio()
async def test_interleaved_completion_delivers_every_event():
    backend = PerEventDelayBackend({"first": 0.05, "second": 0})
    emitter = TelemetryEmitter(backend, app_version="1.0.0")

    emitter.emit("first")
    emitter.emit("second")
    await emitter.drain()

    assert [name for name, _ in backend.events] == ["second", "first"]


def test_emit_without_running_loop_keeps_local_history(emitter, analytics):
    task = emitter.emit("offline_event", {"n": 1})

    assert task is None
    assert analytics.events == []
    assert [e.name for e in emitter.get_recent_events()] == ["offline_event"]


@pytest.mark.asyncio()
async def test_other_backend_calls_are_fire_and_forget(emitter, analytics):
    emitter.log_app_open()
    emitter.set_user_property("plan", "free")
    emitter.log_screen_view("Home")
    await emitter.drain()

    assert analytics.app_opens == 1
    assert analytics.user_properties == {"plan": "free"}
    assert analytics.screen_views == [{"screen_name": "Home", "screen_class": "Home"}]
    assert [e.name for e in emitter.get_recent_events()] == ["app_open"]


def test_recent_events_filter_and_bound(analytics):
    emitter = TelemetryEmitter(analytics, app_version="1.0.0", history_size=3)
    for index in range(5):
        emitter.emit("tick", {"i": index})
    emitter.emit(TelemetryEventName.TOKEN_COPIED)

    recent = emitter.get_recent_events()
    assert len(recent) == 3
    assert [e.properties.get("i") for e in emitter.get_recent_events("tick")] == [3, 4]
    assert len(emitter.get_recent_events(TelemetryEventName.TOKEN_COPIED)) == 1
