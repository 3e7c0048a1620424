"""Tests for local notification rendering."""

from __future__ import annotations

import pytest

from pushlane.notifications.models import InboundMessage


@pytest.mark.asyncio()
async def test_missing_title_and_body_use_defaults(registrar, renderer, notifier, emitter):
    registrar.register_default_channel()

    renderer.render(InboundMessage(title=None, body=None))
    await emitter.drain()

    payload = notifier.notifications[0]
    assert payload["title"] == "New Notification"
    assert payload["message"] == "You have a new message"


@pytest.mark.asyncio()
async def test_payload_targets_registered_channel(registrar, renderer, notifier, emitter):
    registrar.register_default_channel()

    renderer.render(InboundMessage(title="Sale", body="50% off", data={"sku": "123"}))
    await emitter.drain()

    payload = notifier.notifications[0]
    assert payload["channelId"] == "default_notification_channel"
    assert payload["importance"] == "max"
    assert payload["priority"] == "max"
    assert payload["vibration"] == 300
    assert payload["actions"] == ["View"]
    assert payload["invokeApp"] is True
    assert payload["userInfo"] == {"sku": "123"}


@pytest.mark.asyncio()
async def test_telemetry_summarizes_without_payload(registrar, renderer, analytics, emitter):
    registrar.register_default_channel()

    renderer.render(InboundMessage(title="Sale", body="50% off", data={"secret": "value"}))
    await emitter.drain()

    (params,) = analytics.named("notification_received")
    assert params["title"] == "Sale"
    assert params["body_length"] == len("50% off")
    assert params["has_payload"] is True
    assert "secret" not in params
    assert "value" not in params.values()


@pytest.mark.asyncio()
async def test_render_before_registration_registers_channel(registrar, renderer, notifier, emitter):
    assert not registrar.is_registered

    renderer.render(InboundMessage(title="Early"))
    await emitter.drain()

    assert registrar.is_registered
    assert notifier.dropped == []
    assert notifier.notifications[0]["title"] == "Early"


@pytest.mark.asyncio()
async def test_render_failure_is_reported_not_raised(registrar, renderer, notifier, analytics, emitter):
    registrar.register_default_channel()
    notifier.fail_rendering("renderer crashed")

    renderer.render(InboundMessage(title="Boom"))
    await emitter.drain()

    (failure,) = analytics.named("notification_render_failed")
    assert failure["error_code"] == "RENDER_ERROR"
    assert failure["error_type"] == "RuntimeError"
    assert analytics.named("notification_received")


@pytest.mark.asyncio()
async def test_test_notification(registrar, renderer, notifier, analytics, emitter):
    registrar.register_default_channel()

    renderer.render_test()
    await emitter.drain()

    payload = notifier.notifications[0]
    assert payload["title"] == "🧪 Test Notification"
    assert payload["message"] == "If you see this, notifications are working!"
    assert analytics.named("test_local_notification")


@pytest.mark.asyncio()
async def test_channel_failure_during_render_is_contained(renderer, notifier, analytics, emitter):
    notifier.channel_error = RuntimeError("channel service unavailable")

    renderer.render(InboundMessage(title="No channel yet"))
    await emitter.drain()

    assert analytics.named("channel_registration_failed")
    (received,) = analytics.named("notification_received")
    assert received["title"] == "No channel yet"
