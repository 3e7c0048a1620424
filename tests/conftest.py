"""Shared fixtures: in-memory collaborators and a controller wired to them."""

from __future__ import annotations

import pytest

from pushlane.configuration.settings import Settings
from pushlane.controller import NotificationController
from pushlane.notifications.channels import ChannelRegistrar
from pushlane.notifications.models import NotificationLog
from pushlane.notifications.renderer import NotificationRenderer
from pushlane.push.memory import (
    InMemoryLocalNotifier,
    InMemoryPushProvider,
    RecordingAlertPresenter,
    RecordingAnalyticsBackend,
)
from pushlane.push.router import LifecycleRouter
from pushlane.telemetry.emitter import TelemetryEmitter


@pytest.fixture
def settings() -> Settings:
    return Settings.model_validate({"telemetry": {"app_version": "9.9.9-test"}})


@pytest.fixture
def provider() -> InMemoryPushProvider:
    return InMemoryPushProvider(token="test-device-token-0123456789")


@pytest.fixture
def notifier() -> InMemoryLocalNotifier:
    return InMemoryLocalNotifier()


@pytest.fixture
def analytics() -> RecordingAnalyticsBackend:
    return RecordingAnalyticsBackend()


@pytest.fixture
def alerts() -> RecordingAlertPresenter:
    return RecordingAlertPresenter()


@pytest.fixture
def emitter(analytics: RecordingAnalyticsBackend, settings: Settings) -> TelemetryEmitter:
    return TelemetryEmitter(analytics, app_version=settings.telemetry.app_version)


@pytest.fixture
def registrar(
    notifier: InMemoryLocalNotifier, settings: Settings, emitter: TelemetryEmitter
) -> ChannelRegistrar:
    return ChannelRegistrar(notifier, settings.channel, emitter)


@pytest.fixture
def renderer(
    notifier: InMemoryLocalNotifier,
    registrar: ChannelRegistrar,
    emitter: TelemetryEmitter,
    settings: Settings,
) -> NotificationRenderer:
    return NotificationRenderer(notifier, registrar, emitter, settings.rendering)


@pytest.fixture
def notification_log() -> NotificationLog:
    return NotificationLog()


@pytest.fixture
def router(
    provider: InMemoryPushProvider,
    renderer: NotificationRenderer,
    alerts: RecordingAlertPresenter,
    emitter: TelemetryEmitter,
    notification_log: NotificationLog,
    registrar: ChannelRegistrar,
) -> LifecycleRouter:
    registrar.register_default_channel()
    return LifecycleRouter(provider, renderer, alerts, emitter, notification_log)


@pytest.fixture
def controller(
    provider: InMemoryPushProvider,
    notifier: InMemoryLocalNotifier,
    analytics: RecordingAnalyticsBackend,
    alerts: RecordingAlertPresenter,
    settings: Settings,
) -> NotificationController:
    return NotificationController(provider, notifier, analytics, alerts, settings=settings)
