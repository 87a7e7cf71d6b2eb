import asyncio
from unittest.mock import MagicMock

import pytest
from payment_demo.core.coordinator import PaymentSessionCoordinator
from payment_demo.core.dependency_container import DependencyContainer
from payment_demo.core.registry import SessionRegistry
from payment_demo.core.stage import Stage
from payment_demo.facade import PaymentFramework
from payment_demo.overlay.interface import OverlayNotifier
from payment_demo.presentation.headless import HeadlessSurface
from payment_demo.settings import Settings

PROCESSING_SECONDS = 0.05
RETRY_INTERVAL_SECONDS = 0.01
MAX_PRESENTATION_ATTEMPTS = 5
ANNOUNCE_DELAY_SECONDS = 0.01


@pytest.fixture(autouse=True)
def fast_session_timings(monkeypatch):
    """AUTOUSE: shrink every session timer so lifecycle tests finish in milliseconds."""
    monkeypatch.setenv("PAYMENT_PROCESSING_SECONDS", str(PROCESSING_SECONDS))
    monkeypatch.setenv("PAYMENT_RETRY_INTERVAL_SECONDS", str(RETRY_INTERVAL_SECONDS))
    monkeypatch.setenv("PAYMENT_MAX_PRESENTATION_ATTEMPTS", str(MAX_PRESENTATION_ATTEMPTS))
    monkeypatch.setenv("PAYMENT_ANNOUNCE_DELAY_SECONDS", str(ANNOUNCE_DELAY_SECONDS))
    monkeypatch.setenv("PAYMENT_BANNER_SECONDS", "0.2")


@pytest.fixture
def settings():
    return Settings()


@pytest.fixture
def surface():
    """A headless surface with no autopilot; tests play the user through `send`."""
    return HeadlessSurface()


@pytest.fixture
def notifier():
    return MagicMock(spec=OverlayNotifier)


@pytest.fixture
def container(settings, surface, notifier):
    return DependencyContainer(settings=settings, surface=surface, notifier=notifier)


@pytest.fixture
def registry(container):
    return SessionRegistry(container)


@pytest.fixture
def framework(registry):
    return PaymentFramework(registry)


@pytest.fixture
def wait_for_stage():
    """Returns a coroutine function polling a session until it reaches a stage."""

    async def _wait(session: PaymentSessionCoordinator, stage: Stage, timeout: float = 1.0) -> None:
        async def _poll():
            while session.stage is not stage:
                await asyncio.sleep(0.001)

        await asyncio.wait_for(_poll(), timeout)

    return _wait
