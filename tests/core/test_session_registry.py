from decimal import Decimal
from unittest.mock import patch

import pytest
from payment_demo.core.coordinator import PaymentSessionCoordinator
from payment_demo.core.stage import Stage, StageSignal
from payment_demo.core.transaction import PaymentStatus, TransactionRequest
from payment_demo.exceptions import DuplicateTransactionError


def _request(amount: str = "9.99") -> TransactionRequest:
    return TransactionRequest(amount=Decimal(amount), description="Coffee", merchant_name="Roasters Inc")


@pytest.mark.asyncio
async def test_begin_registers_and_starts_session(registry):
    request = _request()
    session = registry.begin(request)

    assert isinstance(session, PaymentSessionCoordinator)
    assert registry.lookup(request.id) is session
    assert request.id in registry
    assert registry.active_ids() == [request.id]
    assert len(registry) == 1


@pytest.mark.asyncio
async def test_begin_rejects_duplicate_id(registry):
    request = _request()
    first = registry.begin(request)

    with pytest.raises(DuplicateTransactionError) as exc_info:
        registry.begin(request)

    assert exc_info.value.transaction_id == request.id
    assert isinstance(exc_info.value, ValueError)
    assert registry.lookup(request.id) is first
    assert len(registry) == 1


def test_begin_without_running_loop_leaves_no_entry(registry):
    request = _request()
    with pytest.raises(RuntimeError):
        registry.begin(request)
    assert request.id not in registry


@pytest.mark.asyncio
async def test_end_is_idempotent(registry):
    request = _request()
    registry.begin(request)

    registry.end(request.id)
    registry.end(request.id)
    registry.end("never-registered")

    assert registry.lookup(request.id) is None
    assert len(registry) == 0


@pytest.mark.asyncio
async def test_entry_removed_when_session_completes(registry, surface, wait_for_stage):
    request = _request()
    session = registry.begin(request)
    await wait_for_stage(session, Stage.SUMMARY)
    assert request.id in registry

    surface.send(request.id, StageSignal.CANCELLED)
    outcome = await session.wait()

    assert outcome.status is PaymentStatus.CANCELLED
    assert request.id not in registry
    registry.end(request.id)


@pytest.mark.asyncio
async def test_entry_removed_after_callback(registry, surface, wait_for_stage):
    """The registry entry outlives the result callback; removal is the session's last step."""
    request = _request()
    seen_in_registry = []
    session = registry.begin(request, on_result=lambda outcome: seen_in_registry.append(outcome.transaction_id in registry))
    await wait_for_stage(session, Stage.SUMMARY)
    surface.send(request.id, StageSignal.CANCELLED)
    await session.wait()

    assert seen_in_registry == [True]
    assert request.id not in registry


@pytest.mark.asyncio
async def test_end_called_exactly_once_per_session(registry, surface, wait_for_stage):
    request = _request()
    with patch.object(registry, "end", wraps=registry.end) as end_spy:
        session = registry.begin(request)
        await wait_for_stage(session, Stage.SUMMARY)
        surface.send(request.id, StageSignal.CANCELLED)
        await session.wait()

    end_spy.assert_called_once_with(request.id)


class _CountingLock:
    def __init__(self):
        self.acquired = 0

    def __enter__(self):
        self.acquired += 1
        return self

    def __exit__(self, *exc_info):
        return False


def test_every_read_takes_the_lock(registry):
    lock = _CountingLock()
    registry._lock = lock

    assert registry.lookup("missing") is None
    assert "missing" not in registry
    assert len(registry) == 0
    assert registry.active_ids() == []

    assert lock.acquired == 4
