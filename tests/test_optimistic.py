"""Optimistic updates and view-scoped calls."""

import asyncio

import pytest
from kungfu import Ok, Error, LazyCoroResult

from storefront import OptimisticUpdate, ViewScope, run_optimistic
from storefront._scope import ABORTED_MESSAGE
from storefront.transport import ApiErrorKind


def resolved(result):
    async def run():
        return result

    return LazyCoroResult(run)


class Slot:
    """A single piece of state with a write log."""

    def __init__(self, value):
        self.value = value
        self.writes = []

    def put(self, value):
        self.value = value
        self.writes.append(value)


def keep_pending(value, pending):
    return pending


class TestRunOptimistic:
    async def test_success_settles(self):
        slot = Slot("RECEIVED")
        update = OptimisticUpdate(previous="RECEIVED", pending="PREPARING")

        result = await run_optimistic(update, slot.put, resolved(Ok("PREPARING!")), lambda value, pending: value)

        assert result == Ok("PREPARING!")
        assert slot.writes == ["PREPARING", "PREPARING!"]

    async def test_failure_restores_previous(self):
        previous = {"status": "RECEIVED"}
        slot = Slot(previous)
        update = OptimisticUpdate(previous=previous, pending={"status": "PREPARING"})

        result = await run_optimistic(update, slot.put, resolved(Error("boom")), keep_pending)

        assert result == Error("boom")
        assert slot.value is previous

    async def test_cancellation_restores_previous(self):
        slot = Slot("RECEIVED")
        update = OptimisticUpdate(previous="RECEIVED", pending="PREPARING")

        async def never():
            await asyncio.Event().wait()

        task = asyncio.create_task(run_optimistic(update, slot.put, LazyCoroResult(never), keep_pending))
        await asyncio.sleep(0)
        assert slot.value == "PREPARING"
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task
        assert slot.value == "RECEIVED"


class TestViewScope:
    async def test_passes_results_through(self):
        async with ViewScope() as scope:
            assert await scope.run(resolved(Ok(1))) == Ok(1)
            assert scope.in_flight == 0

    async def test_dispose_aborts_in_flight(self):
        scope = ViewScope()

        async def never():
            await asyncio.Event().wait()

        pending = asyncio.create_task(scope.run(LazyCoroResult(never)))
        await asyncio.sleep(0)
        assert scope.in_flight == 1
        scope.dispose()

        error = (await pending).unwrap_err()

        assert error.kind is ApiErrorKind.ABORTED
        assert error.message == ABORTED_MESSAGE

    async def test_disposed_scope_aborts_immediately(self):
        scope = ViewScope()
        scope.dispose()

        calls = []

        async def call():
            calls.append(True)
            return Ok(None)

        result = await scope.run(LazyCoroResult(call))

        assert result.unwrap_err().is_aborted
        assert calls == []

    async def test_caller_cancellation_propagates(self):
        scope = ViewScope()

        async def never():
            await asyncio.Event().wait()

        pending = asyncio.create_task(scope.run(LazyCoroResult(never)))
        await asyncio.sleep(0)
        pending.cancel()

        with pytest.raises(asyncio.CancelledError):
            await pending
