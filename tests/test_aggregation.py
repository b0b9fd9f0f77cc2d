"""
Tests for concurrent lookups (catalog.services.aggregation).

pytest-asyncio runs each coroutine test on its own event loop.
"""

import asyncio
import threading
import time

import pytest

from catalog.exceptions import StoreFailure, StoreTimeout
from catalog.services.aggregation import gather_named


class TestGatherNamed:
    """Tests for gather_named()."""

    @pytest.mark.asyncio
    async def test_empty_lookups(self):
        assert await gather_named({}) == {}

    @pytest.mark.asyncio
    async def test_returns_every_result_by_name(self):
        results = await gather_named(
            {
                "author": lambda: {"name": "Jane Austen"},
                "author_books": lambda: ["Emma", "Persuasion"],
            }
        )

        assert results == {
            "author": {"name": "Jane Austen"},
            "author_books": ["Emma", "Persuasion"],
        }

    @pytest.mark.asyncio
    async def test_none_is_a_result(self):
        results = await gather_named({"author": lambda: None})

        assert results == {"author": None}

    @pytest.mark.asyncio
    async def test_accepts_coroutine_lookups(self):
        async def count():
            await asyncio.sleep(0)
            return 3

        results = await gather_named({"count": count, "name": lambda: "x"})

        assert results == {"count": 3, "name": "x"}

    @pytest.mark.asyncio
    async def test_lookups_run_concurrently(self):
        # Both lookups wait for each other; run one after the other they'd
        # never both get through the barrier.
        barrier = threading.Barrier(2, timeout=2)

        def lookup():
            barrier.wait()
            return True

        results = await gather_named({"a": lookup, "b": lookup}, timeout=5)

        assert results == {"a": True, "b": True}

    @pytest.mark.asyncio
    async def test_first_failure_is_raised(self):
        def broken():
            raise StoreFailure("Store operation failed")

        with pytest.raises(StoreFailure, match="Store operation failed"):
            await gather_named({"ok": lambda: 1, "broken": broken})

    @pytest.mark.asyncio
    async def test_declaration_order_breaks_ties(self):
        async def first():
            raise ValueError("first")

        async def second():
            raise KeyError("second")

        with pytest.raises(ValueError, match="first"):
            await gather_named({"first": first, "second": second})

    @pytest.mark.asyncio
    async def test_pending_lookups_cancelled_on_failure(self):
        cancelled = asyncio.Event()

        async def slow():
            try:
                await asyncio.sleep(10)
            except asyncio.CancelledError:
                cancelled.set()
                raise

        async def broken():
            raise StoreFailure("boom")

        with pytest.raises(StoreFailure):
            await gather_named({"slow": slow, "broken": broken})

        await asyncio.wait_for(cancelled.wait(), timeout=1)
        assert cancelled.is_set()

    @pytest.mark.asyncio
    async def test_timeout_raises_store_timeout(self):
        def slow():
            time.sleep(0.5)
            return "late"

        with pytest.raises(StoreTimeout) as exc_info:
            await gather_named({"slow": slow}, timeout=0.05)

        assert exc_info.value.lookup == "slow"
        assert isinstance(exc_info.value, StoreFailure)
