"""Tests for the SetOnce memo cell."""

import asyncio

import pytest

from commit_lsp.integrations.trackers.base import SetOnce


class TestSetOnce:
    """Tests for SetOnce."""

    @pytest.mark.asyncio
    async def test_initializes_once(self):
        cell: SetOnce[str] = SetOnce()
        calls = 0

        async def factory() -> str:
            nonlocal calls
            calls += 1
            return "value"

        assert await cell.get_or_init(factory) == "value"
        assert await cell.get_or_init(factory) == "value"
        assert calls == 1
        assert cell.is_set

    @pytest.mark.asyncio
    async def test_concurrent_callers_share_result(self):
        cell: SetOnce[int] = SetOnce()
        calls = 0

        async def factory() -> int:
            nonlocal calls
            calls += 1
            await asyncio.sleep(0.01)
            return calls

        results = await asyncio.gather(*(cell.get_or_init(factory) for _ in range(5)))

        assert results == [1] * 5
        assert calls == 1

    @pytest.mark.asyncio
    async def test_failure_is_not_stored(self):
        cell: SetOnce[str] = SetOnce()
        attempts = 0

        async def factory() -> str:
            nonlocal attempts
            attempts += 1
            if attempts == 1:
                raise RuntimeError("first attempt fails")
            return "ok"

        with pytest.raises(RuntimeError):
            await cell.get_or_init(factory)
        assert not cell.is_set
        assert cell.get() is None

        assert await cell.get_or_init(factory) == "ok"
        assert attempts == 2
