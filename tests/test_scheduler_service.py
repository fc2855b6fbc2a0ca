"""Tests for DeferredRenderScheduler."""

import asyncio
from unittest.mock import AsyncMock

import pytest

from services.scheduler_service import DeferredRenderScheduler


@pytest.mark.asyncio
async def test_callback_runs_after_delay():
    scheduler = DeferredRenderScheduler()
    callback = AsyncMock()

    task = scheduler.schedule("k", 0.01, callback)
    assert scheduler.pending() == ["k"]

    await task

    callback.assert_awaited_once()
    assert scheduler.pending() == []


@pytest.mark.asyncio
async def test_rescheduling_replaces_pending_task():
    scheduler = DeferredRenderScheduler()
    first = AsyncMock()
    second = AsyncMock()

    old = scheduler.schedule("k", 10, first)
    new = scheduler.schedule("k", 0.01, second)
    await new
    await asyncio.gather(old, return_exceptions=True)

    assert old.cancelled()
    first.assert_not_awaited()
    second.assert_awaited_once()


@pytest.mark.asyncio
async def test_cancel_single_key():
    scheduler = DeferredRenderScheduler()
    callback = AsyncMock()

    task = scheduler.schedule("k", 10, callback)
    assert scheduler.cancel("k") is True
    assert scheduler.cancel("k") is False

    await asyncio.gather(task, return_exceptions=True)
    callback.assert_not_awaited()


@pytest.mark.asyncio
async def test_cancel_all_on_shutdown():
    scheduler = DeferredRenderScheduler()
    callback = AsyncMock()

    scheduler.schedule("a", 10, callback)
    scheduler.schedule("b", 10, callback)

    assert await scheduler.cancel_all() == 2
    assert scheduler.pending() == []
    callback.assert_not_awaited()


@pytest.mark.asyncio
async def test_callback_errors_are_logged_not_raised(caplog):
    scheduler = DeferredRenderScheduler()
    callback = AsyncMock(side_effect=RuntimeError("boom"))

    await scheduler.schedule("k", 0, callback)

    assert "boom" in caplog.text
    assert scheduler.pending() == []
