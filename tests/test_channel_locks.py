"""Tests for ChannelLockRegistry."""

import asyncio

import pytest

from services.channel_locks import ChannelLockRegistry


@pytest.mark.asyncio
async def test_same_channel_runs_one_at_a_time():
    registry = ChannelLockRegistry()
    order = []

    async def work(name):
        async with registry.hold("C1"):
            order.append(f"{name}-start")
            await asyncio.sleep(0.01)
            order.append(f"{name}-end")

    await asyncio.gather(work("a"), work("b"))

    assert order == ["a-start", "a-end", "b-start", "b-end"]


@pytest.mark.asyncio
async def test_different_channels_do_not_block():
    registry = ChannelLockRegistry()
    order = []

    async def work(channel):
        async with registry.hold(channel):
            order.append(f"{channel}-start")
            await asyncio.sleep(0.01)
            order.append(f"{channel}-end")

    await asyncio.gather(work("C1"), work("C2"))

    assert order[:2] == ["C1-start", "C2-start"]


@pytest.mark.asyncio
async def test_locks_are_dropped_after_use():
    registry = ChannelLockRegistry()

    with pytest.raises(RuntimeError):
        async with registry.hold("C1"):
            assert registry.active_channels() == 1
            raise RuntimeError("boom")

    assert registry.active_channels() == 0
