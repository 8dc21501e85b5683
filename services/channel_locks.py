"""
Per-channel locks so that toggles on one channel never interleave.
"""

import asyncio
from contextlib import asynccontextmanager
from typing import Dict

class ChannelLockRegistry:
    """Hands out one asyncio.Lock per channel, dropping it once unused."""

    def __init__(self):
        self._locks: Dict[str, asyncio.Lock] = {}
        self._users: Dict[str, int] = {}

    @asynccontextmanager
    async def hold(self, channel_id: str):
        lock = self._locks.setdefault(channel_id, asyncio.Lock())
        self._users[channel_id] = self._users.get(channel_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._users[channel_id] -= 1
            if self._users[channel_id] == 0:
                del self._users[channel_id]
                del self._locks[channel_id]

    def active_channels(self) -> int:
        return len(self._locks)
