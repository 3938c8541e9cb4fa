import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager


class DeviceLocks:
    """One asyncio.Lock per device_id, created on first use.

    Ingest, status reads and sweep ticks all take the device's lock around
    their read-evaluate-write step so they never interleave on one row.
    """

    def __init__(self) -> None:
        self._locks: dict[str, asyncio.Lock] = {}

    def get(self, device_id: str) -> asyncio.Lock:
        lock = self._locks.get(device_id)
        if lock is None:
            lock = self._locks[device_id] = asyncio.Lock()
        return lock

    @asynccontextmanager
    async def hold(self, device_id: str) -> AsyncIterator[None]:
        async with self.get(device_id):
            yield

    def __len__(self) -> int:
        return len(self._locks)
