import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, Tuple


class ContainerLocks:
    """Per-container critical sections for read-then-write position updates.

    A container is a board (for its lists) or a list (for its cards). Locks are
    created on demand and dropped once nobody holds or waits on them, so the
    registry never grows past the set of containers being written right now.
    """

    def __init__(self) -> None:
        self._locks: Dict[Tuple[str, int], asyncio.Lock] = {}
        self._holders: Dict[Tuple[str, int], int] = {}

    @asynccontextmanager
    async def hold(self, kind: str, container_id: int) -> AsyncIterator[None]:
        key = (kind, container_id)
        lock = self._locks.setdefault(key, asyncio.Lock())
        self._holders[key] = self._holders.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._holders[key] -= 1
            if not self._holders[key]:
                del self._holders[key]
                del self._locks[key]

    def is_held(self, kind: str, container_id: int) -> bool:
        lock = self._locks.get((kind, container_id))
        return lock is not None and lock.locked()


container_locks = ContainerLocks()
