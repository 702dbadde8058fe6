import asyncio
import contextlib
from collections import Counter
from collections.abc import AsyncIterator, Hashable


class ResourceLocks:
    """In-process keyed locks serializing mutations of one pool, session or guest.

    Keys are tuples such as ``("pool", pool_id)``. Several keys are always
    acquired in sorted order so two operations touching the same rows cannot
    deadlock. Row locks taken by the SQL write models cover multi-process
    deployments; these cover concurrent requests within one event loop.
    A key is forgotten once nobody holds or waits for it.
    """

    def __init__(self) -> None:
        self._locks: dict[Hashable, asyncio.Lock] = {}
        self._holders: Counter[Hashable] = Counter()

    @staticmethod
    def pool(pool_id) -> tuple[str, str]:
        # "a" sorts before "g" and "s": pool locks come before guest and session locks
        return ("a:pool", str(pool_id))

    @staticmethod
    def guest(guest_id) -> tuple[str, str]:
        return ("g:guest", str(guest_id))

    @staticmethod
    def session(session_id) -> tuple[str, str]:
        return ("s:session", str(session_id))

    @contextlib.asynccontextmanager
    async def _hold_one(self, key: Hashable) -> AsyncIterator[None]:
        lock = self._locks.setdefault(key, asyncio.Lock())
        self._holders[key] += 1
        try:
            async with lock:
                yield
        finally:
            self._holders[key] -= 1
            if self._holders[key] <= 0:
                del self._holders[key]
                del self._locks[key]

    @contextlib.asynccontextmanager
    async def hold(self, *keys: Hashable) -> AsyncIterator[None]:
        ordered = sorted(set(k for k in keys if k is not None))
        async with contextlib.AsyncExitStack() as stack:
            for key in ordered:
                await stack.enter_async_context(self._hold_one(key))
            yield


resource_locks = ResourceLocks()
