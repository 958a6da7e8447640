"""
Single-flight cache.

Read-build-write cache used for every derived view and for the cluster
inventory. The lock only guards map mutation, never the build itself, and
at most one build per key is in flight: callers that miss while a build is
running wait on the same future and receive its value or its exception.

Slot lifecycle: Empty -> Populated (first successful build) -> Invalidated
(explicit clear) -> Populated again on the next read. No TTL.
"""

from concurrent.futures import Future
from typing import Callable, Dict, Generic, Hashable, List, Optional, Tuple, TypeVar

import structlog

from chaosmeta.services.concurrency import ReadWriteLock

logger = structlog.get_logger()

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


class SingleFlightCache(Generic[K, V]):
    """Keyed cache with per-key build deduplication and manual invalidation."""

    def __init__(self, name: str):
        self.name = name
        self._lock = ReadWriteLock()
        self._values: Dict[K, V] = {}
        self._inflight: Dict[K, Future] = {}
        # Bumped by invalidate(); builds started under an older generation
        # do not store their result.
        self._generation = 0

    def peek(self, key: K) -> Tuple[bool, Optional[V]]:
        """Return (found, value) without building."""
        with self._lock.read_lock():
            if key in self._values:
                return True, self._values[key]
        return False, None

    def contains(self, key: K) -> bool:
        with self._lock.read_lock():
            return key in self._values

    def keys(self) -> List[K]:
        with self._lock.read_lock():
            return list(self._values)

    def get_or_build(
        self,
        key: K,
        builder: Callable[[], V],
        should_store: Optional[Callable[[V], bool]] = None,
    ) -> V:
        """
        Return the cached value for key, building it on a miss.

        Args:
            key: Cache key
            builder: Zero-argument callable producing the value
            should_store: Optional predicate; results it rejects are returned
                but not cached

        Raises:
            Whatever the builder raises. The slot stays empty.
        """
        found, value = self.peek(key)
        if found:
            return value

        with self._lock.write_lock():
            if key in self._values:
                return self._values[key]
            future = self._inflight.get(key)
            owner = future is None
            if owner:
                future = Future()
                self._inflight[key] = future
                generation = self._generation

        if not owner:
            logger.debug("Awaiting in-flight build", cache=self.name, key=str(key))
            return future.result()

        try:
            value = builder()
        except BaseException as e:
            with self._lock.write_lock():
                if self._inflight.get(key) is future:
                    del self._inflight[key]
            future.set_exception(e)
            raise

        with self._lock.write_lock():
            if self._inflight.get(key) is future:
                del self._inflight[key]
            store = should_store is None or should_store(value)
            if store and generation == self._generation:
                self._values[key] = value
        future.set_result(value)
        return value

    def invalidate(self) -> None:
        """Drop every slot. The next read rebuilds lazily."""
        with self._lock.write_lock():
            dropped = len(self._values)
            self._values.clear()
            self._inflight.clear()
            self._generation += 1
        logger.debug("Cache invalidated", cache=self.name, dropped=dropped)
