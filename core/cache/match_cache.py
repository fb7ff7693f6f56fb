"""Match Cache - per-key coordinator for ranked match computations.

Each key (a requirement set id) moves through EMPTY -> COMPUTING -> READY.
Callers asking for a (key, version) that is already being computed wait on
the in-flight Future instead of starting a duplicate. Completed results are
kept only when their version is the highest one requested for the key, so a
slow, superseded computation can never overwrite a newer one.
"""
import logging
import threading
from concurrent.futures import Future
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Generic, Optional, TypeVar

from core.exceptions import CacheCoordinationError

logger = logging.getLogger(__name__)

T = TypeVar('T')


class CacheState(str, Enum):
    EMPTY = "empty"
    COMPUTING = "computing"
    READY = "ready"


@dataclass
class _Entry:
    state: CacheState = CacheState.EMPTY
    value: Any = None
    version: Optional[int] = None
    highest_requested: int = -1
    generation: int = 0
    in_flight: Dict[int, Future] = field(default_factory=dict)
    last_error: Optional[BaseException] = None


class MatchCoordinator(Generic[T]):
    """
    Cache with at-most-one in-flight computation per (key, version).

    The lock only guards the entry map; compute() always runs outside it.
    There is no TTL: entries leave the cache through invalidate, evict or
    clear.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._entries: Dict[str, _Entry] = {}

    def get_or_compute(
        self,
        key: str,
        version: int,
        compute: Callable[[], T],
        force: bool = False
    ) -> T:
        """Return the cached value for (key, version), computing it at most once.

        Args:
            key: Requirement set identity
            version: Monotonic version of the requirement set
            compute: Zero-argument callable producing the value
            force: Skip a READY value and recompute. Still joins a
                computation already in flight for the same version.

        Raises:
            Whatever compute() raised, to the owner and every waiter.
        """
        with self._lock:
            entry = self._entries.setdefault(key, _Entry())
            if version > entry.highest_requested:
                entry.highest_requested = version

            if not force and entry.state == CacheState.READY and entry.version == version:
                logger.debug(f"Cache hit for {key} v{version}")
                return entry.value

            future = entry.in_flight.get(version)
            owner = future is None
            if owner:
                future = Future()
                entry.in_flight[version] = future
                generation = entry.generation
                self._settle(entry)
                logger.debug(f"Computing {key} v{version} (state={entry.state.value})")

        if not owner:
            logger.debug(f"Joining in-flight computation for {key} v{version}")
            return future.result()

        try:
            value = compute()
        except BaseException as e:
            with self._lock:
                self._release(entry, version, future)
                if entry.generation == generation and version >= entry.highest_requested:
                    entry.value = None
                    entry.version = None
                    entry.last_error = e
                self._settle(entry)
            logger.warning(f"Computation for {key} v{version} failed: {e}")
            future.set_exception(e)
            raise

        with self._lock:
            self._release(entry, version, future)
            try:
                self._store(entry, key, version, generation, value)
            except CacheCoordinationError as e:
                logger.info(f"Discarding result: {e}")
            self._settle(entry)

        future.set_result(value)
        return value

    def invalidate(self, key: str) -> bool:
        """Drop the stored value for key. In-flight results for it will be discarded.

        The highest requested version is kept, so versions stay monotonic.
        """
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return False
            had_value = entry.value is not None
            entry.generation += 1
            entry.value = None
            entry.version = None
            entry.in_flight = {}
            self._settle(entry)
        logger.info(f"Invalidated match cache for {key}")
        return had_value

    def evict(self, key: str) -> bool:
        """Forget key entirely, including its version history."""
        with self._lock:
            entry = self._entries.pop(key, None)
            if entry is not None:
                entry.generation += 1
        return entry is not None

    def clear(self) -> None:
        with self._lock:
            for entry in self._entries.values():
                entry.generation += 1
            self._entries.clear()

    def keys(self):
        with self._lock:
            return list(self._entries.keys())

    def peek(self, key: str) -> Optional[T]:
        """Stored value for key, whatever its version, without computing."""
        with self._lock:
            entry = self._entries.get(key)
            return entry.value if entry is not None else None

    def version(self, key: str) -> Optional[int]:
        with self._lock:
            entry = self._entries.get(key)
            return entry.version if entry is not None else None

    def state(self, key: str) -> CacheState:
        with self._lock:
            entry = self._entries.get(key)
            return entry.state if entry is not None else CacheState.EMPTY

    def last_error(self, key: str) -> Optional[BaseException]:
        with self._lock:
            entry = self._entries.get(key)
            return entry.last_error if entry is not None else None

    # Helpers below expect the lock to be held.

    @staticmethod
    def _release(entry: _Entry, version: int, future: Future) -> None:
        if entry.in_flight.get(version) is future:
            del entry.in_flight[version]

    @staticmethod
    def _store(entry: _Entry, key: str, version: int, generation: int, value: Any) -> None:
        if entry.generation != generation:
            raise CacheCoordinationError(f"{key} v{version} was invalidated while computing")
        if version < entry.highest_requested:
            raise CacheCoordinationError(
                f"{key} v{version} superseded by v{entry.highest_requested}"
            )
        entry.value = value
        entry.version = version
        entry.last_error = None
        logger.debug(f"Stored {key} v{version}")

    @staticmethod
    def _settle(entry: _Entry) -> None:
        if any(v >= entry.highest_requested for v in entry.in_flight):
            entry.state = CacheState.COMPUTING
        elif entry.value is not None and entry.version == entry.highest_requested:
            entry.state = CacheState.READY
        else:
            entry.state = CacheState.EMPTY
