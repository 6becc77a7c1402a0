"""
Single Flight - Deduplication of Concurrent Calls.

Concurrent callers asking for the same key share one execution of the
work function. Followers block on the leader's future and observe the
same result or the same exception.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future
from dataclasses import dataclass, field
from typing import Callable, Dict, Generic, Hashable, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class _Call:
    future: Future = field(default_factory=Future)
    followers: int = 0


class SingleFlight(Generic[T]):
    """At most one in-flight call per key."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._calls: Dict[Hashable, _Call] = {}

    def do(
        self,
        key: Hashable,
        fn: Callable[[], T],
        timeout: Optional[float] = None,
    ) -> T:
        """
        Run fn, or join the call already running for key.

        Args:
            key: Identity of the work
            fn: Work function, executed by the first caller only
            timeout: Max seconds a follower waits for the leader

        Returns:
            Result of the shared call

        Raises:
            Whatever fn raised, in the leader and in every follower.
            concurrent.futures.TimeoutError if a follower times out.
        """
        with self._lock:
            call = self._calls.get(key)
            is_leader = call is None
            if is_leader:
                call = self._calls[key] = _Call()
            else:
                call.followers += 1

        if not is_leader:
            logger.debug(f"Joining in-flight call for {key!r}")
            return call.future.result(timeout=timeout)

        try:
            result = fn()
        except BaseException as e:
            call.future.set_exception(e)
            raise
        else:
            call.future.set_result(result)
            return result
        finally:
            with self._lock:
                self._calls.pop(key, None)

    def in_flight(self, key: Hashable) -> bool:
        """Check whether a call for key is currently running."""
        with self._lock:
            return key in self._calls

    def followers(self, key: Hashable) -> int:
        """Number of callers waiting on the running call for key."""
        with self._lock:
            call = self._calls.get(key)
            return call.followers if call else 0
