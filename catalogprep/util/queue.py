"""This module implements the handoff primitive between filter stages.

A :code:`Handoff` connects exactly one producing and one consuming thread.
With the default capacity of :code:`0` it is an unbuffered rendezvous point:
:code:`put` returns only after the consumer has taken the item.
With a positive capacity it behaves like a bounded queue and :code:`put` only blocks while the
buffer is full.

Closing a handoff signals the end of the stream. Items which were handed over before closing
are still delivered, after that :code:`get` raises :code:`HandoffClosed` and iteration stops.
"""

import logging
import threading
import time
from collections import deque
from queue import Empty, Full
from typing import Deque, Generic, Iterator, Optional, TypeVar

from catalogprep.abc.exceptions import CatalogprepException

logger = logging.getLogger("Handoff")

T = TypeVar("T")


class HandoffClosed(CatalogprepException):
    """Raise if a handoff was closed."""

    def __init__(self, message: str = "handoff is closed"):
        super().__init__(message)


class Handoff(Generic[T]):
    """Blocking handoff point with rendezvous or bounded queue semantics."""

    def __init__(self, capacity: int = 0) -> None:
        if capacity < 0:
            raise ValueError("capacity must not be negative")
        self.capacity = capacity
        self._buffer: Deque[T] = deque()
        self._condition = threading.Condition()
        self._closed = False
        self._put_count = 0
        self._taken_count = 0

    @property
    def closed(self) -> bool:
        """Whether the end of the stream was signaled."""
        return self._closed

    def qsize(self) -> int:
        """Number of items handed over but not taken yet."""
        with self._condition:
            return len(self._buffer)

    def put(self, item: T, timeout: Optional[float] = None) -> None:
        """Hand over an item.

        Blocks until there is room in the buffer and, for a rendezvous handoff, until the consumer
        has taken the item or the handoff got closed.

        Raises
        ------
        HandoffClosed
            If the handoff is closed before the item could be handed over.
        queue.Full
            If the item could not be handed over within :code:`timeout` seconds.
        """
        deadline = None if timeout is None else time.monotonic() + timeout
        with self._condition:
            has_room = self._condition.wait_for(
                lambda: self._closed or len(self._buffer) < max(self.capacity, 1), timeout
            )
            if self._closed:
                raise HandoffClosed()
            if not has_room:
                raise Full
            self._buffer.append(item)
            self._put_count += 1
            ticket = self._put_count
            self._condition.notify_all()
            if self.capacity > 0:
                return
            remaining = None if deadline is None else max(deadline - time.monotonic(), 0)
            taken = self._condition.wait_for(
                lambda: self._closed or self._taken_count >= ticket, remaining
            )
            if not taken:
                self._buffer.pop()
                self._put_count -= 1
                self._condition.notify_all()
                raise Full

    def get(self, timeout: Optional[float] = None) -> T:
        """Take the next item.

        Raises
        ------
        HandoffClosed
            If the handoff is closed and all items are taken.
        queue.Empty
            If no item was available within :code:`timeout` seconds.
        """
        with self._condition:
            available = self._condition.wait_for(lambda: self._buffer or self._closed, timeout)
            if self._buffer:
                item = self._buffer.popleft()
                self._taken_count += 1
                self._condition.notify_all()
                return item
            if not available:
                raise Empty
            raise HandoffClosed()

    def close(self) -> None:
        """Signal the end of the stream and wake up all waiting threads."""
        with self._condition:
            if not self._closed:
                logger.debug("closing handoff with %d pending items", len(self._buffer))
            self._closed = True
            self._condition.notify_all()

    def __iter__(self) -> Iterator[T]:
        while True:
            try:
                yield self.get()
            except HandoffClosed:
                return
