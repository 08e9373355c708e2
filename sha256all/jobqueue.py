from __future__ import annotations
from collections import deque
from threading import Condition, Lock
from typing import Deque, Generic, Iterator, TypeVar

T = TypeVar("T")


class QueueClosed(Exception):
    """Raised when putting to a closed `WorkQueue` or getting from a drained one"""


class WorkQueue(Generic[T]):
    """
    Synchronized FIFO queue connecting a single producer to any number of
    consumer threads.  The producer calls `put()` for each item and then
    `close()` once it has nothing more to add; consumers iterate over the
    queue, which yields items as they become available and stops once the
    queue has been closed and emptied.  Every item is handed to exactly one
    consumer.

    If ``maxsize`` is positive, `put()` blocks while the queue holds that many
    items, so a fast producer cannot run arbitrarily far ahead of the
    consumers.  A ``maxsize`` of zero or less means the queue is unbounded.

    Sample usage by a consumer:

    .. code:: python

        for item in queue:
            # Operate on item
    """

    def __init__(self, maxsize: int = 0) -> None:
        self.maxsize = maxsize
        self._lock = Lock()
        self._not_empty = Condition(self._lock)
        self._not_full = Condition(self._lock)
        self._queue: Deque[T] = deque()
        self._closed = False

    def __len__(self) -> int:
        with self._lock:
            return len(self._queue)

    def __iter__(self) -> Iterator[T]:
        while True:
            try:
                yield self.get()
            except QueueClosed:
                return

    @property
    def closed(self) -> bool:
        with self._lock:
            return self._closed

    def put(self, item: T) -> None:
        with self._lock:
            while (
                not self._closed
                and self.maxsize > 0
                and len(self._queue) >= self.maxsize
            ):
                self._not_full.wait()
            if self._closed:
                raise QueueClosed("put() on closed queue")
            self._queue.append(item)
            self._not_empty.notify()

    def get(self) -> T:
        with self._lock:
            while not self._queue:
                if self._closed:
                    raise QueueClosed("Queue is closed and empty")
                self._not_empty.wait()
            item = self._queue.popleft()
            self._not_full.notify()
            return item

    def close(self) -> None:
        with self._lock:
            self._closed = True
            self._not_empty.notify_all()
            self._not_full.notify_all()
