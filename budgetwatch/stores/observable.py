"""
Observable value: a cell holding the latest snapshot plus an ordered,
synchronous publish/subscribe channel.

Subscribers are called in subscription order, on the publishing thread,
before publish() returns. A publish made from inside a subscriber is
queued and delivered after the current one, so every subscriber sees
every published value in publish order.

A subscriber that raises does not stop delivery: the remaining
subscribers and queued values are still delivered, then the first
error is raised from publish().
"""

import threading
from collections import deque
from typing import Callable, Generic, Optional, TypeVar


T = TypeVar("T")

Subscriber = Callable[[T], None]


class ObservableValue(Generic[T]):
    def __init__(self, initial: T, copy: Optional[Callable[[T], T]] = None):
        """
        Args:
            initial: Starting value
            copy: Applied to the value handed to each subscriber, so
                  callbacks cannot change the stored snapshot
        """
        self._value = initial
        self._copy = copy or (lambda value: value)
        self._subscribers: list[Subscriber] = []
        self._pending: deque = deque()
        self._delivering = False
        self._lock = threading.RLock()

    @property
    def value(self) -> T:
        """The most recently published value."""
        return self._value

    def subscribe(self, callback: Subscriber, replay: bool = True) -> Callable[[], None]:
        """
        Register a subscriber.

        Args:
            callback: Called with each published value
            replay: Immediately call back with the current value

        Returns:
            A function that unsubscribes the callback
        """
        with self._lock:
            self._subscribers.append(callback)
            if replay:
                callback(self._copy(self._value))
        return lambda: self.unsubscribe(callback)

    def unsubscribe(self, callback: Subscriber) -> None:
        with self._lock:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

    def publish(self, value: T) -> None:
        """
        Set a new value and deliver it to every subscriber.

        Raises:
            Exception: The first error raised by a subscriber, after
                       delivery has finished
        """
        with self._lock:
            self._value = value
            self._pending.append(value)
            if self._delivering:
                return

            self._delivering = True
            first_error: Optional[Exception] = None
            try:
                while self._pending:
                    current = self._pending.popleft()
                    for callback in list(self._subscribers):
                        try:
                            callback(self._copy(current))
                        except Exception as e:
                            if first_error is None:
                                first_error = e
            finally:
                self._delivering = False
                self._pending.clear()

            if first_error is not None:
                raise first_error
