# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Bounded multi-producer, single-consumer ready queue.

Senders never block: a send against a full queue raises
QueueFullException, and a send after the receiver closed raises
NoConsumerException. The receiver blocks until an item arrives or every
sender has been closed and the queue is empty.

Usage::

    tx, rx = channel(capacity=16)
    with tx.clone() as other:
        other.send(item)
    tx.close()
    rx.recv()  # -> item
    rx.recv()  # raises ChannelClosedException
"""

from __future__ import annotations

import threading
from collections import deque
from typing import Generic, TypeVar

from pywake.kernel.exceptions import (
    ChannelClosedException,
    ChannelTimeoutException,
    NoConsumerException,
    QueueFullException,
    SenderClosedException,
)

T = TypeVar("T")


class _ChannelState(Generic[T]):
    """State shared by every handle of one channel, guarded by ``cond``."""

    __slots__ = ("capacity", "items", "cond", "senders", "receiver_closed")

    def __init__(self, capacity: int) -> None:
        self.capacity = capacity
        self.items: deque[T] = deque()
        self.cond = threading.Condition(threading.Lock())
        self.senders = 0
        self.receiver_closed = False


class Sender(Generic[T]):
    """Producer handle. Clone it for every independent producer."""

    __slots__ = ("_state", "_closed")

    def __init__(self, state: _ChannelState[T]) -> None:
        self._state = state
        self._closed = False
        with state.cond:
            state.senders += 1

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def capacity(self) -> int:
        return self._state.capacity

    def send(self, item: T) -> None:
        """Enqueue *item* without blocking.

        Raises:
            SenderClosedException: This handle was closed.
            NoConsumerException: The receiver has terminated.
            QueueFullException: The queue already holds ``capacity`` items.
        """
        state = self._state
        with state.cond:
            if self._closed:
                raise SenderClosedException()
            if state.receiver_closed:
                raise NoConsumerException()
            if len(state.items) >= state.capacity:
                raise QueueFullException(state.capacity)
            state.items.append(item)
            state.cond.notify()

    def clone(self) -> Sender[T]:
        """A new, independently closable handle on the same channel."""
        if self._closed:
            raise SenderClosedException()
        return Sender(self._state)

    def close(self) -> None:
        """Release this handle. Idempotent.

        When the last sender closes, a receiver blocked on an empty queue
        wakes up and reports the channel closed.
        """
        state = self._state
        with state.cond:
            if self._closed:
                return
            self._closed = True
            state.senders -= 1
            if state.senders == 0:
                state.cond.notify_all()

    def __enter__(self) -> Sender[T]:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"Sender(capacity={self._state.capacity}, closed={self._closed})"


class Receiver(Generic[T]):
    """The single consuming end of the channel."""

    __slots__ = ("_state",)

    def __init__(self, state: _ChannelState[T]) -> None:
        self._state = state

    @property
    def capacity(self) -> int:
        return self._state.capacity

    @property
    def sender_count(self) -> int:
        """Number of sender handles still open."""
        with self._state.cond:
            return self._state.senders

    @property
    def closed(self) -> bool:
        with self._state.cond:
            return self._state.receiver_closed

    def __len__(self) -> int:
        with self._state.cond:
            return len(self._state.items)

    def recv(self, timeout: float | None = None) -> T:
        """Block until an item is available and return it (FIFO).

        Raises:
            ChannelClosedException: Every sender is closed and the queue is
                empty, or this receiver was closed.
            ChannelTimeoutException: *timeout* seconds elapsed first.
        """
        state = self._state
        with state.cond:
            state.cond.wait_for(
                lambda: bool(state.items) or state.senders == 0 or state.receiver_closed,
                timeout,
            )
            if state.receiver_closed:
                raise ChannelClosedException("Receiver is closed")
            if state.items:
                return state.items.popleft()
            if state.senders == 0:
                raise ChannelClosedException()
            raise ChannelTimeoutException(timeout if timeout is not None else 0.0)

    def close(self) -> int:
        """Terminate the consumer side; later sends raise NoConsumerException.

        Returns the number of queued items that were discarded.
        """
        state = self._state
        with state.cond:
            state.receiver_closed = True
            discarded = len(state.items)
            state.items.clear()
            state.cond.notify_all()
            return discarded

    def __repr__(self) -> str:
        return f"Receiver(capacity={self._state.capacity}, queued={len(self)})"


def channel(capacity: int) -> tuple[Sender[T], Receiver[T]]:
    """Create a bounded channel holding at most *capacity* items."""
    if isinstance(capacity, bool) or not isinstance(capacity, int) or capacity < 1:
        raise ValueError(f"capacity must be a positive int, got {capacity!r}")
    state: _ChannelState[T] = _ChannelState(capacity)
    return Sender(state), Receiver(state)
