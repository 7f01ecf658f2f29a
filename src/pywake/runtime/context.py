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
"""Waker and poll Context handed to a computation on every poll."""

from __future__ import annotations

import contextlib
from collections.abc import Callable, Iterator
from contextvars import ContextVar
from dataclasses import dataclass


class Waker:
    """Handle a computation calls to ask for another poll.

    A waker wraps a zero-argument wake function plus a *key* identifying
    what it wakes (the task, for wakers built by the executor). Two wakers
    with the same key are interchangeable: :meth:`will_wake` lets a
    computation skip replacing a stored waker that already targets the
    same task.
    """

    __slots__ = ("_wake", "_key")

    def __init__(self, wake: Callable[[], None], key: object | None = None) -> None:
        self._wake = wake
        self._key = key if key is not None else wake

    def wake(self) -> None:
        """Request that the owning computation be polled again. Thread-safe."""
        self._wake()

    def will_wake(self, other: Waker) -> bool:
        """True if *other* wakes the same target as this waker."""
        return self._key is other._key

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Waker):
            return NotImplemented
        return self.will_wake(other)

    def __hash__(self) -> int:
        return id(self._key)

    def __repr__(self) -> str:
        return f"Waker(key={self._key!r})"

    @classmethod
    def noop(cls) -> Waker:
        """A waker whose wake does nothing."""
        return cls(_noop)


def _noop() -> None:
    pass


@dataclass(frozen=True, slots=True)
class Context:
    """Per-poll context; currently just carries the waker."""

    waker: Waker


_current_context: ContextVar[Context | None] = ContextVar("pywake_current_context", default=None)


def current_context() -> Context:
    """The Context of the poll in progress on this thread.

    Raises:
        RuntimeError: When called outside a poll driven by pywake.
    """
    cx = _current_context.get()
    if cx is None:
        raise RuntimeError("No pywake poll in progress; await this only inside a task run by pywake")
    return cx


@contextlib.contextmanager
def polling(cx: Context) -> Iterator[Context]:
    """Make *cx* the current context for the duration of the block."""
    token = _current_context.set(cx)
    try:
        yield cx
    finally:
        _current_context.reset(token)
