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
"""Future — base class for leaf computations that can also be awaited."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Generator
from typing import Any, Generic, TypeVar

from pywake.runtime.context import Context, current_context
from pywake.runtime.poll import PENDING, Poll, Ready

T = TypeVar("T")


class Future(ABC, Generic[T]):
    """A computation implemented by hand as a ``poll`` method.

    Subclasses satisfy the Computation port directly and can be spawned as
    they are. Inside an ``async def`` run by pywake they can also be
    awaited: ``__await__`` polls against the current task's Context and
    yields control back to the executor while the result is pending.
    """

    @abstractmethod
    def poll(self, cx: Context) -> Poll:
        """Return ``Ready(value)`` or ``PENDING`` (after arranging a wake)."""

    def __await__(self) -> Generator[Future[Any], None, T]:
        while True:
            result = self.poll(current_context())
            if isinstance(result, Ready):
                return result.value
            yield self


class ReadyFuture(Future[T]):
    """Completes on the first poll with a fixed value."""

    def __init__(self, value: T) -> None:
        self._value = value

    def poll(self, cx: Context) -> Poll:
        return Ready(self._value)


class PendingForever(Future[Any]):
    """Never completes and never wakes."""

    def poll(self, cx: Context) -> Poll:
        return PENDING


def ready(value: T) -> ReadyFuture[T]:
    """A future that is immediately ready with *value*."""
    return ReadyFuture(value)


def pending_forever() -> PendingForever:
    """A future that stays pending and never asks to be polled again."""
    return PendingForever()
