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
"""Adapter that drives ``async def`` coroutines as computations."""

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Coroutine, Generator
from typing import Any

from pywake.runtime.context import Context, polling
from pywake.runtime.future import Future
from pywake.runtime.poll import PENDING, Poll, Ready
from pywake.runtime.ports.outbound import Computation


class CoroutineComputation:
    """Runs a coroutine one step per poll.

    Each poll resumes the coroutine with the poll's Context installed as
    the current context, so pywake futures awaited anywhere down the await
    chain register the right waker. The coroutine may only suspend on
    pywake futures; any other yielded value fails the computation.
    """

    __slots__ = ("_coro", "_name")

    def __init__(self, awaitable: Awaitable[Any]) -> None:
        if inspect.iscoroutine(awaitable):
            self._coro: Coroutine[Any, Any, Any] | Generator[Any, None, Any] = awaitable
            self._name = awaitable.__qualname__
        elif inspect.isawaitable(awaitable):
            self._coro = awaitable.__await__()  # type: ignore[assignment]
            self._name = type(awaitable).__qualname__
        else:
            raise TypeError(f"Expected a coroutine or awaitable, got {type(awaitable).__name__}")

    @property
    def name(self) -> str:
        return self._name

    def poll(self, cx: Context) -> Poll:
        with polling(cx):
            try:
                yielded = self._coro.send(None)
            except StopIteration as exc:
                return Ready(exc.value)
        if not isinstance(yielded, Future):
            self._coro.close()
            raise RuntimeError(
                f"{self._name} suspended on {yielded!r}; only pywake futures can be awaited here"
            )
        return PENDING

    def __repr__(self) -> str:
        return f"CoroutineComputation({self._name})"


def as_computation(obj: object) -> Computation:
    """Return *obj* as a Computation, wrapping coroutines and awaitables."""
    if isinstance(obj, Computation):
        return obj
    if inspect.isawaitable(obj):
        return CoroutineComputation(obj)
    raise TypeError(
        f"Cannot spawn {type(obj).__name__}: expected an object with poll(cx), a coroutine, or an awaitable"
    )
