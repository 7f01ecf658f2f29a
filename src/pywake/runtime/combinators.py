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
"""Combinators that compose computations inside a single task."""

from __future__ import annotations

from typing import Any

from pywake.runtime.adapters.coroutine import as_computation
from pywake.runtime.context import Context
from pywake.runtime.future import Future
from pywake.runtime.poll import PENDING, Poll, Ready
from pywake.runtime.ports.outbound import Computation


class Join(Future[tuple[Any, ...]]):
    """Polls every child on each poll until all are ready.

    Children share the parent's waker, so a wake from any child reschedules
    the whole join. Finished children are not polled again. Results come
    back in argument order.
    """

    def __init__(self, *computations: object) -> None:
        self._children: list[Computation | None] = [as_computation(c) for c in computations]
        self._results: list[Any] = [None] * len(self._children)

    def poll(self, cx: Context) -> Poll:
        for index, child in enumerate(self._children):
            if child is None:
                continue
            result = child.poll(cx)
            if isinstance(result, Ready):
                self._results[index] = result.value
                self._children[index] = None
        if any(child is not None for child in self._children):
            return PENDING
        return Ready(tuple(self._results))


def join(*computations: object) -> Join:
    """Run *computations* concurrently within the current task.

    Usage::

        async def learn_and_sing(): ...
        async def dance(): ...

        song, _ = await join(learn_and_sing(), dance())
    """
    return Join(*computations)
