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
"""Run a single computation to completion on the calling thread."""

from __future__ import annotations

import threading
import time
from typing import Any

from pywake.kernel.exceptions import OperationTimeoutException
from pywake.runtime.adapters.coroutine import as_computation
from pywake.runtime.context import Context, Waker
from pywake.runtime.poll import Ready


def block_on(computation: object, *, timeout: float | None = None) -> Any:
    """Poll *computation* until ready, parking the thread between wakes.

    No executor or queue is involved: the waker just sets an event that
    this thread sleeps on. Exceptions raised by the computation propagate
    unchanged.

    Raises:
        OperationTimeoutException: *timeout* seconds passed without completion.
    """
    target = as_computation(computation)
    woken = threading.Event()
    cx = Context(Waker(woken.set))
    deadline = None if timeout is None else time.monotonic() + timeout

    while True:
        result = target.poll(cx)
        if isinstance(result, Ready):
            return result.value
        remaining = None if deadline is None else max(0.0, deadline - time.monotonic())
        if not woken.wait(remaining):
            raise OperationTimeoutException(timeout if timeout is not None else 0.0)
        woken.clear()
