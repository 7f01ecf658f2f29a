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
"""Tests for block_on."""

from __future__ import annotations

import threading

import pytest

from pywake.kernel.exceptions import OperationTimeoutException
from pywake.runtime.block_on import block_on
from pywake.runtime.context import Context
from pywake.runtime.future import Future, pending_forever, ready
from pywake.runtime.poll import PENDING, Poll, Ready


class WakeLater(Future[str]):
    def __init__(self, delay: float) -> None:
        self.delay = delay
        self.timer: threading.Timer | None = None
        self.fired = threading.Event()

    def _fire(self, cx: Context) -> None:
        self.fired.set()
        cx.waker.wake()

    def poll(self, cx: Context) -> Poll:
        if self.fired.is_set():
            return Ready("woken")
        if self.timer is None:
            self.timer = threading.Timer(self.delay, self._fire, args=(cx,))
            self.timer.start()
        return PENDING


class TestBlockOn:
    def test_returns_result_of_ready_future(self) -> None:
        assert block_on(ready(5)) == 5

    def test_runs_a_coroutine(self) -> None:
        async def hello_world() -> str:
            return "hello, world!"

        assert block_on(hello_world()) == "hello, world!"

    def test_parks_until_woken(self) -> None:
        assert block_on(WakeLater(0.05), timeout=5) == "woken"

    def test_coroutine_awaiting_future_woken_from_thread(self) -> None:
        async def main() -> str:
            return (await WakeLater(0.01)).upper()

        assert block_on(main(), timeout=5) == "WOKEN"

    def test_exceptions_propagate(self) -> None:
        async def broken() -> None:
            raise LookupError("nope")

        with pytest.raises(LookupError):
            block_on(broken())

    def test_timeout_raises(self) -> None:
        with pytest.raises(OperationTimeoutException) as exc_info:
            block_on(pending_forever(), timeout=0.05)
        assert exc_info.value.context["timeout"] == 0.05
