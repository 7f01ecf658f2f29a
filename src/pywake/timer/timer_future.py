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
"""TimerFuture — becomes ready once a duration has elapsed."""

from __future__ import annotations

import threading
from datetime import timedelta

import structlog

from pywake.kernel.exceptions import RuntimeException
from pywake.runtime.context import Context, Waker
from pywake.runtime.future import Future
from pywake.runtime.poll import PENDING, Poll, Ready

logger = structlog.get_logger("pywake.timer")


class TimerFuture(Future[None]):
    """Completes no earlier than *duration* after construction.

    A background ``threading.Timer`` is started on construction. When it
    fires it marks the future complete and wakes the waker stored by the
    most recent poll.
    """

    def __init__(self, duration: float | timedelta) -> None:
        seconds = duration.total_seconds() if isinstance(duration, timedelta) else float(duration)
        if seconds < 0:
            raise ValueError(f"duration must be non-negative, got {seconds}")
        self._duration = seconds
        self._lock = threading.Lock()
        self._completed = False
        self._waker: Waker | None = None
        self._timer = threading.Timer(seconds, self._fire)
        self._timer.daemon = True
        self._timer.start()

    @property
    def duration(self) -> float:
        return self._duration

    @property
    def completed(self) -> bool:
        with self._lock:
            return self._completed

    def poll(self, cx: Context) -> Poll:
        with self._lock:
            if self._completed:
                return Ready(None)
            # The task may have moved between polls; keep the latest waker.
            if self._waker is None or not self._waker.will_wake(cx.waker):
                self._waker = cx.waker
            return PENDING

    def _fire(self) -> None:
        with self._lock:
            self._completed = True
            waker, self._waker = self._waker, None
        if waker is None:
            return
        try:
            waker.wake()
        except RuntimeException as exc:
            logger.warning("timer_wake_failed", duration=self._duration, error=str(exc), code=exc.code)

    def __repr__(self) -> str:
        return f"TimerFuture(duration={self._duration}, completed={self.completed})"


def sleep(seconds: float | timedelta) -> TimerFuture:
    """Awaitable pause inside a coroutine run by pywake: ``await sleep(0.5)``."""
    return TimerFuture(seconds)
