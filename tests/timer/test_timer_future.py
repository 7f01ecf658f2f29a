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
"""Tests for TimerFuture and sleep."""

from __future__ import annotations

import threading
import time
from datetime import timedelta

import pytest

from pywake.kernel.exceptions import NoConsumerException
from pywake.runtime.block_on import block_on
from pywake.runtime.context import Context, Waker
from pywake.runtime.executor import new_executor_and_spawner
from pywake.runtime.poll import PENDING, Ready
from pywake.runtime.task import TaskState
from pywake.timer import TimerFuture, sleep


class TestTimerFuture:
    def test_negative_duration_rejected(self) -> None:
        with pytest.raises(ValueError):
            TimerFuture(-1)

    def test_accepts_timedelta(self) -> None:
        timer = TimerFuture(timedelta(milliseconds=10))
        assert timer.duration == pytest.approx(0.01)

    def test_pending_until_elapsed_then_wakes_latest_waker(self) -> None:
        woken = threading.Event()
        timer = TimerFuture(0.05)
        cx = Context(Waker(woken.set))

        assert timer.poll(cx) is PENDING
        assert woken.wait(timeout=2)
        assert timer.completed
        assert timer.poll(cx) == Ready(None)

    def test_waker_is_replaced_when_task_changes(self) -> None:
        first = threading.Event()
        second = threading.Event()
        timer = TimerFuture(0.05)

        timer.poll(Context(Waker(first.set)))
        timer.poll(Context(Waker(second.set)))

        assert second.wait(timeout=2)
        assert not first.is_set()

    def test_completes_no_earlier_than_duration(self) -> None:
        start = time.monotonic()
        block_on(TimerFuture(0.1), timeout=5)
        assert time.monotonic() - start >= 0.09


class TestSleepInTasks:
    def test_two_sleeping_tasks_finish_and_executor_drains(self) -> None:
        executor, spawner = new_executor_and_spawner(16)
        output: list[str] = []
        lock = threading.Lock()

        async def howdy(n: int) -> None:
            with lock:
                output.append(f"howdy {n}")
            await sleep(0.05)
            with lock:
                output.append(f"done {n}")

        spawner.spawn(howdy(1))
        spawner.spawn(howdy(2))
        spawner.close()

        stats = executor.run()

        assert stats.drained
        assert stats.completed == 2
        assert sorted(output[:2]) == ["howdy 1", "howdy 2"]
        assert sorted(output[2:]) == ["done 1", "done 2"]

    def test_timers_run_concurrently_across_tasks(self) -> None:
        executor, spawner = new_executor_and_spawner(64)

        async def nap() -> None:
            await sleep(0.2)

        for _ in range(5):
            spawner.spawn(nap())
        spawner.close()

        start = time.monotonic()
        executor.run()
        assert time.monotonic() - start < 0.9

    def test_timer_firing_after_executor_stopped_fails_its_task(self) -> None:
        executor, spawner = new_executor_and_spawner(4)
        task = spawner.spawn(TimerFuture(0.2))
        spawner.close()

        stats = executor.run(idle_timeout=0.05)

        assert not stats.drained
        assert task.wait(timeout=5)
        assert task.state is TaskState.FAILED
        assert isinstance(task.error, NoConsumerException)
