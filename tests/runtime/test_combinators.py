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
"""Tests for join, ready and pending_forever."""

from __future__ import annotations

from pywake.runtime.combinators import join
from pywake.runtime.context import Context, Waker
from pywake.runtime.executor import new_executor_and_spawner
from pywake.runtime.future import Future, pending_forever, ready
from pywake.runtime.poll import PENDING, Poll, Ready


class Steps(Future[str]):
    """Ready after ``n`` polls; wakes itself on every pending poll."""

    def __init__(self, label: str, n: int, log: list[str]) -> None:
        self.label = label
        self.remaining = n
        self.log = log
        self.polls = 0

    def poll(self, cx: Context) -> Poll:
        self.polls += 1
        self.log.append(self.label)
        if self.remaining == 0:
            return Ready(self.label)
        self.remaining -= 1
        cx.waker.wake()
        return PENDING


class TestReadyAndPending:
    def test_ready_future_is_ready_immediately(self) -> None:
        assert ready("x").poll(Context(Waker.noop())) == Ready("x")

    def test_pending_forever_stays_pending(self) -> None:
        future = pending_forever()
        cx = Context(Waker.noop())
        assert future.poll(cx) is PENDING
        assert future.poll(cx) is PENDING


class TestJoin:
    def test_results_come_back_in_argument_order(self) -> None:
        log: list[str] = []
        joined = join(Steps("slow", 2, log), Steps("fast", 0, log))
        cx = Context(Waker.noop())

        assert joined.poll(cx) is PENDING
        assert joined.poll(cx) is PENDING
        assert joined.poll(cx) == Ready(("slow", "fast"))

    def test_finished_children_are_not_polled_again(self) -> None:
        log: list[str] = []
        fast = Steps("fast", 0, log)
        joined = join(Steps("slow", 2, log), fast)
        cx = Context(Waker.noop())
        while joined.poll(cx) is PENDING:
            pass
        assert fast.polls == 1

    def test_empty_join_is_ready(self) -> None:
        assert join().poll(Context(Waker.noop())) == Ready(())

    def test_join_interleaves_coroutines_inside_one_task(self) -> None:
        log: list[str] = []

        async def learn_and_sing() -> str:
            song = await Steps("learn", 1, log)
            await Steps("sing", 1, log)
            return song

        async def dance() -> str:
            return await Steps("dance", 2, log)

        async def main() -> tuple:
            return await join(learn_and_sing(), dance())

        executor, spawner = new_executor_and_spawner(64)
        task = spawner.spawn(main())
        spawner.close()
        executor.run()

        assert task.outcome() == ("learn", "dance")
        # Both branches made progress before either finished.
        assert log.index("dance") < log.index("sing")
