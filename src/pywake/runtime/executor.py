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
"""Executor — the single consumer that polls ready tasks until drained."""

from __future__ import annotations

import threading
from dataclasses import dataclass

import structlog
from pydantic import ValidationError

from pywake.core.config import Config
from pywake.kernel.exceptions import (
    ChannelClosedException,
    ChannelTimeoutException,
    ConfigurationException,
    ExecutorStateException,
    TaskFailedException,
)
from pywake.runtime.channel import Receiver, channel
from pywake.runtime.context import Context
from pywake.runtime.poll import Pending, Ready
from pywake.runtime.properties import ExecutorProperties
from pywake.runtime.spawner import Spawner
from pywake.runtime.task import Task, TaskState

logger = structlog.get_logger("pywake.runtime.executor")


@dataclass
class ExecutorStats:
    """Counters collected by one ``Executor.run()``."""

    polls: int = 0
    completed: int = 0
    failed: int = 0
    stale_wakes: int = 0
    drained: bool = False


class Executor:
    """Pops ready tasks off the queue and polls each once.

    A task whose poll reports ``Ready`` is finished and dropped. One that
    reports ``PENDING`` gets its computation back in its slot and waits for
    its own wake to put it on the queue again. The executor never
    re-enqueues a task itself, so a task that never wakes is never polled
    again.
    """

    def __init__(self, ready_queue: Receiver[Task], properties: ExecutorProperties | None = None) -> None:
        self._ready_queue = ready_queue
        self._properties = properties or ExecutorProperties()
        self._started = False
        self._start_lock = threading.Lock()
        self.stats = ExecutorStats()

    @property
    def properties(self) -> ExecutorProperties:
        return self._properties

    def run(self, idle_timeout: float | None = None) -> ExecutorStats:
        """Run until the queue is closed and empty, then return the stats.

        Args:
            idle_timeout: Stop early if no task becomes ready for this many
                seconds. ``stats.drained`` is False in that case and
                unfinished tasks can no longer be woken.

        Raises:
            ExecutorStateException: ``run`` was already called.
            TaskFailedException: A computation raised and
                ``propagate_errors`` is enabled.
        """
        with self._start_lock:
            if self._started:
                raise ExecutorStateException("Executor.run() may only be called once")
            self._started = True

        logger.info(
            "executor_started",
            capacity=self._ready_queue.capacity,
            queued=len(self._ready_queue),
        )
        try:
            while True:
                try:
                    task = self._ready_queue.recv(timeout=idle_timeout)
                except ChannelClosedException:
                    self.stats.drained = True
                    break
                except ChannelTimeoutException:
                    logger.warning("executor_idle_timeout", idle_timeout=idle_timeout)
                    break
                self._run_once(task)
        finally:
            discarded = self._ready_queue.close()

        logger.info(
            "executor_drained" if self.stats.drained else "executor_stopped",
            polls=self.stats.polls,
            completed=self.stats.completed,
            failed=self.stats.failed,
            stale_wakes=self.stats.stale_wakes,
            discarded=discarded,
        )
        return self.stats

    def _run_once(self, task: Task) -> None:
        computation = task.take()
        if computation is None:
            self.stats.stale_wakes += 1
            logger.debug("stale_wake_skipped", task=task.name)
            return

        cx = Context(task.waker)
        self.stats.polls += 1
        try:
            result = computation.poll(cx)
            if not isinstance(result, (Ready, Pending)):
                raise TypeError(f"poll() must return Ready or PENDING, got {result!r}")
        except Exception as exc:
            task.fail(exc)
            self.stats.failed += 1
            logger.error("task_failed", task=task.name, task_id=task.task_id, exc_info=exc)
            if self._properties.propagate_errors:
                raise TaskFailedException(task.name, exc) from exc
            return

        if isinstance(result, Ready):
            task.complete(result.value)
            # A failed wake from another thread may have finished it first.
            if task.state is TaskState.COMPLETED:
                self.stats.completed += 1
            logger.debug("task_completed", task=task.name, polls=task.poll_count)
        else:
            task.put_back(computation)
            logger.debug("task_pending", task=task.name)


def new_executor_and_spawner(
    capacity: int | None = None,
    *,
    config: Config | None = None,
) -> tuple[Executor, Spawner]:
    """Create an executor and the first spawner sharing one ready queue.

    Args:
        capacity: Ready-queue capacity. Overrides ``pywake.executor.queue-capacity``.
        config: Source for ExecutorProperties; packaged defaults when omitted.

    Raises:
        ConfigurationException: The capacity, explicit or configured, is
            not a positive integer (code ``CONFIG_INVALID``).
    """
    properties = (config if config is not None else Config.defaults()).bind(ExecutorProperties)
    if capacity is not None:
        try:
            properties = ExecutorProperties(queue_capacity=capacity, propagate_errors=properties.propagate_errors)
        except ValidationError as exc:
            raise ConfigurationException(
                f"Invalid queue capacity {capacity!r}:\n{exc}",
                code="CONFIG_INVALID",
                context={"prefix": "pywake.executor", "queue_capacity": capacity},
            ) from exc
    sender, receiver = channel(properties.queue_capacity)
    return Executor(receiver, properties), Spawner(sender)
