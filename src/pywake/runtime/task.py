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
"""Task — one spawned computation plus the handle that re-enqueues it.

The computation lives in a slot guarded by the task's lock. The executor
takes it out before polling and puts it back afterwards, so whoever holds
the computation outside the slot is the only one allowed to poll it. A
task reference popped while the slot is empty is a stale wake and is
skipped.

Waking a task sends the task itself back onto the ready queue through its
own sender clone. That sender is closed once the task finishes, which is
what eventually lets the queue report closed-and-empty.
"""

from __future__ import annotations

import itertools
import threading
from enum import Enum
from typing import Any

import structlog

from pywake.kernel.exceptions import ExecutorStateException, RuntimeException, TaskFailedException
from pywake.runtime.channel import Sender
from pywake.runtime.context import Waker
from pywake.runtime.ports.outbound import Computation

logger = structlog.get_logger("pywake.runtime.task")

_task_ids = itertools.count(1)


class TaskState(str, Enum):
    """Where a task is in its lifecycle."""

    SCHEDULED = "SCHEDULED"
    RUNNING = "RUNNING"
    IDLE = "IDLE"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


_FINISHED = frozenset({TaskState.COMPLETED, TaskState.FAILED})


class Task:
    """Executor bookkeeping for one top-level computation."""

    def __init__(
        self,
        computation: Computation,
        sender: Sender[Task],
        name: str | None = None,
    ) -> None:
        self.task_id: int = next(_task_ids)
        self.name: str = name or f"task-{self.task_id}"
        self._lock = threading.Lock()
        self._computation: Computation | None = computation
        self._sender = sender
        self._state = TaskState.SCHEDULED
        self._result: Any = None
        self._error: BaseException | None = None
        self._finished = threading.Event()
        self._poll_count = 0
        self.waker = Waker(self.wake, key=self)

    @property
    def state(self) -> TaskState:
        with self._lock:
            return self._state

    @property
    def poll_count(self) -> int:
        """Number of times the computation has been taken out to be polled."""
        with self._lock:
            return self._poll_count

    @property
    def error(self) -> BaseException | None:
        with self._lock:
            return self._error

    def done(self) -> bool:
        return self._finished.is_set()

    def wait(self, timeout: float | None = None) -> bool:
        """Block until the task finishes. Returns False on timeout."""
        return self._finished.wait(timeout)

    def outcome(self) -> Any:
        """The computation's result.

        Raises:
            TaskFailedException: The computation raised; the original
                exception is chained as ``__cause__``.
            ExecutorStateException: The task has not finished yet.
        """
        with self._lock:
            if self._state is TaskState.COMPLETED:
                return self._result
            if self._state is TaskState.FAILED:
                raise TaskFailedException(self.name, self._error)  # type: ignore[arg-type]
        raise ExecutorStateException(f"Task {self.name!r} has not finished")

    # ------------------------------------------------------------------
    # Wake protocol
    # ------------------------------------------------------------------

    def wake(self) -> None:
        """Push this task back onto the ready queue. Safe from any thread.

        Wakes after the task finished are ignored. A wake that cannot be
        delivered fails the task and releases its sender before re-raising,
        so the executor can still drain when the wake came from another
        thread.

        Raises:
            QueueFullException: The ready queue is at capacity.
            NoConsumerException: The executor has terminated.
        """
        with self._lock:
            if self._state in _FINISHED:
                logger.debug("stale_wake_ignored", task=self.name, state=self._state.value)
                return
            try:
                self._sender.send(self)
            except RuntimeException as exc:
                self._finish_locked(TaskState.FAILED, error=exc)
                logger.error("task_wake_failed", task=self.name, task_id=self.task_id, code=exc.code)
                raise
            self._state = TaskState.SCHEDULED

    # ------------------------------------------------------------------
    # Slot access, used by the executor
    # ------------------------------------------------------------------

    def take(self) -> Computation | None:
        """Remove the computation from the slot, or None if it is empty."""
        with self._lock:
            computation = self._computation
            if computation is None:
                return None
            self._computation = None
            self._state = TaskState.RUNNING
            self._poll_count += 1
            return computation

    def put_back(self, computation: Computation) -> None:
        """Return a still-pending computation to the slot (no re-enqueue).

        A task that finished while it was being polled keeps its slot empty.
        """
        with self._lock:
            if self._state in _FINISHED:
                return
            self._computation = computation
            if self._state is TaskState.RUNNING:
                self._state = TaskState.IDLE

    def complete(self, value: Any) -> None:
        """Record the result and release the task's queue sender."""
        with self._lock:
            if self._state not in _FINISHED:
                self._finish_locked(TaskState.COMPLETED, result=value)

    def fail(self, error: BaseException) -> None:
        """Record the error and release the task's queue sender.

        The first outcome wins: failing a finished task keeps its original result or error.
        """
        with self._lock:
            if self._state not in _FINISHED:
                self._finish_locked(TaskState.FAILED, error=error)

    def _finish_locked(
        self,
        state: TaskState,
        *,
        result: Any = None,
        error: BaseException | None = None,
    ) -> None:
        self._computation = None
        self._result = result
        self._error = error
        self._state = state
        self._sender.close()
        self._finished.set()

    def __repr__(self) -> str:
        return f"Task(id={self.task_id}, name={self.name!r}, state={self._state.value})"
