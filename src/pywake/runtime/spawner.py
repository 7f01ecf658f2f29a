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
"""Spawner — producer handle that submits new top-level computations."""

from __future__ import annotations

import structlog

from pywake.kernel.exceptions import RuntimeException, SenderClosedException, SpawnerClosedException
from pywake.runtime.adapters.coroutine import as_computation
from pywake.runtime.channel import Sender
from pywake.runtime.task import Task

logger = structlog.get_logger("pywake.runtime.spawner")


class Spawner:
    """Submits computations to an executor's ready queue.

    Clone a spawner for every independent producer and close each clone
    when it is done submitting; the executor drains once every spawner and
    every unfinished task has let go of the queue.

    Usage::

        executor, spawner = new_executor_and_spawner()
        with spawner:
            spawner.spawn(main())
        executor.run()
    """

    def __init__(self, sender: Sender[Task]) -> None:
        self._sender = sender

    @property
    def closed(self) -> bool:
        return self._sender.closed

    def spawn(self, computation: object, *, name: str | None = None) -> Task:
        """Wrap *computation* in a Task and enqueue it.

        Accepts anything with ``poll(cx)``, a coroutine, or an awaitable.

        Raises:
            SpawnerClosedException: This handle was closed.
            QueueFullException: The ready queue is at capacity.
            NoConsumerException: The executor has terminated.
            TypeError: *computation* is not a computation.
        """
        if self._sender.closed:
            raise SpawnerClosedException()
        try:
            task = Task(as_computation(computation), self._sender.clone(), name=name)
        except SenderClosedException as exc:
            raise SpawnerClosedException() from exc

        try:
            self._sender.send(task)
        except SenderClosedException as exc:
            task.fail(exc)
            raise SpawnerClosedException() from exc
        except RuntimeException as exc:
            task.fail(exc)
            raise

        logger.debug("task_spawned", task=task.name, task_id=task.task_id)
        return task

    def clone(self) -> Spawner:
        """A new, independently closable spawner on the same queue."""
        try:
            return Spawner(self._sender.clone())
        except SenderClosedException as exc:
            raise SpawnerClosedException() from exc

    def close(self) -> None:
        """Declare that this handle will submit no more tasks. Idempotent."""
        self._sender.close()

    def __enter__(self) -> Spawner:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"Spawner(closed={self.closed})"
