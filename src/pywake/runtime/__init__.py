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
"""pywake Runtime — a cooperative, wake-driven task executor.

One thread runs ``Executor.run()``; any thread may spawn through a
``Spawner`` or wake a task through its ``Waker``.
"""

from pywake.runtime.adapters.coroutine import CoroutineComputation, as_computation
from pywake.runtime.block_on import block_on
from pywake.runtime.channel import Receiver, Sender, channel
from pywake.runtime.combinators import Join, join
from pywake.runtime.context import Context, Waker, current_context
from pywake.runtime.executor import Executor, ExecutorStats, new_executor_and_spawner
from pywake.runtime.future import Future, pending_forever, ready
from pywake.runtime.poll import PENDING, Pending, Poll, Ready, is_ready
from pywake.runtime.ports.outbound import Computation
from pywake.runtime.properties import ExecutorProperties
from pywake.runtime.spawner import Spawner
from pywake.runtime.task import Task, TaskState

__all__ = [
    # Poll protocol
    "Computation",
    "Context",
    "PENDING",
    "Pending",
    "Poll",
    "Ready",
    "Waker",
    "current_context",
    "is_ready",
    # Executor
    "Executor",
    "ExecutorProperties",
    "ExecutorStats",
    "Spawner",
    "Task",
    "TaskState",
    "new_executor_and_spawner",
    # Queue
    "Receiver",
    "Sender",
    "channel",
    # Composition
    "CoroutineComputation",
    "Future",
    "Join",
    "as_computation",
    "block_on",
    "join",
    "pending_forever",
    "ready",
]
