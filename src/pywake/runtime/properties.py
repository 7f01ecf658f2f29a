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
"""Executor settings bound from the ``pywake.executor`` config section."""

from __future__ import annotations

from pydantic import BaseModel, Field

from pywake.core.config import config_properties

DEFAULT_QUEUE_CAPACITY = 10_000


@config_properties(prefix="pywake.executor")
class ExecutorProperties(BaseModel):
    """Ready-queue sizing and failure policy.

    ``queue_capacity`` bounds the number of queued task references (spawns
    plus wakes). Size it for the worst-case wake fan-out: overflow raises
    QueueFullException instead of waiting.

    ``propagate_errors`` re-raises the first computation failure out of
    ``Executor.run()`` instead of recording it on the task and carrying on.
    """

    queue_capacity: int = Field(default=DEFAULT_QUEUE_CAPACITY, ge=1)
    propagate_errors: bool = False
