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
"""Computation port — the contract every spawned unit of work satisfies."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from pywake.runtime.context import Context
    from pywake.runtime.poll import Poll


@runtime_checkable
class Computation(Protocol):
    """A suspendable computation the executor can drive.

    ``poll`` is called repeatedly until it returns ``Ready(value)``.
    Returning ``PENDING`` is a promise: the computation has already arranged
    for ``cx.waker.wake()`` to be called once polling again may make
    progress. A computation that breaks this promise is never polled again.
    """

    def poll(self, cx: Context) -> Poll:
        """Advance as far as possible without blocking."""
        ...
