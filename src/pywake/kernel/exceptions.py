"""Unified exception hierarchy for pywake.

All runtime exceptions inherit from PyWakeException, so callers can catch a
single base type or a specific subclass.

Categories:
- RuntimeException: ready-queue, spawner, executor and task failures
- ConfigurationException: invalid or unbindable configuration
"""

from __future__ import annotations


# =============================================================================
# Base Exception
# =============================================================================


class PyWakeException(Exception):
    """Base exception for all pywake errors.

    Carries an optional error code and context dict for structured error data.

    Args:
        message: Human-readable error description.
        code: Machine-readable error code (e.g. "QUEUE_FULL").
        context: Arbitrary key-value pairs for error context and debugging.
    """

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.context: dict = context if context is not None else {}


# =============================================================================
# Runtime Exceptions
# =============================================================================


class RuntimeException(PyWakeException):
    """Failures raised by the task runtime."""


class QueueFullException(RuntimeException):
    """The bounded ready queue is at capacity; the item was not enqueued."""

    def __init__(self, capacity: int) -> None:
        super().__init__(
            f"Ready queue at capacity ({capacity} queued tasks)",
            code="QUEUE_FULL",
            context={"capacity": capacity},
        )
        self.capacity = capacity


class NoConsumerException(RuntimeException):
    """The ready queue's consumer has already terminated."""

    def __init__(self, message: str = "Ready queue has no live consumer") -> None:
        super().__init__(message, code="NO_CONSUMER")


class SenderClosedException(RuntimeException):
    """A send was attempted through a ready-queue sender that was closed."""

    def __init__(self, message: str = "Sender handle is closed") -> None:
        super().__init__(message, code="SENDER_CLOSED")


class ChannelClosedException(RuntimeException):
    """The ready queue is closed and empty; nothing more will ever arrive."""

    def __init__(self, message: str = "Ready queue is closed and drained") -> None:
        super().__init__(message, code="CHANNEL_CLOSED")


class ChannelTimeoutException(RuntimeException):
    """No item arrived on the ready queue within the requested timeout."""

    def __init__(self, timeout: float) -> None:
        super().__init__(
            f"No ready task within {timeout}s",
            code="CHANNEL_TIMEOUT",
            context={"timeout": timeout},
        )


class SpawnerClosedException(RuntimeException):
    """A spawn was attempted through a closed Spawner handle."""

    def __init__(self, message: str = "Spawner handle is closed") -> None:
        super().__init__(message, code="SPAWNER_CLOSED")


class ExecutorStateException(RuntimeException):
    """The executor was used outside its valid lifecycle (e.g. run twice)."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="EXECUTOR_STATE")


class TaskFailedException(RuntimeException):
    """A task's computation raised instead of completing."""

    def __init__(self, task_name: str, cause: BaseException) -> None:
        super().__init__(
            f"Task {task_name!r} failed: {cause!r}",
            code="TASK_FAILED",
            context={"task": task_name},
        )
        self.__cause__ = cause


class OperationTimeoutException(RuntimeException):
    """A blocking wait exceeded its allowed time limit."""

    def __init__(self, timeout: float) -> None:
        super().__init__(
            f"Operation did not complete within {timeout}s",
            code="TIMEOUT",
            context={"timeout": timeout},
        )


# =============================================================================
# Configuration Exceptions
# =============================================================================


class ConfigurationException(PyWakeException):
    """Configuration could not be loaded, resolved or bound."""
