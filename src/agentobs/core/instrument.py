"""Instrumentation facade used by agent business code."""

import asyncio
import inspect
import logging
import time
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from agentobs.core import metrics
from agentobs.core.recorder import EventRecorder

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Instrumentation:
    """Wraps agent operations with timing, metrics and structured logs.

    The wrapped operation's result and exceptions pass through untouched.
    Recording happens as a side effect and never raises into the caller.

    Example:
        ```python
        instrumentation = Instrumentation(recorder)

        result = await instrumentation.track(
            "publish", "abraham", "trainer-A", lambda: publish_work(work_id)
        )
        ```
    """

    def __init__(self, recorder: EventRecorder) -> None:
        self._recorder = recorder

    async def track(
        self,
        operation: str,
        agent_id: str,
        actor_id: str,
        fn: Callable[[], Awaitable[T] | T],
        metadata: dict[str, Any] | None = None,
    ) -> T:
        """Run fn, record one metric sample and its start/end log entries.

        fn may return an awaitable, which is awaited. Cancellation while
        awaiting is recorded as a failure with the time elapsed so far
        and then propagated.

        Raises:
            Whatever fn raises, unchanged.
        """
        started_at, started = self._start(operation, agent_id, actor_id, metadata)
        try:
            result = fn()
            if inspect.isawaitable(result):
                result = await result
        except (Exception, asyncio.CancelledError) as exc:
            self._record_failure(
                operation, agent_id, actor_id, started_at, started, exc, metadata
            )
            raise
        self._record_success(operation, agent_id, actor_id, started_at, started, metadata)
        return result  # type: ignore[return-value]

    def track_sync(
        self,
        operation: str,
        agent_id: str,
        actor_id: str,
        fn: Callable[[], T],
        metadata: dict[str, Any] | None = None,
    ) -> T:
        """Synchronous counterpart of track() for plain callables.

        Raises:
            Whatever fn raises, unchanged.
        """
        started_at, started = self._start(operation, agent_id, actor_id, metadata)
        try:
            result = fn()
        except Exception as exc:
            self._record_failure(
                operation, agent_id, actor_id, started_at, started, exc, metadata
            )
            raise
        self._record_success(operation, agent_id, actor_id, started_at, started, metadata)
        return result

    def info(
        self,
        operation: str,
        agent_id: str,
        actor_id: str,
        message: str,
        context: dict[str, Any] | None = None,
    ) -> None:
        self._recorder.log("INFO", operation, agent_id, actor_id, message, context)

    def warn(
        self,
        operation: str,
        agent_id: str,
        actor_id: str,
        message: str,
        context: dict[str, Any] | None = None,
    ) -> None:
        self._recorder.log("WARN", operation, agent_id, actor_id, message, context)

    def error(
        self,
        operation: str,
        agent_id: str,
        actor_id: str,
        message: str,
        context: dict[str, Any] | None = None,
    ) -> None:
        self._recorder.log("ERROR", operation, agent_id, actor_id, message, context)

    def _start(
        self,
        operation: str,
        agent_id: str,
        actor_id: str,
        metadata: dict[str, Any] | None,
    ) -> tuple[float, float]:
        try:
            started_at = self._recorder.clock()
        except Exception:
            logger.exception("Clock failed while starting %s", operation)
            started_at = time.time()
        started = time.perf_counter()
        self._recorder.log(
            "INFO", operation, agent_id, actor_id, f"Starting {operation}", metadata
        )
        return started_at, started

    def _record_success(
        self,
        operation: str,
        agent_id: str,
        actor_id: str,
        started_at: float,
        started: float,
        metadata: dict[str, Any] | None,
    ) -> None:
        try:
            duration = metrics.elapsed_ms(started)
            self._recorder.record_metric(
                metrics.success(
                    operation, agent_id, actor_id, started_at, duration, metadata
                )
            )
            self._recorder.log(
                "INFO",
                operation,
                agent_id,
                actor_id,
                f"Completed {operation}",
                {**(metadata or {}), "duration_ms": duration},
            )
        except Exception:
            logger.exception("Failed to record completion of %s", operation)

    def _record_failure(
        self,
        operation: str,
        agent_id: str,
        actor_id: str,
        started_at: float,
        started: float,
        exc: BaseException,
        metadata: dict[str, Any] | None,
    ) -> None:
        try:
            duration = metrics.elapsed_ms(started)
            message = metrics.failure_message(exc)
            self._recorder.record_metric(
                metrics.failure(
                    operation, agent_id, actor_id, started_at, duration, message, metadata
                )
            )
            self._recorder.log(
                "ERROR",
                operation,
                agent_id,
                actor_id,
                f"Failed {operation}: {message}",
                {**(metadata or {}), "duration_ms": duration, "error": message},
            )
        except Exception:
            logger.exception("Failed to record failure of %s", operation)
