"""Python logging handler adapter for agentobs.

This adapter bridges Python's standard library logging module to the
event recorder, so log calls made by agent code land in the same
buffer (and sinks) as the entries written through the facade.
"""

import logging
from typing import Any

from agentobs.core import logs
from agentobs.core.recorder import EventRecorder

# Standard LogRecord attributes that should not be treated as extra fields
_STANDARD_LOGRECORD_ATTRS = frozenset(
    {
        "args",
        "asctime",
        "created",
        "exc_info",
        "exc_text",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "message",
        "module",
        "msecs",
        "msg",
        "name",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "stack_info",
        "taskName",
        "thread",
        "threadName",
    }
)

# Extras that identify the operation rather than describe it
_IDENTITY_ATTRS = frozenset({"operation", "agent_id", "actor_id"})


def _map_level(levelno: int) -> str:
    if levelno >= logging.ERROR:
        return "ERROR"
    if levelno >= logging.WARNING:
        return "WARN"
    return "INFO"


class AgentLogHandler(logging.Handler):
    """Logging handler that writes log records to an EventRecorder.

    Records from the agentobs package itself are ignored, since the
    recorder echoes its own entries through logging.

    Example:
        ```python
        from agentobs import AgentLogHandler, ObservabilityContext

        obs = ObservabilityContext()
        logging.getLogger("agents").addHandler(AgentLogHandler(obs.recorder))

        logging.getLogger("agents.curation").warning(
            "Low confidence", extra={"operation": "curate", "agent_id": "abraham"}
        )
        ```
    """

    def __init__(
        self,
        recorder: EventRecorder,
        default_operation: str = "log",
        level: int = logging.NOTSET,
    ) -> None:
        """Initialize the handler with a recorder.

        Args:
            recorder: Recorder that stores and forwards the entries.
            default_operation: Operation used when a record has no
                "operation" extra. Defaults to "log".
            level: Minimum level handled.
        """
        super().__init__(level)
        self._recorder = recorder
        self._default_operation = default_operation

    def emit(self, record: logging.LogRecord) -> None:
        """Emit a log record to the recorder.

        Args:
            record: The log record to emit.
        """
        if record.name == "agentobs" or record.name.startswith("agentobs."):
            return
        try:
            context: dict[str, Any] = {"logger": record.name}

            # Add any extra attributes passed via logging call
            for key, value in record.__dict__.items():
                if (
                    key not in _STANDARD_LOGRECORD_ATTRS
                    and key not in _IDENTITY_ATTRS
                    and isinstance(value, (str, int, float, bool))
                ):
                    context[key] = value

            # Extract exception info if present
            if record.exc_info:
                exc_type, exc_value, _ = record.exc_info
                if exc_type is not None:
                    context["exc_type"] = exc_type.__name__
                if exc_value is not None:
                    context["exc_message"] = str(exc_value)

            entry = logs.log(
                _map_level(record.levelno),
                str(getattr(record, "operation", self._default_operation)),
                str(getattr(record, "agent_id", "")),
                str(getattr(record, "actor_id", "")),
                record.getMessage(),
                context,
                timestamp=record.created,
            )
            self._recorder.write_entry(entry)
        except Exception:
            self.handleError(record)
