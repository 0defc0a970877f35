"""Sink adapters implementing SinkPort."""

from agentobs.adapters.sinks.http import (
    HttpSinkForwarder,
    NullSinkForwarder,
    create_forwarder,
)

__all__ = [
    "HttpSinkForwarder",
    "NullSinkForwarder",
    "create_forwarder",
]
