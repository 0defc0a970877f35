"""Tests for metric helper functions."""

import asyncio
import time

import pytest

from agentobs.core.metrics import elapsed_ms, failure, failure_message, success
from agentobs.core.models import MetricSample


class TestSampleHelpers:
    """Tests for success() and failure()."""

    @pytest.mark.core
    def test_success_creates_successful_sample(self) -> None:
        """success() creates a sample with success=True and no error."""
        sample = success("publish", "abraham", "trainer-A", 1000.0, 12.5)
        assert isinstance(sample, MetricSample)
        assert sample.success is True
        assert sample.error is None
        assert sample.timestamp == 1000.0
        assert sample.duration_ms == 12.5

    @pytest.mark.core
    def test_failure_carries_error(self) -> None:
        """failure() creates a sample with success=False and the message."""
        sample = failure("publish", "abraham", "", 1000.0, 3.0, "network timeout")
        assert sample.success is False
        assert sample.error == "network timeout"

    @pytest.mark.core
    def test_metadata_defaults_to_empty_dict(self) -> None:
        """Metadata defaults to an empty dict."""
        assert success("op", "a", "", 0.0, 0.0).metadata == {}

    @pytest.mark.core
    def test_metadata_is_copied(self) -> None:
        """The caller's metadata dict is not shared with the sample."""
        metadata = {"chain": "base"}
        sample = success("op", "a", "", 0.0, 0.0, metadata)
        metadata["chain"] = "changed"
        assert sample.metadata == {"chain": "base"}


class TestFailureMessage:
    """Tests for failure_message()."""

    @pytest.mark.core
    def test_uses_exception_text(self) -> None:
        """The exception text is used when present."""
        assert failure_message(ValueError("invalid work id")) == "invalid work id"

    @pytest.mark.core
    def test_falls_back_to_class_name(self) -> None:
        """Empty exception text falls back to the class name."""
        assert failure_message(asyncio.CancelledError()) == "CancelledError"
        assert failure_message(TimeoutError()) == "TimeoutError"


class TestElapsed:
    """Tests for elapsed_ms()."""

    @pytest.mark.core
    def test_elapsed_ms_converts_to_milliseconds(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Elapsed time is measured with perf_counter in milliseconds."""
        monkeypatch.setattr(time, "perf_counter", lambda: 12.5)
        assert elapsed_ms(10.0) == pytest.approx(2500.0)
