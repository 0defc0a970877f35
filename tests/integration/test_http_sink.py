"""Integration tests for HTTP sink forwarding."""

import json
import logging
import threading

import httpx
import pytest

from agentobs.adapters.sinks.http import (
    HttpSinkForwarder,
    NullSinkForwarder,
    create_forwarder,
)
from agentobs.context import ObservabilityContext
from agentobs.core.config import ObservabilityConfig
from agentobs.core.models import LogEntry, MetricSample


def _entry() -> LogEntry:
    return LogEntry(
        level="INFO",
        operation="publish",
        agent_id="abraham",
        actor_id="trainer-A",
        timestamp=1000.0,
        message="Starting publish",
    )


def _sample() -> MetricSample:
    return MetricSample(
        operation="publish",
        agent_id="abraham",
        actor_id="trainer-A",
        timestamp=1000.0,
        duration_ms=12.0,
        success=True,
    )


class CapturingTransport(httpx.MockTransport):
    """MockTransport that records every request it receives."""

    def __init__(self, status_code: int = 202) -> None:
        self.requests: list[httpx.Request] = []
        self._lock = threading.Lock()

        def handler(request: httpx.Request) -> httpx.Response:
            with self._lock:
                self.requests.append(request)
            return httpx.Response(status_code)

        super().__init__(handler)


class TestHttpSinkForwarder:
    """Tests for HttpSinkForwarder delivery."""

    @pytest.mark.sinks
    def test_posts_logs_and_metrics_to_their_urls(self) -> None:
        """Each record is POSTed as JSON to its own sink."""
        transport = CapturingTransport()
        forwarder = HttpSinkForwarder(
            "http://sink/logs", "http://sink/metrics", transport=transport
        )

        forwarder.forward_log(_entry())
        forwarder.forward_metric(_sample())
        forwarder.close(timeout=5)

        by_url = {str(r.url): r for r in transport.requests}
        assert set(by_url) == {"http://sink/logs", "http://sink/metrics"}
        log_request = by_url["http://sink/logs"]
        assert log_request.method == "POST"
        assert log_request.headers["content-type"] == "application/json"
        assert json.loads(log_request.content)["message"] == "Starting publish"
        assert json.loads(by_url["http://sink/metrics"].content)["duration_ms"] == 12.0

    @pytest.mark.sinks
    def test_unconfigured_sink_is_skipped(self) -> None:
        """Only records with a configured URL are delivered."""
        transport = CapturingTransport()
        forwarder = HttpSinkForwarder(metrics_sink_url="http://sink/metrics", transport=transport)

        forwarder.forward_log(_entry())
        forwarder.forward_metric(_sample())
        forwarder.close(timeout=5)

        assert [str(r.url) for r in transport.requests] == ["http://sink/metrics"]

    @pytest.mark.sinks
    def test_no_worker_without_records(self) -> None:
        """The worker thread starts lazily."""
        forwarder = HttpSinkForwarder("http://sink/logs")

        forwarder.close(timeout=1)

        assert forwarder._worker is None

    @pytest.mark.sinks
    def test_error_status_is_logged_not_raised(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        """A 5xx response is logged on the worker and dropped."""
        forwarder = HttpSinkForwarder(
            "http://sink/logs", transport=CapturingTransport(status_code=503)
        )

        forwarder.forward_log(_entry())
        forwarder.close(timeout=5)

        assert "Failed to send record to external service" in caplog.text

    @pytest.mark.sinks
    def test_connection_error_is_logged_not_raised(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Transport failures never escape the worker."""

        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        forwarder = HttpSinkForwarder(
            "http://sink/logs", transport=httpx.MockTransport(refuse)
        )

        forwarder.forward_log(_entry())
        forwarder.forward_log(_entry())
        forwarder.close(timeout=5)

        assert caplog.text.count("connection refused") == 2

    @pytest.mark.sinks
    def test_full_queue_drops_records(
        self, monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Enqueueing never blocks: overflow is dropped with a warning."""
        forwarder = HttpSinkForwarder("http://sink/logs", queue_size=1)
        monkeypatch.setattr(forwarder, "_ensure_worker", lambda: None)

        with caplog.at_level(logging.WARNING):
            forwarder.forward_log(_entry())
            forwarder.forward_log(_entry())

        assert forwarder.dropped == 1
        assert "Sink queue full" in caplog.text

    @pytest.mark.sinks
    def test_drop_count_is_exact_under_concurrent_writers(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Every dropped record is counted when many threads overflow the queue."""
        forwarder = HttpSinkForwarder("http://sink/logs", queue_size=1)
        monkeypatch.setattr(forwarder, "_ensure_worker", lambda: None)

        def flood() -> None:
            for _ in range(200):
                forwarder.forward_log(_entry())

        threads = [threading.Thread(target=flood) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert forwarder.dropped == 8 * 200 - 1

    @pytest.mark.sinks
    def test_records_after_close_are_ignored(self) -> None:
        """A closed forwarder accepts no new work."""
        transport = CapturingTransport()
        forwarder = HttpSinkForwarder("http://sink/logs", transport=transport)
        forwarder.close(timeout=1)

        forwarder.forward_log(_entry())

        assert forwarder._worker is None
        assert transport.requests == []


class TestCreateForwarder:
    """Tests for create_forwarder()."""

    @pytest.mark.sinks
    def test_null_forwarder_without_urls(self) -> None:
        """No URLs means forwarding is a no-op."""
        assert isinstance(create_forwarder(ObservabilityConfig()), NullSinkForwarder)

    @pytest.mark.sinks
    def test_http_forwarder_uses_config(self) -> None:
        """Sink settings are taken from the config."""
        forwarder = create_forwarder(
            ObservabilityConfig(log_sink_url="http://sink/logs", sink_queue_size=3)
        )

        assert isinstance(forwarder, HttpSinkForwarder)
        assert forwarder.log_sink_url == "http://sink/logs"
        assert forwarder.metrics_sink_url is None


class TestContextForwarding:
    """End-to-end forwarding from track() to the sinks."""

    @pytest.mark.sinks
    async def test_track_forwards_every_record(self) -> None:
        """Start/complete logs and the metric sample all reach the sinks."""
        transport = CapturingTransport()
        config = ObservabilityConfig(
            log_sink_url="http://sink/logs", metrics_sink_url="http://sink/metrics"
        )
        obs = ObservabilityContext(
            config, forwarder=create_forwarder(config, transport=transport)
        )

        result = await obs.track("publish", "abraham", "trainer-A", lambda: "done")
        obs.close()

        assert result == "done"
        urls = sorted(str(r.url) for r in transport.requests)
        assert urls == ["http://sink/logs", "http://sink/logs", "http://sink/metrics"]

    @pytest.mark.sinks
    async def test_failing_sink_does_not_affect_operation(self) -> None:
        """An unreachable sink leaves results and local records intact."""

        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        config = ObservabilityConfig(metrics_sink_url="http://sink/metrics")
        obs = ObservabilityContext(
            config,
            forwarder=create_forwarder(config, transport=httpx.MockTransport(refuse)),
        )

        result = await obs.track("publish", "abraham", "", lambda: 42)
        obs.close()

        assert result == 42
        assert len(obs.metrics_storage.scrape()) == 1
