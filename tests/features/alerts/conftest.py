"""BDD step definitions for alerting features."""

from dataclasses import dataclass, field

import pytest
from pytest_bdd import given, parsers, then, when

from agentobs.adapters.sinks.http import NullSinkForwarder
from agentobs.context import ObservabilityContext
from agentobs.core.config import ObservabilityConfig
from agentobs.core.models import AlertResult, MetricSample, WindowedAnalytics
from tests.support import FakeClock


@dataclass
class AlertScenarioContext:
    """State shared between the steps of one scenario."""

    clock: FakeClock = field(default_factory=FakeClock)
    obs: ObservabilityContext | None = None
    analytics: WindowedAnalytics | None = None
    alerts: AlertResult | None = None

    def record(
        self,
        count: int,
        operation: str,
        agent_id: str = "abraham",
        actor_id: str = "",
        duration_ms: float = 250.0,
        error: str | None = None,
    ) -> None:
        assert self.obs is not None
        for i in range(count):
            self.obs.recorder.record_metric(
                MetricSample(
                    operation=operation,
                    agent_id=agent_id,
                    actor_id=actor_id,
                    # Spread across the last minute.
                    timestamp=self.clock() - 59 + (i % 59),
                    duration_ms=duration_ms,
                    success=error is None,
                    error=error,
                )
            )


@pytest.fixture
def ctx() -> AlertScenarioContext:
    """Fresh scenario context for each test."""
    return AlertScenarioContext()


# === Background ===
@given("an observability context with a fixed clock")
def step_context(ctx: AlertScenarioContext) -> None:
    ctx.obs = ObservabilityContext(
        ObservabilityConfig(), forwarder=NullSinkForwarder(), clock=ctx.clock
    )


# === Recorded operations ===
@given(
    parsers.parse(
        '{n:d} failed "{operation}" operations for agent "{agent}" with error "{error}"'
    )
)
def step_failed_ops(
    ctx: AlertScenarioContext, n: int, operation: str, agent: str, error: str
) -> None:
    ctx.record(n, operation, agent_id=agent, error=error)


@given(parsers.parse('{n:d} successful "{operation}" operations for agent "{agent}"'))
def step_successful_ops(
    ctx: AlertScenarioContext, n: int, operation: str, agent: str
) -> None:
    ctx.record(n, operation, agent_id=agent)


@given(parsers.parse('{n:d} successful "{operation}" operations by actor "{actor}"'))
def step_actor_ops(ctx: AlertScenarioContext, n: int, operation: str, actor: str) -> None:
    ctx.record(n, operation, actor_id=actor)


@given(
    parsers.parse('{n:d} successful "{operation}" operations taking {ms:d} ms each')
)
def step_slow_ops(ctx: AlertScenarioContext, n: int, operation: str, ms: int) -> None:
    ctx.record(n, operation, duration_ms=float(ms))


# === Actions ===
@when(parsers.parse("{minutes:d} minutes pass"))
def step_time_passes(ctx: AlertScenarioContext, minutes: int) -> None:
    ctx.clock.advance(minutes * 60)


@when("the 5 minute analytics are computed")
def step_compute_analytics(ctx: AlertScenarioContext) -> None:
    assert ctx.obs is not None
    ctx.analytics = ctx.obs.get_analytics(300_000)
    ctx.alerts = ctx.obs.check_alerts()


@when("the alerts are checked")
def step_check_alerts(ctx: AlertScenarioContext) -> None:
    assert ctx.obs is not None
    ctx.alerts = ctx.obs.check_alerts()


# === Assertions ===
@then(parsers.parse("the success rate is about {rate:f}"))
def step_success_rate(ctx: AlertScenarioContext, rate: float) -> None:
    assert ctx.analytics is not None
    assert ctx.analytics.success_rate == pytest.approx(rate, abs=1e-4)


@then(parsers.parse('the error summary counts {n:d} "{category}" errors'))
def step_error_summary(ctx: AlertScenarioContext, n: int, category: str) -> None:
    assert ctx.analytics is not None
    assert ctx.analytics.error_summary[category] == n


@then(parsers.parse('a critical alert mentions "{text}"'))
def step_critical_mentions(ctx: AlertScenarioContext, text: str) -> None:
    assert ctx.alerts is not None
    assert any(text in message for message in ctx.alerts.critical_alerts)


@then(parsers.parse('a warning alert mentions "{text}"'))
def step_warning_mentions(ctx: AlertScenarioContext, text: str) -> None:
    assert ctx.alerts is not None
    assert any(text in message for message in ctx.alerts.warning_alerts)


@then(parsers.parse('no warning alert mentions "{text}"'))
def step_no_warning_mentions(ctx: AlertScenarioContext, text: str) -> None:
    assert ctx.alerts is not None
    assert not any(text in message for message in ctx.alerts.warning_alerts)


@then("there are no critical alerts")
def step_no_critical(ctx: AlertScenarioContext) -> None:
    assert ctx.alerts is not None
    assert ctx.alerts.critical_alerts == []


@then("there are no warning alerts")
def step_no_warning(ctx: AlertScenarioContext) -> None:
    assert ctx.alerts is not None
    assert ctx.alerts.warning_alerts == []
