"""Test helpers shared by unit, integration and feature tests."""

from dataclasses import dataclass

NOW = 1_760_000_000.0


@dataclass
class FakeClock:
    """Settable clock returning Unix timestamps."""

    now: float = NOW

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds
