"""Inter-zone wait interval and its rate-limit backoff."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class RunState:
    """Mutable state of one run, owned by the Scheduler."""

    zone_interval: int
    started: float


@dataclass(frozen=True)
class BackoffPolicy:
    """Raise the inter-zone wait by ``step`` per rate limit, up to ``ceiling``.

    The interval never goes down during a run.
    """

    step: int = 1
    ceiling: int = 20

    def on_rate_limited(self, state: RunState) -> RunState:
        if state.zone_interval < self.ceiling:
            state.zone_interval = min(state.zone_interval + self.step, self.ceiling)
        return state
