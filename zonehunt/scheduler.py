"""Zone passes and the fixed-cadence loop that repeats them."""

from __future__ import annotations

import time
from dataclasses import dataclass
from datetime import timedelta
from typing import Callable, Protocol, Sequence

from zonehunt.backoff import BackoffPolicy, RunState
from zonehunt.classify import classify
from zonehunt.compute import LaunchResult
from zonehunt.config import Settings
from zonehunt.reporter import Reporter
from zonehunt.request import LaunchRequest, Zone, build_request


class Launcher(Protocol):
    def launch(self, request: LaunchRequest, zone: Zone) -> LaunchResult: ...


@dataclass(frozen=True)
class PassResult:
    """Outcome of one pass over the zones.

    ``success`` is set only when a zone accepted the launch; the pass stops
    there and the run is over.
    """

    attempts: int
    success: LaunchResult | None = None

    @property
    def succeeded(self) -> bool:
        return self.success is not None


def run_pass(
    zones: Sequence[Zone],
    settings: Settings,
    state: RunState,
    launcher: Launcher,
    reporter: Reporter,
    policy: BackoffPolicy,
    sleep: Callable[[float], None] = time.sleep,
) -> PassResult:
    """Try every zone once, in order, pausing ``state.zone_interval`` after each.

    The pause also follows the last zone. A success returns at once without
    pausing or touching the remaining zones.
    """
    attempts = 0
    for zone in zones:
        reporter.info(f"Attempting to create new instance in domain {zone.name}")
        request = build_request(settings, zone)
        result = launcher.launch(request, zone)
        attempts += 1

        outcome = classify(result.error)
        if outcome.succeeded:
            return PassResult(attempts=attempts, success=result)

        if outcome.out_of_capacity:
            reporter.debug(f"Out of host capacity in {zone.name}")
        if outcome.rate_limited:
            policy.on_rate_limited(state)
            reporter.warning(
                f"Received too many requests, waiting {state.zone_interval}s between zones"
            )
        if outcome.unexpected:
            reporter.error(
                f"Received error from api in {zone.name}: {outcome.error}\n"
                f"req: {request.summary()}"
            )

        sleep(state.zone_interval)

    return PassResult(attempts=attempts)


class Scheduler:
    """Runs a pass immediately, then one per ``create_interval_seconds`` tick.

    Passes never overlap: if a pass outlasts one or more ticks, the next pass
    starts as soon as it ends and the extra ticks are dropped.
    """

    def __init__(
        self,
        settings: Settings,
        zones: Sequence[Zone],
        launcher: Launcher,
        reporter: Reporter,
        clock: Callable[[], float] | None = None,
        sleep: Callable[[float], None] | None = None,
    ) -> None:
        clock = clock or time.monotonic
        self.settings = settings
        self.zones = tuple(zones)
        self.launcher = launcher
        self.reporter = reporter
        self.policy = BackoffPolicy(
            step=settings.backoff_step_seconds,
            ceiling=settings.backoff_ceiling_seconds,
        )
        self.state = RunState(zone_interval=settings.zone_interval_seconds, started=clock())
        self.passes = 0
        self._clock = clock
        self._sleep = sleep or time.sleep

    def run(self) -> PassResult:
        """Block until an instance is launched; returns the successful pass."""
        period = self.settings.create_interval_seconds
        next_tick = self._clock() + period
        self.reporter.info(f"Starting instance generation every {period} seconds")

        while True:
            result = self.run_once()
            if result.succeeded:
                return result
            next_tick = self._wait_for_tick(next_tick, period)

    def run_once(self) -> PassResult:
        self.passes += 1
        self.reporter.debug(
            f"Pass {self.passes} over {len(self.zones)} zones, "
            f"zone interval {self.state.zone_interval}s"
        )
        return run_pass(
            self.zones,
            self.settings,
            self.state,
            self.launcher,
            self.reporter,
            self.policy,
            sleep=self._sleep,
        )

    def elapsed(self) -> timedelta:
        return timedelta(seconds=round(self._clock() - self.state.started))

    def _wait_for_tick(self, next_tick: float, period: float) -> float:
        """Sleep until *next_tick*; returns the tick after the one consumed."""
        now = self._clock()
        if now < next_tick:
            self._sleep(next_tick - now)
            return next_tick + period

        missed = int((now - next_tick) // period) + 1
        if missed > 1:
            self.reporter.debug(f"Pass overran the timer, dropped {missed - 1} ticks")
        return next_tick + missed * period
