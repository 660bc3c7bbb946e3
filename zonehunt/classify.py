"""Mapping launch errors to retry decisions."""

from __future__ import annotations

import enum
from dataclasses import dataclass

CAPACITY_MARKER = "Out of host capacity"
RATE_LIMIT_MARKER = "TooManyRequests"


class Outcome(enum.Enum):
    SUCCESS = "success"
    OUT_OF_CAPACITY = "out_of_capacity"
    RATE_LIMITED = "rate_limited"
    OTHER = "other"


@dataclass(frozen=True)
class AttemptOutcome:
    """Classification of one launch attempt.

    ``kinds`` can hold both OUT_OF_CAPACITY and RATE_LIMITED when the
    provider's message carries both markers; callers act on each.
    """

    kinds: frozenset[Outcome]
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return Outcome.SUCCESS in self.kinds

    @property
    def out_of_capacity(self) -> bool:
        return Outcome.OUT_OF_CAPACITY in self.kinds

    @property
    def rate_limited(self) -> bool:
        return Outcome.RATE_LIMITED in self.kinds

    @property
    def unexpected(self) -> bool:
        return Outcome.OTHER in self.kinds


def classify(error: str | None) -> AttemptOutcome:
    """Classify the error text of a launch attempt (None means it succeeded)."""
    if error is None:
        return AttemptOutcome(frozenset({Outcome.SUCCESS}))

    kinds = set()
    if CAPACITY_MARKER in error:
        kinds.add(Outcome.OUT_OF_CAPACITY)
    if RATE_LIMIT_MARKER in error:
        kinds.add(Outcome.RATE_LIMITED)
    if not kinds:
        kinds.add(Outcome.OTHER)
    return AttemptOutcome(frozenset(kinds), error)
