"""Explicit outcome signalling for log mutations and period navigation.

Mutators in this library never raise for missing data. Instead they return
one of the frozen result types below, so callers can tell "nothing happened
because it was already satisfied" apart from "nothing happened because of a
real constraint".
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from wpstat_events.models import StatEvent


class Outcome(str, Enum):
    """Tagged outcome of a mutation or navigation request."""

    OK = "ok"
    NO_SUCH_MATCH = "no_such_match"
    NOT_FOUND = "not_found"
    LIMIT_REACHED = "limit_reached"
    ALREADY_AT_STATE = "already_at_state"
    NOT_TIED = "not_tied"


class PromotionKind(str, Enum):
    """Which structural slot a promotion allocated."""

    OVERTIME = "overtime"
    SHOOTOUT = "shootout"


@dataclass(frozen=True)
class EventResult:
    """Result of an event-log mutation.

    ``event`` is the primary event touched (the created or re-clocked one).
    ``event_ids`` lists every id created or removed, primary first.
    """

    outcome: Outcome
    event: Optional[StatEvent] = None
    event_ids: Tuple[str, ...] = ()

    @property
    def ok(self) -> bool:
        return self.outcome is Outcome.OK


@dataclass(frozen=True)
class PeriodResult:
    """Result of a period-navigation request."""

    outcome: Outcome
    period: int
    event_id: Optional[str] = None
    created: bool = False
    promotion: Optional[PromotionKind] = None

    @property
    def ok(self) -> bool:
        return self.outcome is Outcome.OK
