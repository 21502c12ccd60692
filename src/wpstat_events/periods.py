"""Period rules: score, tie detection, labels and structural promotion.

Everything here is a pure function of the event log and the game metadata.
Nothing is cached; callers recompute on demand.
"""

from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

from wpstat_events.models import GameMeta, StatEvent, StatType
from wpstat_events.results import PromotionKind


@dataclass(frozen=True)
class Score:
    home: int = 0
    opponent: int = 0


def compute_score(events: Iterable[StatEvent], home_team_id: str) -> Score:
    """Count GOAL events per side. Any non-home goal counts for the opponent."""
    home = 0
    opponent = 0
    for event in events:
        if event.type is not StatType.GOAL:
            continue
        if event.team_id == home_team_id:
            home += 1
        else:
            opponent += 1
    return Score(home=home, opponent=opponent)


def is_tied(events: Iterable[StatEvent], home_team_id: str) -> bool:
    score = compute_score(events, home_team_id)
    return score.home == score.opponent


def period_label(period: int, meta: GameMeta) -> str:
    """Display label for a period: regulation number, ``OT``/``OT{k}`` or ``SO``."""
    if meta.shootout_period is not None and period == meta.shootout_period:
        return "SO"
    if period <= meta.periods:
        return str(period)
    ot_index = period - meta.periods
    return f"OT{ot_index}" if ot_index > 1 else "OT"


def allocated_overtime(meta: GameMeta) -> int:
    """Number of overtime periods allocated so far.

    Equal to ``total_periods - periods`` until the shootout is allocated,
    which always comes after the last overtime slot.
    """
    shootout = 1 if meta.shootout_period is not None else 0
    return meta.total_periods - meta.periods - shootout


def promote_to_next_structure(
    meta: GameMeta,
) -> Optional[Tuple[GameMeta, PromotionKind]]:
    """Grow the match by one period, if the configuration allows it.

    Overtime slots are allocated first, up to ``overtime_periods``. Once they
    are exhausted the shootout is allocated, once, if enabled. Returns the
    updated metadata and what was allocated, or None when the structure is
    already at its configured limit. The caller is responsible for gating
    this on a tied score.
    """
    if allocated_overtime(meta) < meta.overtime_periods:
        return (
            meta.model_copy(update={"total_periods": meta.total_periods + 1}),
            PromotionKind.OVERTIME,
        )
    if meta.shootout_enabled and meta.shootout_period is None:
        return (
            meta.model_copy(
                update={
                    "shootout_period": meta.total_periods + 1,
                    "total_periods": meta.total_periods + 1,
                }
            ),
            PromotionKind.SHOOTOUT,
        )
    return None
