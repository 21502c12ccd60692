"""Per-player and per-team stat tallies derived from the event log."""

from collections import Counter
from typing import Dict, Iterable, List

from pydantic import BaseModel, ConfigDict

from wpstat_events.models import STRUCTURAL_STATS, GameRecord, StatEvent, StatType

_FIELD_BY_TYPE: Dict[StatType, str] = {
    StatType.GOAL: "goals",
    StatType.SHOT: "shots",
    StatType.ASSIST: "assists",
    StatType.BLOCK: "blocks",
    StatType.STEAL: "steals",
    StatType.DRAWN_EXCLUSION: "drawn_exclusions",
    StatType.TURNOVER: "turnovers",
    StatType.EXCLUSION: "exclusions",
}


class Totals(BaseModel):
    """Tally of every statistical (non-structural) event type."""

    model_config = ConfigDict(frozen=True)

    goals: int = 0
    shots: int = 0
    assists: int = 0
    blocks: int = 0
    steals: int = 0
    drawn_exclusions: int = 0
    turnovers: int = 0
    exclusions: int = 0


class OpponentTotals(BaseModel):
    model_config = ConfigDict(frozen=True)

    goals: int = 0
    shots: int = 0


def _tally(events: Iterable[StatEvent]) -> Totals:
    counts: Counter[str] = Counter()
    for event in events:
        if event.type in STRUCTURAL_STATS:
            continue
        counts[_FIELD_BY_TYPE[event.type]] += 1
    return Totals(**counts)


def totals_by_player(record: GameRecord) -> Dict[str, Totals]:
    """Totals keyed by player id.

    Every rostered player (home and opponent) appears, with zeros when
    they have no events. Events for ids missing from the rosters are still
    counted under their own key.
    """
    grouped: Dict[str, List[StatEvent]] = {}
    for team in (record.home, record.opponent):
        for player in team.players:
            grouped.setdefault(player.id, [])
    for event in record.events:
        if event.player_id is None:
            continue
        grouped.setdefault(event.player_id, []).append(event)
    return {player_id: _tally(events) for player_id, events in grouped.items()}


def totals_by_team(record: GameRecord) -> Dict[str, Totals]:
    """Totals keyed by team id, always including home and opponent."""
    grouped: Dict[str, List[StatEvent]] = {
        record.home.id: [],
        record.opponent.id: [],
    }
    for event in record.events:
        grouped.setdefault(event.team_id, []).append(event)
    return {team_id: _tally(events) for team_id, events in grouped.items()}


def opponent_totals(record: GameRecord) -> OpponentTotals:
    goals = 0
    shots = 0
    for event in record.events:
        if event.team_id != record.opponent.id:
            continue
        if event.type is StatType.GOAL:
            goals += 1
        elif event.type is StatType.SHOT:
            shots += 1
    return OpponentTotals(goals=goals, shots=shots)
