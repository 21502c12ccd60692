"""Stateless export of a game record to JSON or flat CSV rows."""

import csv
import io
import json
from typing import Dict, List, Optional, Tuple

from wpstat_events.models import GameRecord

CSV_HEADER: Tuple[str, ...] = (
    "ts", "date", "period", "team", "player", "number", "type",
)


def game_to_json(record: GameRecord) -> str:
    return json.dumps(record.to_dict(), indent=2)


def game_to_csv(record: GameRecord) -> str:
    """Flatten the event log to CSV, one row per event in log order.

    Values containing a comma, a quote or a newline are quoted, with inner
    quotes doubled. Player name and jersey number come from either roster.
    """
    players: Dict[str, Tuple[str, Optional[int]]] = {}
    for team in (record.home, record.opponent):
        for player in team.players:
            players[player.id] = (player.name, player.number)

    rows: List[Tuple[str, ...]] = [CSV_HEADER]
    for event in record.events:
        name, number = players.get(event.player_id or "", ("", None))
        team = record.home if event.team_id == record.home.id else record.opponent
        rows.append((
            event.ts.isoformat(),
            record.meta.date.isoformat(),
            str(event.period),
            team.name,
            name,
            "" if number is None else str(number),
            event.type.value,
        ))

    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")
    writer.writerows(rows)
    return buffer.getvalue()


def filename_base(record: GameRecord) -> str:
    """``<date>_<opponent>`` with whitespace runs replaced by underscores."""
    opponent = record.meta.opponent_name
    slug = "_".join(opponent.split()) if opponent else "opponent"
    return f"{record.meta.date.isoformat()}_{slug}"
