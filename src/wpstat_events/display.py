"""Display helpers for clocks and stat types."""

from typing import Dict, Optional

from wpstat_events.models import StatType

_STAT_LABELS: Dict[StatType, str] = {
    StatType.GOAL: "Goal",
    StatType.SHOT: "Shot",
    StatType.ASSIST: "Ast",
    StatType.BLOCK: "Blk",
    StatType.STEAL: "Stl",
    StatType.DRAWN_EXCLUSION: "D Ex",
    StatType.TURNOVER: "TO",
    StatType.EXCLUSION: "Ex",
    StatType.SUB_IN: "In",
    StatType.SUB_OUT: "Out",
    StatType.PERIOD_START: "Start",
}


def format_clock(seconds: Optional[int]) -> str:
    """Format in-period seconds as ``MM:SS``; unknown clocks render ``--:--``."""
    if seconds is None or seconds < 0:
        return "--:--"
    minutes, secs = divmod(seconds, 60)
    return f"{minutes:02d}:{secs:02d}"


def stat_label(stat_type: StatType) -> str:
    return _STAT_LABELS.get(stat_type, stat_type.value)
