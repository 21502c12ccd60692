"""
wpstat-events: Match event log, period progression and stat derivation.

This library records the discrete actions of a water polo match (goals,
shots, exclusions, substitutions, period boundaries), derives running
statistics from that record, and manages period progression, including
overtime and shootout extension when the score is tied.

Example:
    >>> from wpstat_events import (
    ...     CreateGameArgs, GameSession, InMemoryGameStore, PeriodController,
    ... )
    >>> session = GameSession(InMemoryGameStore())
    >>> game = session.create_game(CreateGameArgs(home_team_name="Sharks"))
    >>> controller = PeriodController.for_session(session)
    >>> controller.next().period
    2
"""

__version__ = "0.3.0"

# Core data models
from wpstat_events.models import (
    StatType,
    POSITIVE_STATS,
    NEGATIVE_STATS,
    STRUCTURAL_STATS,
    Player,
    Team,
    StatEvent,
    GameMeta,
    GameRecord,
    GamesIndexEntry,
    CreateGameArgs,
    WpstatEventsError,
    StorageError,
    ValidationError,
    new_id,
    normalize_stat_type,
)

# Outcomes
from wpstat_events.results import (
    Outcome,
    PromotionKind,
    EventResult,
    PeriodResult,
)

# Storage abstractions
from wpstat_events.storage import (
    GameStore,
    InMemoryGameStore,
    JsonFileGameStore,
)

# Settings
from wpstat_events.settings import (
    AppSettings,
    load_settings,
    save_settings,
)

# Event log
from wpstat_events.log import (
    GameSession,
    backfill_clocks,
    event_sort_key,
    next_clock,
    sort_events,
)

# Undo records
from wpstat_events.undo import (
    EventAction,
    PeriodAction,
    EventUndoStack,
    PeriodActionStack,
    interleave_actions,
)

# Period rules and controller
from wpstat_events.periods import (
    Score,
    allocated_overtime,
    compute_score,
    is_tied,
    period_label,
    promote_to_next_structure,
)
from wpstat_events.controller import (
    PeriodController,
    PeriodControllerDeps,
    SessionControllerDeps,
)

# Tallies
from wpstat_events.stats import (
    Totals,
    OpponentTotals,
    totals_by_player,
    totals_by_team,
    opponent_totals,
)

# Display and export
from wpstat_events.display import format_clock, stat_label
from wpstat_events.export import filename_base, game_to_csv, game_to_json

__all__ = [
    "__version__",
    # Models
    "StatType",
    "POSITIVE_STATS",
    "NEGATIVE_STATS",
    "STRUCTURAL_STATS",
    "Player",
    "Team",
    "StatEvent",
    "GameMeta",
    "GameRecord",
    "GamesIndexEntry",
    "CreateGameArgs",
    "new_id",
    "normalize_stat_type",
    # Exceptions
    "WpstatEventsError",
    "StorageError",
    "ValidationError",
    # Outcomes
    "Outcome",
    "PromotionKind",
    "EventResult",
    "PeriodResult",
    # Storage
    "GameStore",
    "InMemoryGameStore",
    "JsonFileGameStore",
    # Settings
    "AppSettings",
    "load_settings",
    "save_settings",
    # Event log
    "GameSession",
    "backfill_clocks",
    "event_sort_key",
    "next_clock",
    "sort_events",
    # Undo
    "EventAction",
    "PeriodAction",
    "EventUndoStack",
    "PeriodActionStack",
    "interleave_actions",
    # Periods
    "Score",
    "allocated_overtime",
    "compute_score",
    "is_tied",
    "period_label",
    "promote_to_next_structure",
    "PeriodController",
    "PeriodControllerDeps",
    "SessionControllerDeps",
    # Tallies
    "Totals",
    "OpponentTotals",
    "totals_by_player",
    "totals_by_team",
    "opponent_totals",
    # Display and export
    "format_clock",
    "stat_label",
    "filename_base",
    "game_to_csv",
    "game_to_json",
]
