"""Shared pytest fixtures for all tests."""
from datetime import datetime, timedelta, timezone
from typing import Any, List

import pytest

from wpstat_events import (
    CreateGameArgs,
    GameRecord,
    GameSession,
    InMemoryGameStore,
    PeriodController,
    Player,
    StatEvent,
    StatType,
)

BASE_TIME = datetime(2026, 3, 14, 18, 0, tzinfo=timezone.utc)


class TickingClock:
    """Deterministic wall clock advancing one second per call."""

    def __init__(self, start: datetime = BASE_TIME) -> None:
        self.current = start

    def __call__(self) -> datetime:
        self.current = self.current + timedelta(seconds=1)
        return self.current


def make_event(**overrides: Any) -> StatEvent:
    """Build a StatEvent with defaults for all required fields."""
    defaults: dict[str, Any] = {
        "game_id": "game-001",
        "team_id": "home",
        "type": StatType.SHOT,
        "period": 1,
        "clock": 0,
        "ts": BASE_TIME,
    }
    defaults.update(overrides)
    return StatEvent(**defaults)


def make_args(**overrides: Any) -> CreateGameArgs:
    """CreateGameArgs for a four-period game with a two-player roster."""
    defaults: dict[str, Any] = {
        "home_team_name": "Sharks",
        "players": [
            Player(id="p-7", number=7, name="Ana"),
            Player(id="p-9", number=9, name="Bea"),
        ],
        "opponent_name": "Rays",
        "periods": 4,
        "overtime_periods": 0,
        "shootout_enabled": False,
        "auto_shot_on_goal": True,
    }
    defaults.update(overrides)
    return CreateGameArgs(**defaults)


def goals(session: GameSession, home: int, opponent: int, period: int = 1) -> None:
    """Log team-level goals for each side."""
    game = session.game
    assert game is not None
    for _ in range(home):
        session.add_event(game.id, game.home.id, StatType.GOAL, period)
    for _ in range(opponent):
        session.add_event(game.id, game.opponent.id, StatType.GOAL, period)


def period_starts(game: GameRecord, period: int) -> List[StatEvent]:
    return [
        e for e in game.events
        if e.type is StatType.PERIOD_START and e.period == period
    ]


@pytest.fixture
def store() -> InMemoryGameStore:
    return InMemoryGameStore()


@pytest.fixture
def session(store: InMemoryGameStore) -> GameSession:
    return GameSession(store, now=TickingClock())


@pytest.fixture
def game(session: GameSession) -> GameRecord:
    return session.create_game(make_args())


@pytest.fixture
def controller(session: GameSession, game: GameRecord) -> PeriodController:
    return PeriodController.for_session(session)
