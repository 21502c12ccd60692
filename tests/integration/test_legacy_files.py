"""Integration tests for game files written before clocks were recorded."""
import json
from pathlib import Path

from conftest import TickingClock
from wpstat_events import GameSession, JsonFileGameStore, StatType


def _legacy_game() -> dict:
    def event(event_id: str, type_: str, period: int, offset: int, **extra: object) -> dict:
        return {
            "id": event_id,
            "game_id": "legacy-1",
            "team_id": "home",
            "type": type_,
            "period": period,
            "ts": 1_700_000_000_000 + offset * 1000,
            **extra,
        }

    return {
        "meta": {"id": "legacy-1", "date": "2025-11-02", "periods": 4,
                 "opponent_name": "Rays"},
        "home": {"id": "home", "name": "Sharks"},
        "opponent": {"id": "away", "name": "Rays", "is_opponent": True},
        "events": [
            event("e1", "SHOT", 1, 0),
            event("e2", "GOAL", 1, 1),
            event("e3", "EXCLUSION", 2, 2),
            event("e4", "SHOT", 1, 3, clock=5),
        ],
    }


class TestLegacyBackfill:
    """Loading a game whose events lack a clock."""

    def test_load_assigns_sequential_clocks(self, tmp_path: Path) -> None:
        (tmp_path / "game_legacy-1.json").write_text(json.dumps(_legacy_game()))
        store = JsonFileGameStore(tmp_path)
        assert [e.id for e in store.refresh_index()] == ["legacy-1"]

        session = GameSession(store, now=TickingClock())
        game = session.load_game("legacy-1")
        assert game is not None
        assert [(e.id, e.period, e.clock) for e in game.events] == [
            ("e1", 1, 0),
            ("e2", 1, 1),
            ("e4", 1, 5),
            ("e3", 2, 0),
        ]
        assert session.period == 2

    def test_backfill_written_back(self, tmp_path: Path) -> None:
        path = tmp_path / "game_legacy-1.json"
        path.write_text(json.dumps(_legacy_game()))
        GameSession(JsonFileGameStore(tmp_path)).load_game("legacy-1")
        stored = json.loads(path.read_text())
        assert all(e["clock"] is not None for e in stored["events"])

    def test_new_events_continue_after_backfill(self, tmp_path: Path) -> None:
        (tmp_path / "game_legacy-1.json").write_text(json.dumps(_legacy_game()))
        session = GameSession(JsonFileGameStore(tmp_path), now=TickingClock())
        session.load_game("legacy-1")
        result = session.add_event("legacy-1", "home", StatType.BLOCK, 1)
        assert result.event is not None
        assert result.event.clock == 6
        result = session.add_event("legacy-1", "away", "steal", 2)
        assert result.event is not None
        assert result.event.clock == 1

    def test_naive_iso_timestamps_mix_with_new_events(self, tmp_path: Path) -> None:
        data = _legacy_game()
        data["events"] = [
            {"id": "e1", "game_id": "legacy-1", "team_id": "home", "type": "SHOT",
             "period": 1, "clock": 3, "ts": "2025-11-02T10:00:00"},
        ]
        (tmp_path / "game_legacy-1.json").write_text(json.dumps(data))
        session = GameSession(JsonFileGameStore(tmp_path), now=TickingClock())
        session.load_game("legacy-1")
        result = session.add_event("legacy-1", "home", StatType.BLOCK, 1, clock=3)
        assert result.ok and result.event is not None
        assert session.game is not None
        assert [e.id for e in session.game.events] == ["e1", result.event.id]
