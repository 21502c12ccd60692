"""Unit tests for the core data models."""

import datetime as dt

import pydantic
import pytest

from conftest import make_event
from wpstat_events import (
    NEGATIVE_STATS,
    POSITIVE_STATS,
    STRUCTURAL_STATS,
    GameMeta,
    GameRecord,
    Player,
    StatType,
    Team,
    ValidationError,
    new_id,
    normalize_stat_type,
)


class TestStatType:
    def test_groups_are_disjoint_and_complete(self) -> None:
        groups = set(POSITIVE_STATS) | set(NEGATIVE_STATS) | set(STRUCTURAL_STATS)
        assert groups == set(StatType)
        assert not set(POSITIVE_STATS) & set(NEGATIVE_STATS)

    @pytest.mark.parametrize("raw", ["goal", "GOAL", " Goal "])
    def test_normalize_strings(self, raw: str) -> None:
        assert normalize_stat_type(raw) is StatType.GOAL

    def test_normalize_member(self) -> None:
        assert normalize_stat_type(StatType.SUB_IN) is StatType.SUB_IN

    @pytest.mark.parametrize("raw", ["penalty", "", 3, None])
    def test_normalize_rejects_unknown(self, raw: object) -> None:
        with pytest.raises(ValidationError, match="Unknown stat type"):
            normalize_stat_type(raw)


class TestStatEvent:
    def test_frozen(self) -> None:
        event = make_event()
        with pytest.raises(pydantic.ValidationError):
            event.clock = 5  # type: ignore[misc]

    def test_period_is_one_based(self) -> None:
        with pytest.raises(pydantic.ValidationError):
            make_event(period=0)

    def test_clock_non_negative(self) -> None:
        with pytest.raises(pydantic.ValidationError):
            make_event(clock=-1)

    def test_legacy_missing_clock_allowed(self) -> None:
        assert make_event(clock=None).clock is None

    def test_default_id_is_ulid(self) -> None:
        assert len(make_event().id) == 26
        assert len(new_id()) == 26

    def test_legacy_epoch_millis_ts(self) -> None:
        event = make_event(ts=1_700_000_000_000)
        assert event.ts.year == 2023

    def test_naive_ts_assumed_utc(self) -> None:
        event = make_event(ts=dt.datetime(2026, 3, 14, 18, 0))
        assert event.ts.tzinfo is dt.timezone.utc
        assert make_event(ts="2025-11-02T10:00:00").ts.tzinfo is dt.timezone.utc

    def test_aware_ts_kept(self) -> None:
        offset = dt.timezone(dt.timedelta(hours=2))
        event = make_event(ts=dt.datetime(2026, 3, 14, 20, 0, tzinfo=offset))
        assert event.ts.utcoffset() == dt.timedelta(hours=2)


class TestPlayer:
    def test_active_defaults(self) -> None:
        assert Player(name="Ana").is_active
        assert Player(name="Ana", active=True).is_active
        assert not Player(name="Ana", active=False).is_active


class TestGameMeta:
    def test_total_periods_defaults_to_regulation(self) -> None:
        meta = GameMeta(date=dt.date(2026, 3, 14), periods=3)
        assert meta.total_periods == 3
        assert meta.overtime_periods == 0
        assert meta.shootout_enabled is False
        assert meta.shootout_period is None

    def test_total_below_regulation_rejected(self) -> None:
        with pytest.raises(pydantic.ValidationError, match="below"):
            GameMeta(date=dt.date(2026, 3, 14), periods=4, total_periods=3)

    def test_shootout_period_bounds(self) -> None:
        with pytest.raises(pydantic.ValidationError, match="shootout_period"):
            GameMeta(
                date=dt.date(2026, 3, 14), periods=4, total_periods=5, shootout_period=4
            )


class TestGameRecord:
    def test_dict_round_trip(self) -> None:
        record = GameRecord(
            meta=GameMeta(date=dt.date(2026, 3, 14)),
            home=Team(name="Sharks", players=(Player(name="Ana", number=4),)),
            opponent=Team(name="Rays", is_opponent=True),
            events=(make_event(type=StatType.GOAL, linked_id="x"),),
        )
        data = record.to_dict()
        assert data["meta"]["date"] == "2026-03-14"
        assert data["events"][0]["type"] == "GOAL"
        assert GameRecord.from_dict(data) == record
        assert record.id == record.meta.id

    def test_legacy_record_without_structure_fields(self) -> None:
        data = {
            "meta": {"id": "g1", "date": "2025-11-02", "periods": 4},
            "home": {"id": "h", "name": "Sharks"},
            "opponent": {"id": "o", "name": "Rays", "is_opponent": True},
            "events": [
                {"id": "e1", "game_id": "g1", "team_id": "h", "type": "SHOT",
                 "period": 1, "ts": 1_700_000_000_000},
            ],
        }
        record = GameRecord.from_dict(data)
        assert record.meta.total_periods == 4
        assert record.events[0].clock is None
