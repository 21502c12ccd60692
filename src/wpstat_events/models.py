"""Core data models for the wpstat-events library."""
import datetime as dt
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, FrozenSet, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from ulid import ULID


def new_id() -> str:
    """Return a fresh identifier (26-char ULID string)."""
    return str(ULID())


def utcnow() -> datetime:
    """Current wall-clock instant, timezone-aware (UTC)."""
    return datetime.now(timezone.utc)


class StatType(str, Enum):
    """All supported stat event types.

    Positive actions first, negative actions next, then the structural
    types that never count towards a tally. DRAWN_EXCLUSION means the
    player earned a man-up (exclusion on the opponent).
    """

    GOAL = "GOAL"
    SHOT = "SHOT"
    ASSIST = "ASSIST"
    BLOCK = "BLOCK"
    STEAL = "STEAL"
    DRAWN_EXCLUSION = "DRAWN_EXCLUSION"
    TURNOVER = "TURNOVER"
    EXCLUSION = "EXCLUSION"
    SUB_IN = "SUB_IN"
    SUB_OUT = "SUB_OUT"
    PERIOD_START = "PERIOD_START"


POSITIVE_STATS: Tuple[StatType, ...] = (
    StatType.GOAL,
    StatType.SHOT,
    StatType.ASSIST,
    StatType.BLOCK,
    StatType.STEAL,
    StatType.DRAWN_EXCLUSION,
)

NEGATIVE_STATS: Tuple[StatType, ...] = (StatType.TURNOVER, StatType.EXCLUSION)

STRUCTURAL_STATS: FrozenSet[StatType] = frozenset({
    StatType.SUB_IN,
    StatType.SUB_OUT,
    StatType.PERIOD_START,
})


def normalize_stat_type(value: object) -> StatType:
    """Resolve a value to a StatType.

    Accepts StatType members and strings in any case (``"goal"``,
    ``"Drawn_Exclusion"``).

    Raises:
        ValidationError: If value does not name a known stat type.
    """
    if isinstance(value, StatType):
        return value
    if isinstance(value, str):
        candidate = value.strip().upper()
        for member in StatType:
            if member.value == candidate:
                return member
    raise ValidationError(
        f"Unknown stat type: {value!r}. "
        f"Valid values: {[m.value for m in StatType]}"
    )


class Player(BaseModel):
    """Roster player.

    ``active=None`` is treated as active so that records written before
    bench support behave as "all active".
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_id, min_length=1)
    number: Optional[int] = Field(
        None, ge=0, description="Jersey number (None when unassigned)"
    )
    name: str = Field(..., min_length=1)
    active: Optional[bool] = Field(
        None, description="Bench flag (False = bench; True/None = in play)"
    )

    @property
    def is_active(self) -> bool:
        return self.active is not False


class Team(BaseModel):
    """Team definition. The opponent usually carries an empty roster."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_id, min_length=1)
    name: str = Field(..., min_length=1)
    players: Tuple[Player, ...] = Field(default_factory=tuple)
    is_opponent: bool = False


class StatEvent(BaseModel):
    """A single logged stat action.

    Committed events are immutable; the only field ever rewritten is
    ``clock`` (through an explicit clock correction, producing a copy).
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_id, min_length=1)
    game_id: str = Field(..., min_length=1)
    team_id: str = Field(..., min_length=1)
    player_id: Optional[str] = Field(
        None, description="Absent for team-level or opponent-aggregate actions"
    )
    type: StatType
    period: int = Field(..., ge=1, description="1-based period number")
    clock: Optional[int] = Field(
        None,
        ge=0,
        description="Seconds elapsed within the period (None only in legacy records)",
    )
    ts: datetime = Field(default_factory=utcnow, description="Creation instant")
    linked_id: Optional[str] = Field(
        None, description="Companion event id (GOAL <-> auto-generated SHOT)"
    )

    @field_validator("ts")
    @classmethod
    def _assume_utc(cls, v: datetime) -> datetime:
        # Naive instants are UTC; the log compares ts across events.
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    def __repr__(self) -> str:
        return (
            f"StatEvent(id={self.id[:8]}..., type={self.type.value}, "
            f"period={self.period}, clock={self.clock})"
        )


class GameMeta(BaseModel):
    """Match configuration and structure.

    ``total_periods`` counts regulation periods plus every overtime period
    allocated so far plus the shootout once allocated. It starts equal to
    ``periods`` and only ever grows.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_id, min_length=1)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
    date: dt.date
    location: Optional[str] = None
    opponent_name: Optional[str] = None
    periods: int = Field(4, ge=1, description="Regulation period count")
    auto_shot_on_goal: bool = True
    track_opponent_players: bool = False
    overtime_periods: int = Field(0, ge=0, description="Max overtime periods")
    shootout_enabled: bool = False
    total_periods: int = Field(..., ge=1)
    shootout_period: Optional[int] = None

    @model_validator(mode="before")
    @classmethod
    def _default_total_periods(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("total_periods") is None:
            data = dict(data)
            data["total_periods"] = data.get("periods", 4)
        return data

    @model_validator(mode="after")
    def _check_structure(self) -> "GameMeta":
        if self.total_periods < self.periods:
            raise ValueError(
                f"total_periods ({self.total_periods}) is below "
                f"regulation periods ({self.periods})"
            )
        if self.shootout_period is not None and not (
            self.periods < self.shootout_period <= self.total_periods
        ):
            raise ValueError(
                f"shootout_period {self.shootout_period} outside "
                f"({self.periods}, {self.total_periods}]"
            )
        return self


class GameRecord(BaseModel):
    """Full persisted game record."""

    model_config = ConfigDict(frozen=True)

    meta: GameMeta
    home: Team
    opponent: Team
    events: Tuple[StatEvent, ...] = Field(default_factory=tuple)

    @property
    def id(self) -> str:
        return self.meta.id

    def to_dict(self) -> Dict[str, Any]:
        """Serialize record to a JSON-compatible dictionary (for storage)."""
        return self.model_dump(mode="json")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GameRecord":
        """Deserialize record from dictionary."""
        return cls.model_validate(data)


class GamesIndexEntry(BaseModel):
    """Lightweight listing row so a game list never loads full records."""

    model_config = ConfigDict(frozen=True)

    id: str
    opponent_name: Optional[str] = None
    date: dt.date
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_record(cls, record: GameRecord) -> "GamesIndexEntry":
        meta = record.meta
        return cls(
            id=meta.id,
            opponent_name=meta.opponent_name,
            date=meta.date,
            created_at=meta.created_at,
            updated_at=meta.updated_at,
        )


class CreateGameArgs(BaseModel):
    """Arguments when creating a new game.

    Only the home team name is required; unset options fall back to the
    application settings.
    """

    model_config = ConfigDict(frozen=True)

    home_team_name: str = Field(..., min_length=1)
    players: List[Player] = Field(default_factory=list)
    opponent_name: Optional[str] = None
    date: Optional[dt.date] = None
    periods: Optional[int] = Field(None, ge=1)
    auto_shot_on_goal: Optional[bool] = None
    track_opponent_players: Optional[bool] = None
    location: Optional[str] = None
    overtime_periods: Optional[int] = Field(None, ge=0)
    shootout_enabled: Optional[bool] = None


# Custom Exceptions
class WpstatEventsError(Exception):
    """Base exception for all library errors."""
    pass


class StorageError(WpstatEventsError):
    """Storage adapter failure."""
    pass


class ValidationError(WpstatEventsError):
    """A value could not be normalised into the event model."""
    pass
