"""Event log and mutator for a single loaded game.

``GameSession`` is an explicit handle on "the currently loaded game". It
owns the loaded record, the visible period, the event undo stack and the
period action stack. Several sessions (over the same or different stores)
can coexist; nothing here is module-global.

Every mutator leaves the log in canonical ``(period, clock, ts)`` order and
persists through the store before returning, so a later read never sees a
half-updated record. Failed preconditions are reported through
``EventResult`` outcomes rather than exceptions.
"""

import logging
import sys
from datetime import datetime
from typing import Callable, Dict, Iterable, List, Optional, Tuple, Union

from wpstat_events.models import (
    CreateGameArgs,
    GameMeta,
    GameRecord,
    GamesIndexEntry,
    StatEvent,
    StatType,
    Team,
    new_id,
    normalize_stat_type,
    utcnow,
)
from wpstat_events.results import EventResult, Outcome
from wpstat_events.settings import AppSettings
from wpstat_events.storage import GameStore
from wpstat_events.undo import EventUndoStack, PeriodActionStack

logger = logging.getLogger("wpstat_events.log")

_MISSING_CLOCK = sys.maxsize


# ── Pure helpers ─────────────────────────────────────────────────────────────


def event_sort_key(event: StatEvent) -> Tuple[int, int, datetime]:
    """Canonical ordering key. A missing clock sorts last within its period."""
    clock = event.clock if event.clock is not None else _MISSING_CLOCK
    return (event.period, clock, event.ts)


def sort_events(events: Iterable[StatEvent]) -> Tuple[StatEvent, ...]:
    """Stable sort into canonical order (full ties keep insertion order)."""
    return tuple(sorted(events, key=event_sort_key))


def next_clock(
    events: Iterable[StatEvent], period: int, explicit: Optional[int] = None
) -> int:
    """Resolve the clock for a new event in ``period``.

    An explicit non-negative value wins. Otherwise the result is one past
    the highest clock already used in that period, or 0 for an empty period.
    """
    if explicit is not None and explicit >= 0:
        return explicit
    highest = -1
    for event in events:
        if event.period != period or event.clock is None:
            continue
        if event.clock > highest:
            highest = event.clock
    return highest + 1


def backfill_clocks(events: Tuple[StatEvent, ...]) -> Tuple[StatEvent, ...]:
    """Assign sequential per-period clocks to legacy events that lack one.

    Counters start at 0 for each period and advance in log order. Returns
    ``events`` itself when every event already has a clock.
    """
    if all(e.clock is not None for e in events):
        return events
    counters: Dict[int, int] = {}
    filled: List[StatEvent] = []
    for event in events:
        if event.clock is not None:
            filled.append(event)
            continue
        current = counters.get(event.period, 0)
        counters[event.period] = current + 1
        filled.append(event.model_copy(update={"clock": current}))
    return tuple(filled)


def _remove_ids(
    events: Tuple[StatEvent, ...], ids: Iterable[str]
) -> Tuple[StatEvent, ...]:
    doomed = set(ids)
    return tuple(e for e in events if e.id not in doomed)


# ── Session ──────────────────────────────────────────────────────────────────


class GameSession:
    """Handle on one loaded game and its undo state.

    Args:
        store: Persistence collaborator.
        settings: Defaults for ``create_game``. ``AppSettings()`` if omitted.
        now: Wall-clock source, timezone-aware.
        id_factory: Identifier source for games, teams and events.
    """

    def __init__(
        self,
        store: GameStore,
        settings: Optional[AppSettings] = None,
        now: Callable[[], datetime] = utcnow,
        id_factory: Callable[[], str] = new_id,
    ) -> None:
        self.store = store
        self.settings = settings if settings is not None else AppSettings()
        self.now = now
        self.new_id = id_factory
        self.period = 1
        self.event_undo = EventUndoStack(now=now)
        self.period_actions = PeriodActionStack()
        self._game: Optional[GameRecord] = None

    @property
    def game(self) -> Optional[GameRecord]:
        return self._game

    # ── Record lifecycle ─────────────────────────────────────────────────

    def _reset(self, game: Optional[GameRecord], period: int = 1) -> None:
        self._game = game
        self.period = period
        self.event_undo.clear()
        self.period_actions.clear()

    def _commit(self, game: GameRecord) -> GameRecord:
        meta = game.meta.model_copy(update={"updated_at": self.now()})
        committed = game.model_copy(
            update={"meta": meta, "events": sort_events(game.events)}
        )
        self.store.save(committed)
        self._game = committed
        return committed

    def create_game(self, args: CreateGameArgs) -> GameRecord:
        """Create, persist and load a new game, filling unset options."""
        s = self.settings
        periods = args.periods if args.periods is not None else s.default_periods
        now = self.now()
        meta = GameMeta(
            id=self.new_id(),
            created_at=now,
            updated_at=now,
            date=args.date if args.date is not None else now.date(),
            location=args.location,
            opponent_name=args.opponent_name,
            periods=periods,
            auto_shot_on_goal=(
                args.auto_shot_on_goal
                if args.auto_shot_on_goal is not None
                else s.auto_shot_on_goal
            ),
            track_opponent_players=(
                args.track_opponent_players
                if args.track_opponent_players is not None
                else s.track_opponent_players
            ),
            overtime_periods=(
                args.overtime_periods
                if args.overtime_periods is not None
                else s.default_overtime_periods
            ),
            shootout_enabled=(
                args.shootout_enabled
                if args.shootout_enabled is not None
                else s.default_shootout_enabled
            ),
            total_periods=periods,
        )
        home = Team(id=self.new_id(), name=args.home_team_name, players=tuple(args.players))
        opponent = Team(
            id=self.new_id(),
            name=args.opponent_name or "Opponent",
            is_opponent=True,
        )
        record = GameRecord(meta=meta, home=home, opponent=opponent)
        self.store.save(record)
        self._reset(record)
        logger.debug("Created game %s (%d periods)", meta.id, periods)
        return record

    def load_game(self, game_id: str) -> Optional[GameRecord]:
        """Load a game as current, backfilling legacy clocks if needed."""
        record = self.store.load(game_id)
        if record is None:
            self._reset(None)
            return None
        events = backfill_clocks(record.events)
        backfilled = events is not record.events
        record = record.model_copy(update={"events": sort_events(events)})
        if backfilled:
            logger.info("Backfilled missing clocks for game %s", game_id)
            self.store.save(record)
        latest = max((e.period for e in record.events), default=1)
        self._reset(record, period=min(latest, record.meta.total_periods))
        return record

    def save_game(self, record: GameRecord) -> GameRecord:
        """Persist a full record (replacing any stored copy) and make it current."""
        if self._game is None or self._game.id != record.id:
            self._reset(record)
        return self._commit(record)

    def delete_game(self, game_id: str) -> None:
        self.store.delete(game_id)
        if self._game is not None and self._game.id == game_id:
            self._reset(None)

    def list_games(self) -> List[GamesIndexEntry]:
        return self.store.list_index()

    def save_meta(self, meta: GameMeta) -> EventResult:
        """Replace the current game's metadata and persist."""
        game = self._game
        if game is None or game.id != meta.id:
            return EventResult(Outcome.NO_SUCH_MATCH)
        self._commit(game.model_copy(update={"meta": meta}))
        return EventResult(Outcome.OK)

    # ── Event mutators ───────────────────────────────────────────────────

    def add_event(
        self,
        game_id: str,
        team_id: str,
        type: Union[StatType, str],
        period: int,
        player_id: Optional[str] = None,
        clock: Optional[int] = None,
        ts: Optional[datetime] = None,
    ) -> EventResult:
        """Append an event, plus a linked SHOT for a player GOAL when enabled."""
        game = self._game
        if game is None or game.id != game_id:
            logger.debug("add_event ignored: game %s is not loaded", game_id)
            return EventResult(Outcome.NO_SUCH_MATCH)

        stat_type = normalize_stat_type(type)
        when = ts if ts is not None else self.now()
        resolved = next_clock(game.events, period, clock)
        event_id = self.new_id()

        fields = dict(
            game_id=game_id,
            team_id=team_id,
            player_id=player_id,
            period=period,
            clock=resolved,
            ts=when,
        )
        created: List[StatEvent] = []
        if game.meta.auto_shot_on_goal and stat_type is StatType.GOAL and player_id:
            shot_id = self.new_id()
            created.append(
                StatEvent(id=event_id, type=stat_type, linked_id=shot_id, **fields)
            )
            created.append(
                StatEvent(id=shot_id, type=StatType.SHOT, linked_id=event_id, **fields)
            )
        else:
            created.append(StatEvent(id=event_id, type=stat_type, **fields))

        self._commit(game.model_copy(update={"events": game.events + tuple(created)}))
        self.event_undo.push(event_id)
        logger.debug(
            "Added %s in period %d at %ds (%d event(s))",
            stat_type.value, period, resolved, len(created),
        )
        return EventResult(
            Outcome.OK, event=created[0], event_ids=tuple(e.id for e in created)
        )

    def find_event(self, event_id: str) -> Optional[StatEvent]:
        if self._game is None:
            return None
        for event in self._game.events:
            if event.id == event_id:
                return event
        return None

    def remove_event(self, event_id: str) -> EventResult:
        """Remove an event together with its linked companion."""
        game = self._game
        if game is None:
            return EventResult(Outcome.NO_SUCH_MATCH)
        target = self.find_event(event_id)
        if target is None:
            logger.debug("remove_event ignored: %s not found", event_id)
            return EventResult(Outcome.NOT_FOUND)

        removed: List[str] = []
        if target.linked_id is not None:
            if self.find_event(target.linked_id) is not None:
                removed.append(target.linked_id)
        else:
            for event in game.events:
                if event.linked_id == target.id:
                    removed.append(event.id)
                    break
        removed.append(target.id)

        self._commit(game.model_copy(update={"events": _remove_ids(game.events, removed)}))
        logger.debug("Removed %s (%d event(s))", target.type.value, len(removed))
        return EventResult(Outcome.OK, event=target, event_ids=tuple(reversed(removed)))

    def undo_last(self) -> EventResult:
        """Remove the most recently added event that is still in the log."""
        if self._game is None:
            return EventResult(Outcome.NO_SUCH_MATCH)
        while True:
            action = self.event_undo.pop()
            if action is None:
                return EventResult(Outcome.NOT_FOUND)
            if self.find_event(action.event_id) is not None:
                return self.remove_event(action.event_id)

    def update_event_clock(self, game_id: str, event_id: str, clock: int) -> EventResult:
        """Overwrite one event's clock and re-sort. Duplicate clocks are allowed."""
        game = self._game
        if game is None or game.id != game_id:
            return EventResult(Outcome.NO_SUCH_MATCH)
        target = self.find_event(event_id)
        if target is None:
            return EventResult(Outcome.NOT_FOUND)
        updated = StatEvent.model_validate({**target.model_dump(), "clock": clock})
        events = tuple(updated if e.id == event_id else e for e in game.events)
        self._commit(game.model_copy(update={"events": events}))
        return EventResult(Outcome.OK, event=updated, event_ids=(event_id,))
