"""Period controller: forward/back navigation and structural promotion.

States are period numbers ``1 .. total_periods``. Moving forward always
passes through ``ensure_period_start`` so that each period gets exactly one
PERIOD_START marker and a reversible ``PeriodAction``. At the structural end
the controller consults the score; a tie promotes the match by one overtime
slot or, once overtime is exhausted, by the shootout. There is no explicit
final state: reaching the end with no promotion possible is terminal by
inaction.

Moving backward is pure navigation. It creates no event and pushes no undo
record.
"""

import logging
from typing import Optional, Protocol

from wpstat_events.log import GameSession
from wpstat_events.models import GameMeta, GameRecord, StatEvent, StatType
from wpstat_events.periods import is_tied, promote_to_next_structure
from wpstat_events.results import EventResult, Outcome, PeriodResult, PromotionKind
from wpstat_events.undo import PeriodAction

logger = logging.getLogger("wpstat_events.controller")


class PeriodControllerDeps(Protocol):
    """Collaborators the controller needs (game state, persistence, undo)."""

    def get_game(self) -> Optional[GameRecord]: ...

    def get_period(self) -> int: ...

    def set_period(self, period: int) -> None: ...

    def push_action(self, action: PeriodAction) -> None: ...

    def add_event(
        self,
        game_id: str,
        team_id: str,
        type: StatType,
        period: int,
        player_id: Optional[str] = None,
        clock: Optional[int] = None,
    ) -> EventResult: ...

    def remove_event(self, event_id: str) -> EventResult: ...

    def max_periods(self) -> int: ...

    def save_meta(self, meta: GameMeta) -> EventResult: ...


class SessionControllerDeps:
    """Adapter wiring PeriodControllerDeps to a GameSession."""

    def __init__(self, session: GameSession) -> None:
        self.session = session

    def get_game(self) -> Optional[GameRecord]:
        return self.session.game

    def get_period(self) -> int:
        return self.session.period

    def set_period(self, period: int) -> None:
        self.session.period = period

    def push_action(self, action: PeriodAction) -> None:
        stamped = action.model_copy(update={"pushed_at": self.session.now()})
        self.session.period_actions.push(stamped)

    def add_event(
        self,
        game_id: str,
        team_id: str,
        type: StatType,
        period: int,
        player_id: Optional[str] = None,
        clock: Optional[int] = None,
    ) -> EventResult:
        return self.session.add_event(
            game_id, team_id, type, period, player_id=player_id, clock=clock
        )

    def remove_event(self, event_id: str) -> EventResult:
        return self.session.remove_event(event_id)

    def max_periods(self) -> int:
        game = self.session.game
        return game.meta.total_periods if game is not None else 0

    def save_meta(self, meta: GameMeta) -> EventResult:
        return self.session.save_meta(meta)


class PeriodController:
    """Navigation over the periods of the game exposed by ``deps``."""

    def __init__(self, deps: PeriodControllerDeps) -> None:
        self.deps = deps

    @classmethod
    def for_session(cls, session: GameSession) -> "PeriodController":
        return cls(SessionControllerDeps(session))

    def find_period_start(self, period: int) -> Optional[StatEvent]:
        """First PERIOD_START event for ``period`` in log order."""
        game = self.deps.get_game()
        if game is None:
            return None
        for event in game.events:
            if event.type is StatType.PERIOD_START and event.period == period:
                return event
        return None

    def ensure_period_start(self, prev: int, target: int) -> PeriodResult:
        """Make sure ``target`` has a PERIOD_START and record the transition.

        Creates the marker only when it is missing, so repeated calls for the
        same target never duplicate it. A ``PeriodAction`` is pushed either
        way; its ``event_id`` is set only when a marker was created.
        """
        game = self.deps.get_game()
        if game is None:
            return PeriodResult(Outcome.NO_SUCH_MATCH, period=prev)
        if prev == target:
            return PeriodResult(Outcome.ALREADY_AT_STATE, period=prev)

        existing = self.find_period_start(target)
        if existing is not None:
            self.deps.push_action(PeriodAction(prev=prev, next=target))
            return PeriodResult(Outcome.OK, period=target, event_id=existing.id)

        # PERIOD_START is not team specific; the home team anchors it.
        result = self.deps.add_event(
            game.id, game.home.id, StatType.PERIOD_START, target, clock=0
        )
        if not result.ok or result.event is None:
            return PeriodResult(result.outcome, period=prev)
        self.deps.push_action(
            PeriodAction(prev=prev, next=target, event_id=result.event.id)
        )
        return PeriodResult(
            Outcome.OK, period=target, event_id=result.event.id, created=True
        )

    def _advance(
        self, current: int, promotion: Optional[PromotionKind] = None
    ) -> PeriodResult:
        target = current + 1
        started = self.ensure_period_start(current, target)
        if not started.ok:
            return started
        self.deps.set_period(target)
        logger.debug("Advanced from period %d to %d", current, target)
        return PeriodResult(
            Outcome.OK,
            period=target,
            event_id=started.event_id,
            created=started.created,
            promotion=promotion,
        )

    def next(self) -> PeriodResult:
        """Advance one period, promoting the structure on a tie at the end."""
        game = self.deps.get_game()
        current = self.deps.get_period()
        if game is None:
            return PeriodResult(Outcome.NO_SUCH_MATCH, period=current)

        if current < self.deps.max_periods():
            return self._advance(current)

        if not is_tied(game.events, game.home.id):
            return PeriodResult(Outcome.NOT_TIED, period=current)

        promoted = promote_to_next_structure(game.meta)
        if promoted is None:
            logger.debug("No further periods available for game %s", game.id)
            return PeriodResult(Outcome.LIMIT_REACHED, period=current)
        meta, kind = promoted
        saved = self.deps.save_meta(meta)
        if not saved.ok:
            return PeriodResult(saved.outcome, period=current)
        logger.info(
            "Game %s tied at period %d; allocated %s (total periods %d)",
            game.id, current, kind.value, meta.total_periods,
        )
        return self._advance(current, promotion=kind)

    def prev(self) -> PeriodResult:
        """Step back one period. No event, no undo record."""
        current = self.deps.get_period()
        if self.deps.get_game() is None:
            return PeriodResult(Outcome.NO_SUCH_MATCH, period=current)
        if current <= 1:
            return PeriodResult(Outcome.ALREADY_AT_STATE, period=current)
        self.deps.set_period(current - 1)
        return PeriodResult(Outcome.OK, period=current - 1)

    def undo_period_action(self, action: PeriodAction) -> PeriodResult:
        """Reverse a forward transition.

        Deletes the PERIOD_START the transition created (if any) and returns
        the visible period to ``action.prev``. Allocated periods stay
        allocated; the structure never shrinks.
        """
        if self.deps.get_game() is None:
            return PeriodResult(Outcome.NO_SUCH_MATCH, period=self.deps.get_period())
        if action.event_id is not None:
            self.deps.remove_event(action.event_id)
        self.deps.set_period(action.prev)
        return PeriodResult(Outcome.OK, period=action.prev, event_id=action.event_id)
