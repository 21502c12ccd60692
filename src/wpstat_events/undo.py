"""Undo action records.

Two independent mechanisms live here:

* the event undo stack, a plain stack of created event ids consumed by
  ``GameSession.undo_last``;
* the period action stack, holding ``PeriodAction`` records pushed by the
  period controller for every forward transition.

They are deliberately not merged into one timeline. Callers wanting a
combined chronological undo can use ``interleave_actions``.
"""

from datetime import datetime
from typing import Callable, List, Literal, Optional, Sequence, Union

from pydantic import BaseModel, ConfigDict, Field

from wpstat_events.models import utcnow


class PeriodAction(BaseModel):
    """Reversible record of one forward period transition.

    ``event_id`` is set only when the transition created a new
    PERIOD_START event; undo must delete it in that case.
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["period"] = "period"
    prev: int = Field(..., ge=1)
    next: int = Field(..., ge=1)
    event_id: Optional[str] = None
    pushed_at: datetime = Field(default_factory=utcnow)


class EventAction(BaseModel):
    """Record of one event creation pushed onto the event undo stack."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["event"] = "event"
    event_id: str = Field(..., min_length=1)
    pushed_at: datetime = Field(default_factory=utcnow)


UndoAction = Union[EventAction, PeriodAction]


class EventUndoStack:
    """LIFO stack of created event ids."""

    def __init__(self, now: Callable[[], datetime] = utcnow) -> None:
        self._now = now
        self._items: List[EventAction] = []

    def push(self, event_id: str) -> EventAction:
        action = EventAction(event_id=event_id, pushed_at=self._now())
        self._items.append(action)
        return action

    def pop(self) -> Optional[EventAction]:
        return self._items.pop() if self._items else None

    def peek(self) -> Optional[EventAction]:
        return self._items[-1] if self._items else None

    def clear(self) -> None:
        self._items.clear()

    def actions(self) -> List[EventAction]:
        return list(self._items)

    def __len__(self) -> int:
        return len(self._items)


class PeriodActionStack:
    """LIFO stack of period navigation records."""

    def __init__(self) -> None:
        self._items: List[PeriodAction] = []

    def push(self, action: PeriodAction) -> None:
        self._items.append(action)

    def pop(self) -> Optional[PeriodAction]:
        return self._items.pop() if self._items else None

    def peek(self) -> Optional[PeriodAction]:
        return self._items[-1] if self._items else None

    def clear(self) -> None:
        self._items.clear()

    def actions(self) -> List[PeriodAction]:
        return list(self._items)

    def __len__(self) -> int:
        return len(self._items)


def interleave_actions(
    event_actions: Sequence[EventAction],
    period_actions: Sequence[PeriodAction],
) -> List[UndoAction]:
    """Merge both undo logs into one chronological list (oldest first).

    Ordering is by ``pushed_at``. On equal instants, the relative order
    within each input is kept and event actions sort before period actions.
    The last element is what a combined undo should reverse first.
    """
    merged: List[UndoAction] = [*event_actions, *period_actions]
    return sorted(merged, key=lambda a: a.pushed_at)
