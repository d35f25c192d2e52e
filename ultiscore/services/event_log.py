"""Event log service for the Ultimate sideline scorekeeper."""

from typing import Any, Iterable, List, Optional, Tuple

from ..models import EventKind, MatchEvent


class EventLog:
    """
    Ordered, operator-editable sequence of match events.

    The log is the single source of truth for the scoreboard, timeout
    balances and gender labels. It performs no business validation; the
    match controller decides what may be appended.
    """

    def __init__(self, events: Optional[Iterable[MatchEvent]] = None, next_id: int = 1):
        self._events: List[MatchEvent] = []
        self._next_id = 1
        self.restore(events or (), next_id)

    @property
    def next_id(self) -> int:
        return self._next_id

    def __len__(self) -> int:
        return len(self._events)

    def append(self, event: MatchEvent) -> int:
        """
        Assign the next id to ``event`` and add it at the logical end.

        Returns:
            The id assigned to the stored event
        """
        event_id = self._next_id
        self._next_id += 1
        self._events.append(event.with_updates(event_id=event_id))
        return event_id

    def update(self, event_id: int, **fields: Any) -> bool:
        """Replace the event with a copy carrying ``fields``; False if not found."""
        fields.pop("event_id", None)
        fields.pop("kind", None)
        for index, event in enumerate(self._events):
            if event.event_id == event_id:
                self._events[index] = event.with_updates(**fields)
                return True
        return False

    def remove(self, event_id: int) -> Optional[MatchEvent]:
        for index, event in enumerate(self._events):
            if event.event_id == event_id:
                return self._events.pop(index)
        return None

    def get(self, event_id: int) -> Optional[MatchEvent]:
        for event in self._events:
            if event.event_id == event_id:
                return event
        return None

    def all(self) -> Tuple[MatchEvent, ...]:
        """Read-only view in insertion order."""
        return tuple(self._events)

    def latest(self, kind: EventKind) -> Optional[MatchEvent]:
        """Most recently appended event of ``kind``."""
        for event in reversed(self._events):
            if event.kind is kind:
                return event
        return None

    def clear(self) -> None:
        """Drop every event. Ids keep increasing so they are never reused."""
        self._events = []

    def restore(self, events: Iterable[MatchEvent], next_id: int = 1) -> None:
        """
        Replace the log contents with previously stored events.

        The id counter is re-seated above the highest restored id.
        """
        self._events = list(events)
        highest = max((event.event_id for event in self._events), default=0)
        self._next_id = max(int(next_id), highest + 1, 1)
