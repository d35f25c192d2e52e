"""
Match event model for the Ultimate sideline scorekeeper.

This module contains the MatchEvent dataclass, the single record type stored
in the match log, together with the enumerations describing event kinds,
team sides and halftime reasons.
"""
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Dict, Optional


class EventKind(Enum):
    """Kinds of entries recorded in the match log."""
    SCORE = "score"
    TIMEOUT = "timeout"
    HALFTIME = "halftime"
    STOPPAGE = "stoppage"
    MATCH_START = "matchstart"


class TeamSide(Enum):
    """Side an event is attributed to."""
    A = "A"
    B = "B"
    NONE = ""

    @property
    def other(self) -> "TeamSide":
        if self is TeamSide.A:
            return TeamSide.B
        if self is TeamSide.B:
            return TeamSide.A
        return TeamSide.NONE

    @classmethod
    def parse(cls, value: Any) -> "TeamSide":
        """Parse "A"/"B" (case-insensitive) or an existing TeamSide."""
        if isinstance(value, TeamSide):
            return value
        normalized = str(value or "").strip().upper()
        for side in cls:
            if side.value == normalized:
                return side
        raise ValueError(f"Unknown team side: {value!r}")


class HalftimeReason(Enum):
    """Why halftime was declared."""
    MANUAL = "manual"
    SCORE = "score"
    CLOCK = "clock"


# Free-text labels shown in the log table
DISPLAY_LABELS = {
    EventKind.SCORE: "",
    EventKind.TIMEOUT: "Time out",
    EventKind.HALFTIME: "HT",
    EventKind.STOPPAGE: "STOP",
    EventKind.MATCH_START: "MatchStart",
}

# Fixed labels used in the CSV export and remote submission
EVENT_TYPE_LABELS = {
    EventKind.SCORE: "",
    EventKind.TIMEOUT: "TimeOut",
    EventKind.HALFTIME: "HalfTime",
    EventKind.STOPPAGE: "Stoppage",
    EventKind.MATCH_START: "Start",
}


@dataclass(frozen=True)
class MatchEvent:
    """
    A single entry in the match log.

    Events are never changed in place: edits produce a new instance through
    :meth:`with_updates` which the log swaps in at the same position.

    Attributes:
        event_id: Unique id, increasing with creation order (0 = unassigned)
        kind: What happened
        match_id: "<Team A> vs <Team B>" at creation time
        timestamp: Wall clock creation time (epoch seconds), display only
        team_side: Side the event belongs to (NONE for halftime/stoppage/start)
        team_name: Display name of that side at creation time
        scorer: Scoring player (score events only)
        assistor: Assisting player or a special option (score events only)
        halftime_reason: Why halftime was declared (halftime events only)
    """
    kind: EventKind
    match_id: str = ""
    timestamp: float = 0.0
    team_side: TeamSide = TeamSide.NONE
    team_name: str = ""
    scorer: str = ""
    assistor: str = ""
    halftime_reason: Optional[HalftimeReason] = None
    event_id: int = 0

    @property
    def display_label(self) -> str:
        return DISPLAY_LABELS[self.kind]

    @property
    def event_type_label(self) -> str:
        return EVENT_TYPE_LABELS[self.kind]

    @property
    def is_score(self) -> bool:
        return self.kind is EventKind.SCORE

    def with_updates(self, **fields: Any) -> "MatchEvent":
        """Return a copy with the given fields replaced."""
        return replace(self, **fields)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.event_id,
            "kind": self.kind.value,
            "match_id": self.match_id,
            "timestamp": self.timestamp,
            "team_side": self.team_side.value,
            "team_name": self.team_name,
            "scorer": self.scorer,
            "assistor": self.assistor,
            "halftime_reason": self.halftime_reason.value if self.halftime_reason else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MatchEvent":
        """
        Create from dictionary for JSON deserialization.

        Raises:
            ValueError: If the kind, side or reason is not recognised
            KeyError: If the kind or id is missing
        """
        reason = data.get("halftime_reason")
        return cls(
            event_id=int(data["id"]),
            kind=EventKind(data["kind"]),
            match_id=data.get("match_id") or "",
            timestamp=float(data.get("timestamp") or 0.0),
            team_side=TeamSide.parse(data.get("team_side") or ""),
            team_name=data.get("team_name") or "",
            scorer=data.get("scorer") or "",
            assistor=data.get("assistor") or "",
            halftime_reason=HalftimeReason(reason) if reason else None,
        )
