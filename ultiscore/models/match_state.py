"""
MatchState model for the Ultimate sideline scorekeeper.

This module contains the MatchState dataclass: the complete reconstructable
state of a match, snapshotted and restored as one unit.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from .match_config import MatchConfig
from .match_event import MatchEvent, TeamSide
from .scoreboard import TimeoutBalance


def default_timeouts(config: MatchConfig) -> Dict[str, TimeoutBalance]:
    """Fresh per-team balances for a match that has used no timeouts."""
    return {
        side.value: TimeoutBalance(
            total_remaining=config.timeouts_total,
            half_remaining=config.half_allotment(),
        )
        for side in (TeamSide.A, TeamSide.B)
    }


@dataclass
class MatchState:
    """
    Represents the complete state of a match.

    Attributes:
        config: Operator setup
        team_a_name: Selected team on side A
        team_b_name: Selected team on side B
        team_a_players: Player list offered when side A scores
        team_b_players: Player list offered when side B scores
        events: Match log in insertion order
        next_event_id: Id the next appended event receives
        timeouts: Timeout balances keyed by side ("A"/"B"); derived, stored
            for inspection only
        match_started: Whether StartMatch has been accepted
        stoppage_active: Whether a game stoppage is in effect
        stoppage_paused_primary: Primary clock was running when the stoppage began
        stoppage_paused_secondary: Secondary clock was running when the stoppage began
        halftime_reason_resolved: Reason of the recorded halftime, if any
        halftime_auto_suppressed: Automatic halftime triggers are held off after
            a deleted halftime
        primary_clock: Raw state of the match clock
        secondary_clock: Raw state of the timeout/break clock
        timestamp: When this snapshot was written (epoch seconds)
    """
    config: MatchConfig = field(default_factory=MatchConfig)
    team_a_name: str = ""
    team_b_name: str = ""
    team_a_players: List[str] = field(default_factory=list)
    team_b_players: List[str] = field(default_factory=list)
    events: List[MatchEvent] = field(default_factory=list)
    next_event_id: int = 1
    timeouts: Dict[str, TimeoutBalance] = field(default_factory=dict)
    match_started: bool = False
    stoppage_active: bool = False
    stoppage_paused_primary: bool = False
    stoppage_paused_secondary: bool = False
    halftime_reason_resolved: Optional[str] = None
    halftime_auto_suppressed: bool = False
    primary_clock: Dict[str, Any] = field(default_factory=dict)
    secondary_clock: Dict[str, Any] = field(default_factory=dict)
    timestamp: Optional[float] = None

    def __post_init__(self) -> None:
        if not self.timeouts:
            self.timeouts = default_timeouts(self.config)

    @property
    def match_id(self) -> str:
        return f"{self.team_a_name} vs {self.team_b_name}"

    def team_name(self, side: TeamSide) -> str:
        if side is TeamSide.A:
            return self.team_a_name
        if side is TeamSide.B:
            return self.team_b_name
        return ""

    def to_json(self) -> dict:
        """
        Convert MatchState to JSON-serializable dictionary.

        Returns:
            Dictionary representation suitable for JSON serialization
        """
        return {
            "config": self.config.to_json(),
            "team_a_name": self.team_a_name,
            "team_b_name": self.team_b_name,
            "team_a_players": list(self.team_a_players),
            "team_b_players": list(self.team_b_players),
            "events": [event.to_dict() for event in self.events],
            "next_event_id": self.next_event_id,
            "timeouts": {k: v.to_dict() for k, v in self.timeouts.items()},
            "match_started": self.match_started,
            "stoppage_active": self.stoppage_active,
            "stoppage_paused_primary": self.stoppage_paused_primary,
            "stoppage_paused_secondary": self.stoppage_paused_secondary,
            "halftime_reason_resolved": self.halftime_reason_resolved,
            "halftime_auto_suppressed": self.halftime_auto_suppressed,
            "primary_clock": dict(self.primary_clock),
            "secondary_clock": dict(self.secondary_clock),
            "timestamp": self.timestamp,
        }

    @staticmethod
    def from_json(data: dict) -> "MatchState":
        """
        Create MatchState from JSON dictionary.

        Args:
            data: Dictionary with match state data

        Returns:
            New MatchState instance

        Raises:
            ValueError: If an event entry is malformed
            KeyError: If an event entry lacks its id or kind
        """
        config = MatchConfig.from_json(data.get("config"))
        ms = MatchState(config=config)
        ms.team_a_name = data.get("team_a_name") or ""
        ms.team_b_name = data.get("team_b_name") or ""
        ms.team_a_players = [str(p) for p in data.get("team_a_players") or []]
        ms.team_b_players = [str(p) for p in data.get("team_b_players") or []]
        ms.events = [MatchEvent.from_dict(entry) for entry in data.get("events") or []]

        highest = max((event.event_id for event in ms.events), default=0)
        ms.next_event_id = max(int(data.get("next_event_id") or 1), highest + 1)

        stored_timeouts = data.get("timeouts") or {}
        ms.timeouts = {
            side: TimeoutBalance.from_dict(stored_timeouts.get(side), config.timeouts_total)
            for side in ("A", "B")
        }
        ms.match_started = bool(data.get("match_started", bool(ms.events)))
        ms.stoppage_active = bool(data.get("stoppage_active", False))
        ms.stoppage_paused_primary = bool(data.get("stoppage_paused_primary", False))
        ms.stoppage_paused_secondary = bool(data.get("stoppage_paused_secondary", False))
        ms.halftime_reason_resolved = data.get("halftime_reason_resolved") or None
        ms.halftime_auto_suppressed = bool(data.get("halftime_auto_suppressed", False))
        ms.primary_clock = dict(data.get("primary_clock") or {})
        ms.secondary_clock = dict(data.get("secondary_clock") or {})
        ms.timestamp = data.get("timestamp")
        return ms


@dataclass(frozen=True)
class SubmittedMatch:
    """
    The log handed to the exporters when a match is submitted.

    Attributes:
        match_id: "<Team A> vs <Team B>" at submission time
        date: Submission date (YYYY-MM-DD)
        events: Event log in insertion order
    """
    match_id: str
    date: str
    events: Tuple[MatchEvent, ...]
