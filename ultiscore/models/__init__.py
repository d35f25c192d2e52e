"""
Models package for the Ultimate sideline scorekeeper.

This package contains the core data models used throughout the application.
"""
from .match_event import MatchEvent, EventKind, TeamSide, HalftimeReason
from .match_config import MatchConfig
from .match_state import MatchState, SubmittedMatch, default_timeouts
from .scoreboard import Scoreboard, TimeoutBalance, LogRow

__all__ = [
    "MatchEvent", "EventKind", "TeamSide", "HalftimeReason", "MatchConfig",
    "MatchState", "SubmittedMatch", "default_timeouts", "Scoreboard", "TimeoutBalance", "LogRow"
]
