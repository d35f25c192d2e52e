"""
Ultimate Frisbee Sideline Scorekeeper

A scorekeeping console for Ultimate Frisbee matches: one operator on the
sideline records goals, timeouts, halftime and stoppages, watches the running
scoreboard and clocks, and exports the match log as CSV and to a remote
spreadsheet endpoint.

This package provides the match core as plain Python objects and a Flask
web interface on top of it.
"""
from .models import MatchEvent, MatchConfig, MatchState
from .services import MatchController, MatchSession, ServiceFactory
from .ui import create_app, run_web_app
from .utils import fmt_mmss, now_ts, APP_TITLE

__version__ = "1.0.0"

__all__ = [
    "MatchEvent", "MatchConfig", "MatchState", "MatchController",
    "MatchSession", "ServiceFactory", "create_app", "run_web_app",
    "fmt_mmss", "now_ts", "APP_TITLE"
]
