"""
Services package for the Ultimate sideline scorekeeper.

This package contains the event log, derivation functions, countdown clocks,
match controller, persistence, roster and export services, plus the factory
that wires them into a MatchSession.
"""
from .event_log import EventLog
from .derivation import (
    compute_scoreboard, compute_gender_label, gender_labels,
    compute_timeout_balances, build_log_rows
)
from .countdown_clock import CountdownClock
from .match_controller import (
    MatchController, MatchPhase, MatchActionError, ActionRejected, EventNotFound,
    PRIMARY, SECONDARY
)
from .persistence_service import (
    PersistenceService, JsonFileStore, KeyValueStore, StorageFullError
)
from .roster_service import RosterService, RosterFetchError, parse_roster_csv, parse_roster_json
from .submission_service import RemoteLogSink, SubmissionError
from .export_service import ExportService, sanitize_filename, build_csv, build_remote_payload
from .match_session import MatchSession
from .service_factory import ServiceFactory

__all__ = [
    "EventLog", "compute_scoreboard", "compute_gender_label", "gender_labels",
    "compute_timeout_balances", "build_log_rows", "CountdownClock",
    "MatchController", "MatchPhase", "MatchActionError", "ActionRejected",
    "EventNotFound", "PRIMARY", "SECONDARY", "PersistenceService",
    "JsonFileStore", "KeyValueStore", "StorageFullError", "RosterService",
    "RosterFetchError", "parse_roster_csv", "parse_roster_json",
    "RemoteLogSink", "SubmissionError", "ExportService", "sanitize_filename",
    "build_csv", "build_remote_payload", "MatchSession", "ServiceFactory"
]
