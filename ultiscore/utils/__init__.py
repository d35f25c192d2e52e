"""
Utilities package for the Ultimate sideline scorekeeper.

This package contains constants, settings, logging and time helpers used
throughout the application.
"""
from .time_utils import fmt_mmss, now_ts, fmt_timestamp, fmt_date
from .constants import (
    APP_TITLE, SCORE_CAP, HALFTIME_SCORE_TARGET, NO_ASSIST, CALLAHAN,
    AUTO_SAVE_INTERVAL_SECONDS, STORAGE_KEYS
)
from .logger import get_logger, configure_log_dir
from .settings import AppSettings

__all__ = [
    "fmt_mmss", "now_ts", "fmt_timestamp", "fmt_date", "APP_TITLE",
    "SCORE_CAP", "HALFTIME_SCORE_TARGET", "NO_ASSIST", "CALLAHAN",
    "AUTO_SAVE_INTERVAL_SECONDS", "STORAGE_KEYS", "get_logger",
    "configure_log_dir", "AppSettings"
]
