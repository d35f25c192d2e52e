"""
Constants for the Ultimate sideline scorekeeper.

This module contains configuration constants used throughout the application.
"""

# Application metadata
APP_TITLE = "Sideline Scorekeeper"

# Match setup defaults
DEFAULT_MATCH_DURATION_MIN = 100
DEFAULT_HALFTIME_TRIGGER_MIN = 55
DEFAULT_HALFTIME_BREAK_MIN = 7
DEFAULT_TIMEOUT_SECONDS = 75
DEFAULT_TIMEOUTS_TOTAL = 2
DEFAULT_TIMEOUTS_PER_HALF = 0  # 0 disables per-half limits
DEFAULT_GENDER_START = "M"

# Setup ranges (inclusive)
MIN_MATCH_DURATION_MIN = 1
MAX_MATCH_DURATION_MIN = 300
MIN_HALFTIME_TRIGGER_MIN = 1
MIN_HALFTIME_BREAK_MIN = 1
MAX_HALFTIME_BREAK_MIN = 120
MIN_TIMEOUT_SECONDS = 1
MAX_TIMEOUT_SECONDS = 3600
MIN_TIMEOUTS = 0
MAX_TIMEOUTS = 10

GENDER_STARTS = ("M", "F", "NONE")

# Match rules
SCORE_CAP = 15
HALFTIME_SCORE_TARGET = 8

# Special assist/scorer options
NO_ASSIST = "N/A"
CALLAHAN = "‼CALLAHAN‼"

# Persistence
AUTO_SAVE_INTERVAL_SECONDS = 2
SNAPSHOT_MAX_AGE_SECONDS = 24 * 60 * 60
ROSTER_CACHE_TTL_SECONDS = 24 * 60 * 60
STALE_SNAPSHOT_SECONDS = 7 * 24 * 60 * 60

STORAGE_KEYS = {
    "GAME_STATE": "gameState",
    "TEAMS_DATA": "teamsData",
    "LAST_SAVE": "lastSave",
}

# Export
CSV_HEADER = ["GameID", "Time", "Event", "Team", "Score", "Assist"]
MAX_FILENAME_LENGTH = 120
DEFAULT_MATCH_NAME = "Game"
