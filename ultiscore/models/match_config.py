"""
MatchConfig model for the Ultimate sideline scorekeeper.

This module contains the operator-editable match setup and the clamping
rules applied when the setup form is saved.
"""
from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional

from ..utils.constants import (
    DEFAULT_MATCH_DURATION_MIN, DEFAULT_HALFTIME_TRIGGER_MIN,
    DEFAULT_HALFTIME_BREAK_MIN, DEFAULT_TIMEOUT_SECONDS,
    DEFAULT_TIMEOUTS_TOTAL, DEFAULT_TIMEOUTS_PER_HALF, DEFAULT_GENDER_START,
    MIN_MATCH_DURATION_MIN, MAX_MATCH_DURATION_MIN, MIN_HALFTIME_TRIGGER_MIN,
    MIN_HALFTIME_BREAK_MIN, MAX_HALFTIME_BREAK_MIN, MIN_TIMEOUT_SECONDS,
    MAX_TIMEOUT_SECONDS, MIN_TIMEOUTS, MAX_TIMEOUTS, GENDER_STARTS,
)


def _clamp_int(value: Any, fallback: int, minimum: int, maximum: int) -> int:
    """Parse value as int and clamp it; unparseable input keeps the fallback."""
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        return fallback
    return max(minimum, min(maximum, parsed))


def normalize_gender_start(value: Any, fallback: str = DEFAULT_GENDER_START) -> str:
    """Map operator input onto one of M, F or NONE."""
    if value is None:
        return fallback
    normalized = str(value).strip().upper()
    if normalized in GENDER_STARTS:
        return normalized
    if normalized in ("", "OFF"):
        return "NONE"
    return "M"


@dataclass
class MatchConfig:
    """
    Operator-editable match settings.

    Attributes:
        match_duration_min: Length of the primary countdown in minutes
        halftime_trigger_min: Halftime becomes due once the primary clock shows
            ``match_duration_min - halftime_trigger_min`` minutes or less
        halftime_break_min: Length of the halftime break on the secondary clock
        timeout_seconds: Length of a team timeout on the secondary clock
        timeouts_total: Timeouts per team for the whole match
        timeouts_per_half: Timeouts per team per half (0 = same as total)
        gender_start: First label of the ABBA sequence: "M", "F" or "NONE"
    """
    match_duration_min: int = DEFAULT_MATCH_DURATION_MIN
    halftime_trigger_min: int = DEFAULT_HALFTIME_TRIGGER_MIN
    halftime_break_min: int = DEFAULT_HALFTIME_BREAK_MIN
    timeout_seconds: int = DEFAULT_TIMEOUT_SECONDS
    timeouts_total: int = DEFAULT_TIMEOUTS_TOTAL
    timeouts_per_half: int = DEFAULT_TIMEOUTS_PER_HALF
    gender_start: str = DEFAULT_GENDER_START

    @property
    def uses_per_half_timeouts(self) -> bool:
        return self.timeouts_per_half > 0

    @property
    def match_duration_seconds(self) -> int:
        return self.match_duration_min * 60

    @property
    def halftime_break_seconds(self) -> int:
        return max(1, self.halftime_break_min * 60)

    @property
    def halftime_threshold_seconds(self) -> int:
        """Primary clock remaining time at which halftime becomes due."""
        return max(0, self.match_duration_min - self.halftime_trigger_min) * 60

    def half_allotment(self) -> int:
        """Per-half timeouts before any have been used."""
        if self.uses_per_half_timeouts:
            return min(self.timeouts_per_half, self.timeouts_total)
        return self.timeouts_total

    def updated(self, **inputs: Any) -> "MatchConfig":
        """
        Return a new config with setup form values applied.

        Missing or non-numeric values keep the current setting; numeric values
        are clamped to the supported ranges.

        Args:
            **inputs: Any subset of the dataclass field names

        Returns:
            New MatchConfig instance
        """
        match_duration = _clamp_int(
            inputs.get("match_duration_min", self.match_duration_min),
            self.match_duration_min, MIN_MATCH_DURATION_MIN, MAX_MATCH_DURATION_MIN,
        )
        halftime_trigger = _clamp_int(
            inputs.get("halftime_trigger_min", self.halftime_trigger_min),
            self.halftime_trigger_min, MIN_HALFTIME_TRIGGER_MIN, match_duration,
        )
        halftime_break = _clamp_int(
            inputs.get("halftime_break_min", self.halftime_break_min),
            self.halftime_break_min, MIN_HALFTIME_BREAK_MIN, MAX_HALFTIME_BREAK_MIN,
        )
        timeout_seconds = _clamp_int(
            inputs.get("timeout_seconds", self.timeout_seconds),
            self.timeout_seconds, MIN_TIMEOUT_SECONDS, MAX_TIMEOUT_SECONDS,
        )
        timeouts_total = _clamp_int(
            inputs.get("timeouts_total", self.timeouts_total),
            self.timeouts_total, MIN_TIMEOUTS, MAX_TIMEOUTS,
        )
        timeouts_per_half = _clamp_int(
            inputs.get("timeouts_per_half", self.timeouts_per_half),
            self.timeouts_per_half, MIN_TIMEOUTS, MAX_TIMEOUTS,
        )
        timeouts_per_half = min(timeouts_per_half, timeouts_total)
        gender_start = normalize_gender_start(
            inputs.get("gender_start", self.gender_start), self.gender_start
        )

        return MatchConfig(
            match_duration_min=match_duration,
            halftime_trigger_min=halftime_trigger,
            halftime_break_min=halftime_break,
            timeout_seconds=timeout_seconds,
            timeouts_total=timeouts_total,
            timeouts_per_half=timeouts_per_half,
            gender_start=gender_start,
        )

    def to_json(self) -> Dict[str, Any]:
        return asdict(self)

    @staticmethod
    def from_json(data: Optional[Dict[str, Any]]) -> "MatchConfig":
        """
        Create MatchConfig from a stored dictionary.

        Stored values go through the same clamping as the setup form so a
        hand-edited or older snapshot cannot produce an out-of-range config.
        """
        return MatchConfig().updated(**(data or {}))
