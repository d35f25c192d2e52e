"""Dataclasses describing values derived from the match log."""

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class Scoreboard:
    """Points per side."""

    team_a: int = 0
    team_b: int = 0

    @property
    def leading_score(self) -> int:
        return max(self.team_a, self.team_b)

    def display(self) -> str:
        return f"{self.team_a}:{self.team_b}"

    def to_dict(self) -> Dict[str, int]:
        return {"A": self.team_a, "B": self.team_b}


@dataclass
class TimeoutBalance:
    """Timeouts a team may still call."""

    total_remaining: int
    half_remaining: int

    def to_dict(self) -> Dict[str, int]:
        return {
            "total_remaining": self.total_remaining,
            "half_remaining": self.half_remaining,
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]], default: int = 0) -> "TimeoutBalance":
        data = data or {}
        return cls(
            total_remaining=int(data.get("total_remaining", default)),
            half_remaining=int(data.get("half_remaining", default)),
        )


@dataclass
class LogRow:
    """One row of the scoring table as the presentation layer shows it."""

    event_id: int
    kind: str
    label: str
    team_side: str
    team_name: str
    scorer: str
    assistor: str
    gender_label: str
    scoreboard: str
    time: str
    halftime_reason: Optional[str] = None
    editable: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.event_id,
            "kind": self.kind,
            "label": self.label,
            "team_side": self.team_side,
            "team_name": self.team_name,
            "scorer": self.scorer,
            "assistor": self.assistor,
            "gender_label": self.gender_label,
            "scoreboard": self.scoreboard,
            "time": self.time,
            "halftime_reason": self.halftime_reason,
            "editable": self.editable,
        }
