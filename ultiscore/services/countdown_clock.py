"""Countdown clock service for the Ultimate sideline scorekeeper."""

from typing import Any, Callable, Dict, Optional

from ..utils import now_ts, fmt_mmss
from ..utils.logger import get_logger

log = get_logger("services.countdown_clock")

TickCallback = Callable[[float], None]
ExpireCallback = Callable[[], None]


class CountdownClock:
    """
    Deadline-based countdown with play/pause/reset.

    A stopped clock remembers its remaining seconds; a running clock only
    remembers the absolute deadline and recomputes the remaining time from
    it on every read, so missed or late ticks never cause drift.
    """

    def __init__(
        self,
        default_seconds: int,
        name: str = "clock",
        on_tick: Optional[TickCallback] = None,
        on_expire: Optional[ExpireCallback] = None,
    ):
        self.name = name
        self.default_seconds = max(1, int(default_seconds))
        self.running = False
        self.deadline: Optional[float] = None
        self.remaining: Optional[float] = None
        self.on_tick = on_tick
        self.on_expire = on_expire

    # ------------------------------------------------------------------
    # Controls
    # ------------------------------------------------------------------
    def start(self) -> bool:
        """Start from the remembered remaining time, or the default if none."""
        if self.running:
            return False
        remaining = self.remaining if self.remaining is not None else self.default_seconds
        self.deadline = now_ts() + remaining
        self.remaining = None
        self.running = True
        log.debug(f"{self.name} started with {remaining:.1f}s remaining")
        return True

    def stop(self) -> bool:
        """Pause and remember max(0, deadline - now)."""
        if not self.running:
            return False
        self.remaining = max(0.0, self.deadline - now_ts())
        self.deadline = None
        self.running = False
        log.debug(f"{self.name} stopped with {self.remaining:.1f}s remaining")
        return True

    def reset(self, seconds: Optional[float] = None) -> None:
        """Force stopped with ``seconds`` (default duration when omitted) remaining."""
        self.running = False
        self.deadline = None
        self.remaining = float(self.default_seconds if seconds is None else max(0, seconds))

    def toggle(self) -> bool:
        """Start if stopped, stop if running. Returns the new running flag."""
        if self.running:
            self.stop()
        else:
            self.start()
        return self.running

    def tick(self) -> Optional[float]:
        """
        Recompute the remaining time of a running clock.

        Notifies ``on_tick`` with the remaining seconds; on reaching zero the
        clock stops with 0 remaining and ``on_expire`` is notified.

        Returns:
            Remaining seconds, or None when the clock is stopped
        """
        if not self.running:
            return None
        remaining = self.deadline - now_ts()
        if self.on_tick is not None:
            self.on_tick(remaining)
        if remaining <= 0 and self.running:
            self.running = False
            self.deadline = None
            self.remaining = 0.0
            log.info(f"{self.name} expired")
            if self.on_expire is not None:
                self.on_expire()
        return remaining

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def remaining_seconds(self) -> float:
        """Remaining time; negative only while a running clock is overdue."""
        if self.running and self.deadline is not None:
            return self.deadline - now_ts()
        if self.remaining is not None:
            return self.remaining
        return float(self.default_seconds)

    def display(self) -> str:
        return fmt_mmss(int(self.remaining_seconds()))

    def to_json(self) -> Dict[str, Any]:
        return {
            "running": self.running,
            "deadline": self.deadline,
            "remaining": self.remaining,
            "default_seconds": self.default_seconds,
        }

    def load_json(self, data: Optional[Dict[str, Any]]) -> None:
        """
        Restore raw state saved by :meth:`to_json`.

        A clock whose deadline passed while the app was not running comes back
        stopped at zero. Callbacks are left untouched.
        """
        data = data or {}
        if data.get("default_seconds"):
            self.default_seconds = max(1, int(data["default_seconds"]))
        deadline = data.get("deadline")
        remaining = data.get("remaining")

        if data.get("running") and deadline is not None:
            deadline = float(deadline)
            if deadline <= now_ts():
                self.running = False
                self.deadline = None
                self.remaining = 0.0
            else:
                self.running = True
                self.deadline = deadline
                self.remaining = None
            return

        self.running = False
        self.deadline = None
        self.remaining = None if remaining is None else max(0.0, float(remaining))
