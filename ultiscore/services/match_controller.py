"""
Match controller for the Ultimate sideline scorekeeper.

This module contains the state machine that decides which operator actions
are legal, appends accepted actions to the event log, drives the two
countdown clocks and fires the automatic halftime triggers.
"""
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from ..models import (
    EventKind, HalftimeReason, LogRow, MatchConfig, MatchEvent, MatchState,
    Scoreboard, SubmittedMatch, TeamSide, TimeoutBalance,
)
from ..utils import now_ts, fmt_date, SCORE_CAP, HALFTIME_SCORE_TARGET, NO_ASSIST, CALLAHAN
from ..utils.logger import get_logger
from .countdown_clock import CountdownClock
from .derivation import build_log_rows, compute_scoreboard, compute_timeout_balances
from .event_log import EventLog

log = get_logger("services.match_controller")

PRIMARY = "primary"
SECONDARY = "secondary"

Listener = Callable[["MatchController"], None]


class MatchPhase(Enum):
    """Phase derived from the controller flags. Stoppage is tracked separately."""
    NOT_STARTED = "not_started"
    RUNNING = "running"
    HALFTIME = "halftime"
    CAPPED = "capped"


class MatchActionError(Exception):
    """Base class for operator actions the controller refused."""


class ActionRejected(MatchActionError):
    """
    Raised when an action is illegal in the current phase or config.

    Attributes:
        reason: Machine-readable rejection code
        message: Operator-facing explanation
    """

    def __init__(self, reason: str, message: str):
        super().__init__(message)
        self.reason = reason
        self.message = message


class EventNotFound(MatchActionError):
    """Raised when an edit or delete targets an event that does not exist."""

    def __init__(self, event_id: Any, message: Optional[str] = None):
        self.event_id = event_id
        self.message = message or f"Event {event_id} not found."
        super().__init__(self.message)


def _parse_halftime_reason(value: Any) -> Optional[HalftimeReason]:
    if isinstance(value, HalftimeReason):
        return value
    try:
        return HalftimeReason(value)
    except ValueError:
        return None


class MatchController:
    """
    Owns the event log, config, team selection and both clocks of one match.

    Every accepted action marks the controller dirty and notifies the
    subscribed listeners; every rejected action leaves state untouched,
    queues an operator notice and raises a :class:`MatchActionError`.
    """

    def __init__(self, config: Optional[MatchConfig] = None):
        self.config = config or MatchConfig()
        self.log = EventLog()

        self.team_a_name = ""
        self.team_b_name = ""
        self.team_a_players: List[str] = []
        self.team_b_players: List[str] = []

        self.match_started = False
        self.stoppage_active = False
        self.stoppage_paused_primary = False
        self.stoppage_paused_secondary = False
        self.cap_reached = False

        self.halftime_reason_resolved: Optional[HalftimeReason] = None
        self.halftime_auto_suppressed = False
        self.halftime_pending_reason: Optional[HalftimeReason] = None

        self.primary_clock = CountdownClock(
            self.config.match_duration_seconds,
            name="primary clock",
            on_tick=self._on_primary_tick,
            on_expire=self._on_primary_expire,
        )
        self.secondary_clock = CountdownClock(
            self.config.timeout_seconds,
            name="secondary clock",
            on_expire=self._on_secondary_expire,
        )

        self.dirty = False
        self._notices: List[Dict[str, str]] = []
        self._listeners: List[Listener] = []

    # ------------------------------------------------------------------
    # Derived views
    # ------------------------------------------------------------------
    @property
    def match_id(self) -> str:
        return f"{self.team_a_name} vs {self.team_b_name}"

    @property
    def events(self):
        return self.log.all()

    @property
    def scoreboard(self) -> Scoreboard:
        return compute_scoreboard(self.log.all())

    @property
    def timeout_balances(self) -> Dict[TeamSide, TimeoutBalance]:
        return compute_timeout_balances(self.config, self.log.all())

    @property
    def halftime_declared(self) -> bool:
        return self.log.latest(EventKind.HALFTIME) is not None

    @property
    def phase(self) -> MatchPhase:
        if not self.match_started:
            return MatchPhase.NOT_STARTED
        if self.cap_reached:
            return MatchPhase.CAPPED
        if self.halftime_declared:
            return MatchPhase.HALFTIME
        return MatchPhase.RUNNING

    def team_name(self, side: TeamSide) -> str:
        if side is TeamSide.A:
            return self.team_a_name
        if side is TeamSide.B:
            return self.team_b_name
        return ""

    def team_players(self, side: TeamSide) -> List[str]:
        if side is TeamSide.A:
            return list(self.team_a_players)
        if side is TeamSide.B:
            return list(self.team_b_players)
        return []

    def player_options(self, side: Any) -> Dict[str, List[str]]:
        """Choices offered in the score dialog for ``side``."""
        players = self.team_players(self._parse_side(side))
        return {
            "scorers": players + [NO_ASSIST],
            "assistors": players + [NO_ASSIST, CALLAHAN],
        }

    def log_rows(self) -> List[LogRow]:
        return build_log_rows(self.log.all(), self.config.gender_start)

    def view(self) -> Dict[str, Any]:
        """Plain-data rendering of everything the presentation layer shows."""
        balances = self.timeout_balances
        latest_halftime = self.log.latest(EventKind.HALFTIME)

        def _team(side: TeamSide) -> Dict[str, Any]:
            balance = balances[side]
            return {
                "name": self.team_name(side),
                "players": self.team_players(side),
                "timeouts": {
                    "total_remaining": balance.total_remaining,
                    "half_remaining": (
                        balance.half_remaining if self.config.uses_per_half_timeouts else None
                    ),
                },
            }

        def _clock(clock: CountdownClock) -> Dict[str, Any]:
            return {
                "running": clock.running,
                "remaining": round(clock.remaining_seconds(), 1),
                "display": clock.display(),
            }

        return {
            "phase": self.phase.value,
            "match_id": self.match_id,
            "match_started": self.match_started,
            "stoppage_active": self.stoppage_active,
            "cap_reached": self.cap_reached,
            "scoreboard": self.scoreboard.to_dict(),
            "teams": {"A": _team(TeamSide.A), "B": _team(TeamSide.B)},
            "halftime": {
                "declared": latest_halftime is not None,
                "event_id": latest_halftime.event_id if latest_halftime else None,
                "reason": (
                    self.halftime_reason_resolved.value if self.halftime_reason_resolved else None
                ),
                "pending": (
                    self.halftime_pending_reason.value if self.halftime_pending_reason else None
                ),
                "suppressed": self.halftime_auto_suppressed,
            },
            "config": self.config.to_json(),
            "clocks": {
                PRIMARY: _clock(self.primary_clock),
                SECONDARY: _clock(self.secondary_clock),
            },
            "log": [row.to_dict() for row in self.log_rows()],
        }

    # ------------------------------------------------------------------
    # Notices and listeners
    # ------------------------------------------------------------------
    def add_notice(self, level: str, message: str) -> None:
        """Queue an operator notice (info, warning, error or success)."""
        self._notices.append({"level": level, "message": message})

    def drain_notices(self) -> List[Dict[str, str]]:
        notices, self._notices = self._notices, []
        return notices

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a state-change listener; returns a function that removes it."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def mark_clean(self) -> None:
        self.dirty = False

    def _changed(self) -> None:
        self.dirty = True
        for listener in list(self._listeners):
            listener(self)

    def _reject(self, reason: str, message: str, level: str = "error") -> None:
        log.warning(f"Rejected ({reason}): {message}")
        self.add_notice(level, message)
        raise ActionRejected(reason, message)

    def _not_found(self, event_id: Any, message: str) -> None:
        log.warning(message)
        self.add_notice("error", message)
        raise EventNotFound(event_id, message)

    def _parse_side(self, side: Any) -> TeamSide:
        try:
            parsed = TeamSide.parse(side)
        except ValueError:
            parsed = TeamSide.NONE
        if parsed is TeamSide.NONE:
            self._reject("invalid_team", f"Unknown team side: {side!r}.")
        return parsed

    def _new_event(self, kind: EventKind, side: TeamSide = TeamSide.NONE, **fields: Any) -> MatchEvent:
        return MatchEvent(
            kind=kind,
            match_id=self.match_id,
            timestamp=now_ts(),
            team_side=side,
            team_name=self.team_name(side),
            **fields,
        )

    # ------------------------------------------------------------------
    # Team selection and setup
    # ------------------------------------------------------------------
    def select_teams(
        self,
        team_a: str,
        team_b: str,
        players_a: Optional[List[str]] = None,
        players_b: Optional[List[str]] = None,
    ) -> None:
        """Set both team names, optionally with their player lists."""
        self.team_a_name = (team_a or "").strip()
        self.team_b_name = (team_b or "").strip()
        if players_a is not None:
            self.team_a_players = self._clean_players(players_a)
        if players_b is not None:
            self.team_b_players = self._clean_players(players_b)
        log.info(f"Teams selected: {self.match_id}")
        self._changed()

    def set_team_players(self, side: Any, players: List[str]) -> None:
        parsed = self._parse_side(side)
        if parsed is TeamSide.A:
            self.team_a_players = self._clean_players(players)
        else:
            self.team_b_players = self._clean_players(players)
        self._changed()

    @staticmethod
    def _clean_players(players: List[str]) -> List[str]:
        return [str(p).strip() for p in players if p is not None and str(p).strip()]

    def configure(self, **setup: Any) -> MatchConfig:
        """
        Apply the setup form.

        Values are clamped by :meth:`MatchConfig.updated`. Both clocks pick up
        the new defaults, though a paused countdown keeps its remaining time.
        Timeout balances are recomputed from the log and the halftime
        triggers are re-evaluated.

        Returns:
            The config now in effect
        """
        self.config = self.config.updated(**setup)
        self.primary_clock.default_seconds = self.config.match_duration_seconds
        self.secondary_clock.default_seconds = self.config.timeout_seconds
        if not self.match_started and not self.primary_clock.running:
            self.primary_clock.reset()
        if not self.secondary_clock.running and self.secondary_clock.remaining is None:
            self.secondary_clock.reset()

        log.info(f"Setup updated: {self.config.to_json()}")
        self.add_notice("success", "Setup updated.")
        self._maybe_trigger_halftime_by_score()
        self._maybe_trigger_halftime_by_time()
        self._changed()
        return self.config

    # ------------------------------------------------------------------
    # Match actions
    # ------------------------------------------------------------------
    def start_match(self) -> int:
        """Start the match: record MatchStart and run the primary clock."""
        if self.match_started:
            self._reject("already_started", "The match has already started.", "warning")
        if not self.team_a_name or not self.team_b_name:
            self._reject(
                "teams_not_selected",
                "Select both Team A and Team B before starting the match.",
            )
        if self.stoppage_active:
            self._reject(
                "stoppage_active", "Resolve game stoppage before starting the match.", "warning"
            )

        self.primary_clock.default_seconds = self.config.match_duration_seconds
        self.primary_clock.reset()
        self.halftime_pending_reason = None
        self.halftime_auto_suppressed = False
        self.halftime_reason_resolved = None
        self.cap_reached = False
        self.match_started = True
        self.primary_clock.start()
        event_id = self.log.append(self._new_event(EventKind.MATCH_START))

        log.info(f"Match started: {self.match_id}")
        self.add_notice("info", "Match started. Score buttons unlocked.")
        self._changed()
        return event_id

    def add_score(self, side: Any, scorer: str, assistor: str) -> int:
        """
        Record a point for ``side``.

        Raises:
            ActionRejected: Match not started, stoppage active, score cap
                reached or a player missing
        """
        parsed = self._parse_side(side)
        if not self.match_started:
            self._reject("match_not_started", "Start the match before adding scores.")
        if self.stoppage_active:
            self._reject(
                "stoppage_active", "Resolve game stoppage before adding a score.", "warning"
            )
        if self.cap_reached:
            self._reject(
                "score_cap_reached", "Score cap reached. No further scores can be added.", "warning"
            )
        scorer = (scorer or "").strip()
        assistor = (assistor or "").strip()
        if not scorer or not assistor:
            self._reject("missing_player", "Please select both scorer and assist.")

        event_id = self.log.append(
            self._new_event(EventKind.SCORE, parsed, scorer=scorer, assistor=assistor)
        )
        log.info(f"Score {parsed.value} #{event_id}: {scorer} from {assistor} -> {self.scoreboard.display()}")

        self._maybe_trigger_halftime_by_score()
        self._attempt_pending_halftime()
        self._check_score_cap()
        self._changed()
        return event_id

    def edit_score(
        self, event_id: int, scorer: Optional[str] = None, assistor: Optional[str] = None
    ) -> MatchEvent:
        """Replace the scorer and/or assistor of a score event."""
        event = self.log.get(event_id)
        if event is None or not event.is_score:
            self._not_found(event_id, "Selected entry is not a score.")

        updates: Dict[str, str] = {}
        for name, value in (("scorer", scorer), ("assistor", assistor)):
            if value is None:
                continue
            value = value.strip()
            if not value:
                self._reject("missing_player", "Please select both scorer and assist.")
            updates[name] = value

        self.log.update(event_id, **updates)
        log.info(f"Score #{event_id} updated: {updates}")
        self.add_notice("success", "Score updated.")
        self._changed()
        return self.log.get(event_id)

    def delete_score(self, event_id: int) -> MatchEvent:
        """Remove a score event; later gender labels shift accordingly."""
        event = self.log.get(event_id)
        if event is None or not event.is_score:
            self._not_found(event_id, "Selected entry is not a score.")

        removed = self.log.remove(event_id)
        log.info(f"Score #{event_id} deleted -> {self.scoreboard.display()}")
        self._check_score_cap()
        self._maybe_trigger_halftime_by_score()
        self.add_notice("success", "Score deleted.")
        self._changed()
        return removed

    def call_timeout(self, side: Any) -> int:
        """
        Record a timeout for ``side`` and start the secondary clock.

        Raises:
            ActionRejected: Match not started, stoppage active or no
                timeouts left for the team (match or half)
        """
        parsed = self._parse_side(side)
        if not self.match_started:
            self._reject("match_not_started", "Start the match before logging a timeout.")
        if self.stoppage_active:
            self._reject(
                "stoppage_active", "Resolve game stoppage before recording a timeout.", "warning"
            )

        name = self.team_name(parsed) or f"Team {parsed.value}"
        balance = self.timeout_balances[parsed]
        if balance.total_remaining <= 0:
            self._reject("no_timeouts_remaining", f"{name} has no timeouts remaining.")
        if self.config.uses_per_half_timeouts and balance.half_remaining <= 0:
            self._reject(
                "no_timeouts_remaining", f"{name} has no timeouts remaining for this half."
            )

        event_id = self.log.append(self._new_event(EventKind.TIMEOUT, parsed))
        self.secondary_clock.reset(self.config.timeout_seconds)
        self.secondary_clock.start()

        log.info(f"Timeout #{event_id} for {name}")
        self.add_notice("info", f"Timeout recorded for {name}.")
        self._changed()
        return event_id

    def reassign_timeout(self, event_id: int, new_side: Any) -> MatchEvent:
        """
        Attribute a recorded timeout to the other team.

        The old side gets its timeout back and the new side is debited.

        Raises:
            EventNotFound: No timeout with that id
            ActionRejected: The new side has no timeouts left
        """
        event = self.log.get(event_id)
        if event is None or event.kind is not EventKind.TIMEOUT:
            self._not_found(event_id, "Selected entry is not a timeout.")
        parsed = self._parse_side(new_side)
        if parsed is event.team_side:
            return event

        name = self.team_name(parsed) or f"Team {parsed.value}"
        balance = self.timeout_balances[parsed]
        if balance.total_remaining <= 0:
            self._reject("no_timeouts_remaining", f"{name} has no timeouts remaining.")
        if self.config.uses_per_half_timeouts and balance.half_remaining <= 0:
            self._reject(
                "no_timeouts_remaining", f"{name} has no timeouts remaining for this half."
            )

        self.log.update(event_id, team_side=parsed, team_name=self.team_name(parsed))
        log.info(f"Timeout #{event_id} reassigned to {name}")
        self.add_notice("success", "Timeout updated.")
        self._changed()
        return self.log.get(event_id)

    def delete_timeout(self, event_id: int) -> MatchEvent:
        """Remove a timeout event, returning it to its team."""
        event = self.log.get(event_id)
        if event is None or event.kind is not EventKind.TIMEOUT:
            self._not_found(event_id, "Selected entry is not a timeout.")
        removed = self.log.remove(event_id)
        log.info(f"Timeout #{event_id} deleted")
        self.add_notice("success", "Timeout deleted.")
        self._changed()
        return removed

    def declare_halftime(self, reason: HalftimeReason = HalftimeReason.MANUAL) -> int:
        """
        Declare halftime.

        Raises:
            ActionRejected: Halftime already declared or match not started
        """
        if self.halftime_declared:
            self._reject("already_declared", "Halftime has already been recorded.", "warning")
        if not self.match_started:
            self._reject("match_not_started", "Start the match before recording halftime.")
        event_id = self._record_halftime(reason)
        self.add_notice("info", "Halftime recorded.")
        self._changed()
        return event_id

    def delete_halftime(self, event_id: int) -> MatchEvent:
        """
        Remove the most recent halftime event.

        Automatic triggers stay suppressed until their condition stops
        holding, so halftime does not immediately re-fire.
        """
        latest = self.log.latest(EventKind.HALFTIME)
        if latest is None or latest.event_id != event_id:
            self._not_found(event_id, "Selected entry is not the latest halftime.")

        removed = self.log.remove(event_id)
        self.halftime_auto_suppressed = True
        self.halftime_pending_reason = None
        self.halftime_reason_resolved = None
        self.secondary_clock.reset(self.config.timeout_seconds)

        self._maybe_trigger_halftime_by_score()
        log.info(f"Halftime #{event_id} deleted; automatic triggers suppressed")
        self.add_notice("success", "Halftime entry deleted.")
        self._changed()
        return removed

    def toggle_stoppage(self) -> bool:
        """
        Activate or clear a game stoppage.

        Activating pauses both clocks and records a Stoppage event. Clearing
        resumes only the clocks the stoppage paused, and never while the
        score cap is reached.

        Returns:
            Whether a stoppage is now active
        """
        if not self.stoppage_active:
            self.stoppage_paused_primary = self.primary_clock.running
            self.stoppage_paused_secondary = self.secondary_clock.running
            self.primary_clock.stop()
            self.secondary_clock.stop()
            self.stoppage_active = True
            self.log.append(self._new_event(EventKind.STOPPAGE))
            log.info("Game stoppage recorded")
            self.add_notice("warning", "Game stoppage recorded. Timers paused.")
        else:
            self.stoppage_active = False
            if self.stoppage_paused_primary and self.match_started and not self.cap_reached:
                self.primary_clock.start()
            if self.stoppage_paused_secondary and not self.cap_reached:
                self.secondary_clock.start()
            self.stoppage_paused_primary = False
            self.stoppage_paused_secondary = False
            log.info("Game stoppage cleared")
            self.add_notice("info", "Game stoppage cleared.")
        self._changed()
        return self.stoppage_active

    def submit(self) -> SubmittedMatch:
        """
        Close the match and hand its log to the exporters.

        State is reset to a fresh, not-started match keeping the teams,
        their players and the config.

        Raises:
            ActionRejected: The log is empty
        """
        if len(self.log) == 0:
            self._reject("no_scores_logged", "No scores have been logged.")

        record = SubmittedMatch(
            match_id=self.match_id,
            date=fmt_date(now_ts()),
            events=self.log.all(),
        )
        self.log.clear()
        self.match_started = False
        self.stoppage_active = False
        self.stoppage_paused_primary = False
        self.stoppage_paused_secondary = False
        self.cap_reached = False
        self.halftime_reason_resolved = None
        self.halftime_auto_suppressed = False
        self.halftime_pending_reason = None
        self.primary_clock.reset(self.config.match_duration_seconds)
        self.secondary_clock.reset(self.config.timeout_seconds)

        log.info(f"Match submitted: {record.match_id} ({len(record.events)} events)")
        self._changed()
        return record

    # ------------------------------------------------------------------
    # Clock controls
    # ------------------------------------------------------------------
    def _clock(self, which: str) -> CountdownClock:
        if which == PRIMARY:
            return self.primary_clock
        if which == SECONDARY:
            return self.secondary_clock
        self._reject("unknown_clock", f"Unknown clock: {which!r}.")

    def toggle_clock(self, which: str) -> bool:
        """Play/pause a clock. Starting is refused during a stoppage or at the cap."""
        clock = self._clock(which)
        if not clock.running:
            if self.stoppage_active:
                self._reject("stoppage_active", "Resolve game stoppage before starting the timer.")
            if self.cap_reached:
                self._reject("score_cap_reached", "Score cap reached. Timers remain paused.", "warning")
        running = clock.toggle()
        self._changed()
        return running

    def reset_clock(self, which: str, seconds: Any = None) -> float:
        """Stop a clock and set its remaining time (configured default when omitted)."""
        clock = self._clock(which)
        default = (
            self.config.match_duration_seconds if clock is self.primary_clock
            else self.config.timeout_seconds
        )
        try:
            value = int(seconds) if seconds is not None else default
        except (TypeError, ValueError):
            value = default
        if value <= 0:
            value = default
        clock.reset(value)
        self._changed()
        return clock.remaining_seconds()

    def tick(self) -> None:
        """Advance both clocks; the primary clock feeds the clock trigger."""
        self.primary_clock.tick()
        self.secondary_clock.tick()

    def _on_primary_tick(self, remaining: float) -> None:
        self._maybe_trigger_halftime_by_time(remaining)

    def _on_primary_expire(self) -> None:
        self.add_notice("info", "Match clock expired.")
        self._changed()

    def _on_secondary_expire(self) -> None:
        self.add_notice("info", "Timeout clock expired.")
        self._changed()

    # ------------------------------------------------------------------
    # Halftime triggers and score cap
    # ------------------------------------------------------------------
    def _record_halftime(self, reason: HalftimeReason) -> int:
        event_id = self.log.append(self._new_event(EventKind.HALFTIME, halftime_reason=reason))
        self.secondary_clock.reset(self.config.halftime_break_seconds)
        self.secondary_clock.start()
        self.halftime_reason_resolved = reason
        self.halftime_pending_reason = None
        self.halftime_auto_suppressed = False
        self.dirty = True
        log.info(f"Halftime #{event_id} declared ({reason.value})")
        return event_id

    def _auto_halftime_condition_holds(self, remaining: Optional[float] = None) -> bool:
        """A deleted halftime stays suppressed while either automatic trigger would fire."""
        if self.scoreboard.leading_score >= HALFTIME_SCORE_TARGET:
            return True
        threshold = self.config.halftime_threshold_seconds
        if threshold <= 0:
            return False
        if remaining is None:
            remaining = self.primary_clock.remaining_seconds()
        return max(0.0, remaining) <= threshold

    def _maybe_trigger_halftime_by_score(self) -> None:
        if not self.match_started or self.halftime_declared or self.halftime_reason_resolved:
            return
        if self.halftime_auto_suppressed:
            if self._auto_halftime_condition_holds():
                return
            self.halftime_auto_suppressed = False
        leading = self.scoreboard.leading_score
        if leading >= HALFTIME_SCORE_TARGET:
            self._record_halftime(HalftimeReason.SCORE)
            self.add_notice(
                "info", f"Halftime reached once a team scored {HALFTIME_SCORE_TARGET} points."
            )

    def _maybe_trigger_halftime_by_time(self, remaining: Optional[float] = None) -> None:
        if not self.match_started or self.halftime_declared:
            return
        threshold = self.config.halftime_threshold_seconds
        if threshold <= 0:
            return
        if remaining is None:
            remaining = self.primary_clock.remaining_seconds()
        remaining = max(0.0, remaining)
        if self.halftime_auto_suppressed:
            if self._auto_halftime_condition_holds(remaining):
                return
            self.halftime_auto_suppressed = False
        if remaining <= threshold and self.halftime_pending_reason is not HalftimeReason.CLOCK:
            self.halftime_pending_reason = HalftimeReason.CLOCK
            self.dirty = True
            log.info("Halftime due on the game clock; waiting for the next point")
            self.add_notice(
                "info",
                "Halftime reached on the game clock. The break will start after the next point.",
            )

    def _attempt_pending_halftime(self) -> None:
        if not self.match_started or self.halftime_declared or self.halftime_reason_resolved:
            return
        if self.halftime_pending_reason is not HalftimeReason.CLOCK:
            return
        self._record_halftime(HalftimeReason.CLOCK)
        self.add_notice("info", "Halftime break started after the latest point.")

    def _check_score_cap(self, silent: bool = False) -> None:
        scores = self.scoreboard
        reached = scores.team_a >= SCORE_CAP or scores.team_b >= SCORE_CAP
        if reached and not self.cap_reached:
            self.cap_reached = True
            self.primary_clock.stop()
            self.secondary_clock.stop()
            log.info(f"Score cap reached at {scores.display()}")
            if not silent:
                self.add_notice("info", "Score cap reached. Timers paused.")
        elif not reached and self.cap_reached:
            self.cap_reached = False

    # ------------------------------------------------------------------
    # Snapshot and restore
    # ------------------------------------------------------------------
    def snapshot(self) -> MatchState:
        """Capture the reconstructable state as one aggregate."""
        balances = self.timeout_balances
        return MatchState(
            config=self.config,
            team_a_name=self.team_a_name,
            team_b_name=self.team_b_name,
            team_a_players=list(self.team_a_players),
            team_b_players=list(self.team_b_players),
            events=list(self.log.all()),
            next_event_id=self.log.next_id,
            timeouts={side.value: balance for side, balance in balances.items()},
            match_started=self.match_started,
            stoppage_active=self.stoppage_active,
            stoppage_paused_primary=self.stoppage_paused_primary,
            stoppage_paused_secondary=self.stoppage_paused_secondary,
            halftime_reason_resolved=(
                self.halftime_reason_resolved.value if self.halftime_reason_resolved else None
            ),
            halftime_auto_suppressed=self.halftime_auto_suppressed,
            primary_clock=self.primary_clock.to_json(),
            secondary_clock=self.secondary_clock.to_json(),
            timestamp=now_ts(),
        )

    def restore(self, state: MatchState) -> None:
        """
        Rebuild the controller from a snapshot.

        Only the event log, config, team selection, flags and raw clock state
        are taken from the snapshot; the scoreboard and timeout balances are
        recomputed from the log.
        """
        self.config = state.config
        self.primary_clock.default_seconds = self.config.match_duration_seconds
        self.secondary_clock.default_seconds = self.config.timeout_seconds
        self.team_a_name = state.team_a_name
        self.team_b_name = state.team_b_name
        self.team_a_players = list(state.team_a_players)
        self.team_b_players = list(state.team_b_players)
        self.log.restore(state.events, state.next_event_id)

        self.match_started = state.match_started
        self.stoppage_active = state.stoppage_active
        self.stoppage_paused_primary = state.stoppage_paused_primary
        self.stoppage_paused_secondary = state.stoppage_paused_secondary
        self.cap_reached = False
        self.halftime_auto_suppressed = state.halftime_auto_suppressed
        self.halftime_pending_reason = None

        latest = self.log.latest(EventKind.HALFTIME)
        if latest is None:
            self.halftime_reason_resolved = None
        else:
            self.halftime_reason_resolved = (
                _parse_halftime_reason(state.halftime_reason_resolved)
                or latest.halftime_reason
                or HalftimeReason.MANUAL
            )

        self.primary_clock.load_json(state.primary_clock)
        self.secondary_clock.load_json(state.secondary_clock)
        if self.stoppage_active:
            self.stoppage_paused_primary = self.stoppage_paused_primary or self.primary_clock.running
            self.stoppage_paused_secondary = (
                self.stoppage_paused_secondary or self.secondary_clock.running
            )
            self.primary_clock.stop()
            self.secondary_clock.stop()

        self.dirty = False
        self._check_score_cap(silent=True)
        self._maybe_trigger_halftime_by_score()
        self._maybe_trigger_halftime_by_time()
        log.info(f"Restored {self.match_id} with {len(self.log)} events")
        for listener in list(self._listeners):
            listener(self)
