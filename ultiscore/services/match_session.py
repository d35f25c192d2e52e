"""
Application context for the Ultimate sideline scorekeeper.

A MatchSession wires one MatchController to its collaborators: the
persistence service (auto-save and launch recovery), the roster client and
the two exporters used on submit. Whatever drives the event loop (the web
app's ticker thread, a test) holds the session and calls :meth:`tick`.
"""
from typing import Any, Dict, List, Optional

from ..models import MatchState
from ..utils import now_ts, AUTO_SAVE_INTERVAL_SECONDS
from ..utils.logger import get_logger
from .export_service import ExportService, build_csv, build_remote_payload
from .match_controller import MatchController
from .persistence_service import PersistenceService
from .roster_service import RosterService
from .submission_service import RemoteLogSink, SubmissionError

log = get_logger("services.match_session")


class MatchSession:
    """
    Holds the live match and everything it talks to.

    Args:
        controller: The match state machine
        persistence_service: Snapshot and roster cache storage
        roster_service: Roster endpoint client
        sink: Remote log sink client
        exporter: Local CSV exporter
        auto_save_interval: Minimum seconds between auto-saves while dirty
    """

    def __init__(
        self,
        controller: MatchController,
        persistence_service: PersistenceService,
        roster_service: RosterService,
        sink: RemoteLogSink,
        exporter: ExportService,
        auto_save_interval: float = AUTO_SAVE_INTERVAL_SECONDS,
    ):
        self.controller = controller
        self.persistence_service = persistence_service
        self.roster_service = roster_service
        self.sink = sink
        self.exporter = exporter
        self.auto_save_interval = auto_save_interval

        self.teams: Dict[str, List[str]] = {}
        self.pending_snapshot: Optional[MatchState] = None
        self._last_save = 0.0
        self._save_failing = False

    # ------------------------------------------------------------------
    # Launch and recovery
    # ------------------------------------------------------------------
    def launch(self, fetch_roster: bool = True) -> None:
        """
        Load the roster and look for a recoverable match.

        A snapshot younger than 24 hours is held in :attr:`pending_snapshot`
        until the operator accepts or refuses it.
        """
        if fetch_roster:
            self.refresh_teams()
        else:
            self.teams = self.roster_service.cached_teams() or {}

        snapshot = self.persistence_service.load_match_snapshot()
        if snapshot is not None and self.persistence_service.is_recent(snapshot):
            self.pending_snapshot = snapshot
            log.info(f"Found recoverable match {snapshot.team_a_name} vs {snapshot.team_b_name}")
            self.controller.add_notice(
                "info", "Previous game data found. Would you like to restore your previous session?"
            )
        elif snapshot is not None:
            log.info("Ignoring match snapshot older than 24 hours")

    @property
    def recovery_pending(self) -> bool:
        return self.pending_snapshot is not None

    def resolve_recovery(self, accept: bool) -> bool:
        """
        Accept or refuse the pending snapshot.

        Accepting rebuilds the match from the snapshot. Refusing discards it
        and starts a fresh match that keeps only the snapshot's config.

        Returns:
            False if there was nothing to resolve
        """
        snapshot = self.pending_snapshot
        if snapshot is None:
            return False
        self.pending_snapshot = None

        if accept:
            self.controller.restore(snapshot)
            self.controller.add_notice("success", "Previous session restored successfully")
        else:
            self.persistence_service.discard_match_snapshot()
            self.controller.restore(MatchState(config=snapshot.config))
            log.info("Previous session discarded")
        return True

    # ------------------------------------------------------------------
    # Roster
    # ------------------------------------------------------------------
    def refresh_teams(self) -> Dict[str, List[str]]:
        self.teams = self.roster_service.load_teams()
        if not self.teams and self.roster_service.url:
            self.controller.add_notice("warning", "Could not load teams; no cached roster available.")
        return self.teams

    def select_teams(self, team_a: str, team_b: str) -> None:
        """Select both teams, filling their player lists from the roster."""
        self.controller.select_teams(
            team_a,
            team_b,
            players_a=self.teams.get((team_a or "").strip(), []),
            players_b=self.teams.get((team_b or "").strip(), []),
        )

    # ------------------------------------------------------------------
    # Periodic work and saving
    # ------------------------------------------------------------------
    def tick(self) -> None:
        """Advance the clocks and auto-save when dirty and the interval has passed."""
        self.controller.tick()
        if self.controller.dirty and now_ts() - self._last_save >= self.auto_save_interval:
            self.save()

    def save(self) -> bool:
        """
        Snapshot the match to storage.

        Nothing is written while a recovery decision is pending so the old
        snapshot cannot be overwritten by the blank match.
        """
        if self.pending_snapshot is not None:
            return False
        saved = self.persistence_service.save_match_snapshot(self.controller.snapshot())
        self._last_save = now_ts()
        if saved:
            self.controller.mark_clean()
        elif not self._save_failing:
            self.controller.add_notice(
                "warning", "Unable to save match data: storage is full. The match continues in memory."
            )
        self._save_failing = not saved
        return saved

    def shutdown(self) -> None:
        """Final save before the process exits."""
        log.info("Saving match before shutdown")
        self.save()

    # ------------------------------------------------------------------
    # Submit
    # ------------------------------------------------------------------
    def submit(self) -> Dict[str, Any]:
        """
        Submit the match.

        Local state is reset first, then the log goes to the remote sink and
        finally to the local CSV export, which runs whatever the remote
        outcome was.

        Raises:
            ActionRejected: The log is empty
        """
        record = self.controller.submit()

        remote_submitted = False
        try:
            remote_submitted = self.sink.submit(build_remote_payload(record))
        except SubmissionError as exc:
            log.warning(str(exc))
            self.controller.add_notice("error", f"Export to Google Sheets failed: {exc}")
        if remote_submitted:
            self.controller.add_notice("success", "Data has been successfully exported to Google Sheets!")

        csv_text = build_csv(record)
        export_path = None
        try:
            export_path = self.exporter.write_csv(record)
        except OSError as exc:
            log.error(f"Local export failed: {exc}")
            self.controller.add_notice("error", f"Local export failed: {exc}")

        self.save()
        return {
            "match_id": record.match_id,
            "date": record.date,
            "event_count": len(record.events),
            "remote_submitted": remote_submitted,
            "export_path": export_path,
            "csv": csv_text,
        }
