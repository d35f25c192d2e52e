"""
Roster service for the Ultimate sideline scorekeeper.

This module fetches the team → players mapping from the roster endpoint.
Two response shapes are understood: a CSV sheet whose header row holds the
team names with one column of players per team, and a JSON object of the
form ``{"Team": ["Player", ...]}``.
"""
import csv
import io
from typing import Dict, List, Optional

import requests

from ..utils.logger import get_logger
from .persistence_service import PersistenceService

log = get_logger("services.roster")

Roster = Dict[str, List[str]]


class RosterFetchError(Exception):
    """Raised when the roster endpoint cannot be reached or parsed."""


def parse_roster_csv(text: str) -> Roster:
    """
    Parse a roster sheet.

    The first row holds team names; each following row holds one player per
    team column. Blank cells and blank header columns are skipped.

    Args:
        text: CSV text (quoted fields with commas are supported)

    Returns:
        Mapping of team name to ordered player list
    """
    rows = [row for row in csv.reader(io.StringIO(text)) if any(cell.strip() for cell in row)]
    if not rows:
        return {}

    teams: Roster = {}
    for col, header in enumerate(rows[0]):
        team = header.strip()
        if not team:
            continue
        players = []
        for row in rows[1:]:
            value = row[col].strip() if col < len(row) else ""
            if value:
                players.append(value)
        teams[team] = players
    return teams


def parse_roster_json(data: object) -> Roster:
    """
    Validate a JSON roster object.

    Raises:
        ValueError: If the payload is not an object of string lists
    """
    if not isinstance(data, dict):
        raise ValueError("Roster JSON must be an object of team name to player list")
    teams: Roster = {}
    for team, players in data.items():
        if not isinstance(players, list):
            raise ValueError(f"Players for {team!r} must be a list")
        teams[str(team).strip()] = [str(p).strip() for p in players if str(p).strip()]
    return teams


class RosterService:
    """
    Client for the roster endpoint with a persisted fallback cache.

    Args:
        url: Roster endpoint; empty disables fetching
        persistence_service: Store for the 24 hour roster cache
        format_hint: Optional "csv" or "json" overriding detection
        timeout: Request timeout in seconds
        session: Optional requests session (tests inject a mock)
    """

    def __init__(
        self,
        url: str,
        persistence_service: Optional[PersistenceService] = None,
        format_hint: Optional[str] = None,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ):
        self.url = url or ""
        self.persistence_service = persistence_service
        self.format_hint = (format_hint or "").strip().lower() or None
        self.timeout = timeout
        self.session = session or requests.Session()

    def _is_json(self, response: requests.Response) -> bool:
        if self.format_hint:
            return self.format_hint == "json"
        content_type = response.headers.get("Content-Type", "")
        return "application/json" in content_type or self.url.lower().endswith(".json")

    def fetch_teams(self) -> Roster:
        """
        Download and parse the roster.

        Raises:
            RosterFetchError: Network error, HTTP error status or unparseable body
        """
        if not self.url:
            raise RosterFetchError("Roster URL is not configured")
        try:
            response = self.session.get(
                self.url, timeout=self.timeout, headers={"Cache-Control": "no-cache"}
            )
            response.raise_for_status()
            if self._is_json(response):
                return parse_roster_json(response.json())
            return parse_roster_csv(response.text)
        except requests.RequestException as exc:
            raise RosterFetchError(f"Failed to fetch teams: {exc}") from exc
        except ValueError as exc:
            raise RosterFetchError(f"Failed to parse teams: {exc}") from exc

    def load_teams(self) -> Roster:
        """
        Fetch the roster, falling back to the cache and then to an empty roster.

        A successful fetch refreshes the cache.
        """
        try:
            teams = self.fetch_teams()
        except RosterFetchError as exc:
            log.warning(f"{exc}; using cached roster")
            cached = self.cached_teams()
            return cached if cached is not None else {}

        log.info(f"Loaded {len(teams)} teams from {self.url}")
        if self.persistence_service is not None:
            self.persistence_service.save_roster_cache(teams)
        return teams

    def cached_teams(self) -> Optional[Roster]:
        if self.persistence_service is None:
            return None
        return self.persistence_service.load_roster_cache()
