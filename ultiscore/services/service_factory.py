"""
Service factory for the Ultimate sideline scorekeeper.

This module builds a MatchSession and its collaborators from AppSettings so
that nothing in the application reaches for a global.
"""
from typing import Optional

import requests

from ..models import MatchConfig
from ..utils.settings import AppSettings
from .export_service import ExportService
from .match_controller import MatchController
from .match_session import MatchSession
from .persistence_service import JsonFileStore, KeyValueStore, PersistenceService
from .roster_service import RosterService
from .submission_service import RemoteLogSink


class ServiceFactory:
    """
    Factory for creating service instances with their dependencies injected.

    Collaborators are created once per factory and shared by everything it
    builds; tests swap them out with the ``configure_custom_*`` hooks.
    """

    def __init__(self, settings: Optional[AppSettings] = None):
        self.settings = settings or AppSettings()
        self._store: Optional[KeyValueStore] = None
        self._persistence_service: Optional[PersistenceService] = None
        self._http: Optional[requests.Session] = None

    def create_roster_service(self) -> RosterService:
        return RosterService(
            url=self.settings.roster_url,
            persistence_service=self._get_persistence_service(),
            format_hint=self.settings.roster_format,
            timeout=self.settings.request_timeout,
            session=self._get_http_session(),
        )

    def create_remote_sink(self) -> RemoteLogSink:
        return RemoteLogSink(
            url=self.settings.submit_url,
            timeout=self.settings.request_timeout,
            session=self._get_http_session(),
        )

    def create_export_service(self) -> ExportService:
        return ExportService(export_dir=self.settings.export_dir)

    def create_match_session(self, config: Optional[MatchConfig] = None) -> MatchSession:
        """
        Create a MatchSession with a fresh controller.

        Args:
            config: Initial match setup (defaults when omitted)

        Returns:
            Configured MatchSession instance; call ``launch()`` to load the
            roster and look for a recoverable match
        """
        return MatchSession(
            controller=MatchController(config),
            persistence_service=self._get_persistence_service(),
            roster_service=self.create_roster_service(),
            sink=self.create_remote_sink(),
            exporter=self.create_export_service(),
        )

    def _get_persistence_service(self) -> PersistenceService:
        if self._persistence_service is None:
            if self._store is None:
                self._store = JsonFileStore(self.settings.storage_dir)
            self._persistence_service = PersistenceService(self._store)
        return self._persistence_service

    def _get_http_session(self) -> requests.Session:
        if self._http is None:
            self._http = requests.Session()
        return self._http

    def configure_custom_store(self, store: KeyValueStore) -> None:
        """Use ``store`` instead of the JSON file store."""
        self._store = store
        self._persistence_service = None

    def configure_custom_http_session(self, session: requests.Session) -> None:
        self._http = session
