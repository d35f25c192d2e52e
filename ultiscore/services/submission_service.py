"""Remote log sink client for the Ultimate sideline scorekeeper."""

from typing import Any, Dict, Optional

import requests

from ..utils.logger import get_logger

log = get_logger("services.submission")


class SubmissionError(Exception):
    """Raised when the remote log sink cannot be reached."""


class RemoteLogSink:
    """
    Posts a finished match log to the spreadsheet endpoint.

    The endpoint is write-only: the response body is never read and any
    completed HTTP exchange counts as success. There is no retry.

    Args:
        url: Sink endpoint; empty disables remote submission
        timeout: Request timeout in seconds
        session: Optional requests session (tests inject a mock)
    """

    def __init__(self, url: str, timeout: float = 10.0, session: Optional[requests.Session] = None):
        self.url = url or ""
        self.timeout = timeout
        self.session = session or requests.Session()

    @property
    def configured(self) -> bool:
        return bool(self.url)

    def submit(self, payload: Dict[str, Any]) -> bool:
        """
        Send ``payload`` as JSON.

        Returns:
            True when sent, False when no URL is configured

        Raises:
            SubmissionError: On a transport-level failure
        """
        if not self.url:
            log.warning("Submit URL is not configured; skipping remote export")
            return False
        try:
            self.session.post(self.url, json=payload, timeout=self.timeout)
        except requests.RequestException as exc:
            raise SubmissionError(f"Failed to submit scores: {exc}") from exc
        log.info(f"Submitted {len(payload.get('logs', []))} log rows for {payload.get('GameID')}")
        return True
