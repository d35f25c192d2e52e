"""
Deployment settings for the Ultimate sideline scorekeeper.

Values come from ``ULTISCORE_*`` environment variables; anything unset falls
back to the defaults below. Malformed numeric values are ignored with a
warning so the app can still boot.
"""
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .logger import get_logger

log = get_logger("utils.settings")

ENV_PREFIX = "ULTISCORE_"


@dataclass
class AppSettings:
    """
    Runtime settings that are not part of the match setup.

    Attributes:
        roster_url: Endpoint returning the team → players mapping (CSV or JSON)
        roster_format: Optional format hint for the roster endpoint ("csv"/"json")
        submit_url: Remote log sink endpoint; empty disables remote submission
        storage_dir: Directory holding the JSON key-value store
        export_dir: Directory where CSV exports are written
        request_timeout: Timeout in seconds for outbound HTTP calls
        host: Web server bind address
        port: Web server port
        log_dir: Optional directory for per-run log files
        tick_interval: Seconds between background clock/auto-save ticks
    """
    roster_url: str = ""
    roster_format: Optional[str] = None
    submit_url: str = ""
    storage_dir: str = "storage"
    export_dir: str = "exports"
    request_timeout: float = 10.0
    host: str = "127.0.0.1"
    port: int = 7122
    log_dir: Optional[str] = None
    tick_interval: float = 0.5

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "AppSettings":
        """Build settings from environment variables."""
        env = os.environ if environ is None else environ
        settings = cls()

        def _get(name: str) -> Optional[str]:
            value = env.get(ENV_PREFIX + name)
            if value is None or not value.strip():
                return None
            return value.strip()

        for attr, name in (
            ("roster_url", "ROSTER_URL"),
            ("roster_format", "ROSTER_FORMAT"),
            ("submit_url", "SUBMIT_URL"),
            ("storage_dir", "STORAGE_DIR"),
            ("export_dir", "EXPORT_DIR"),
            ("host", "HOST"),
            ("log_dir", "LOG_DIR"),
        ):
            value = _get(name)
            if value is not None:
                setattr(settings, attr, value)

        for attr, name, cast in (
            ("request_timeout", "REQUEST_TIMEOUT", float),
            ("port", "PORT", int),
            ("tick_interval", "TICK_INTERVAL", float),
        ):
            value = _get(name)
            if value is None:
                continue
            try:
                setattr(settings, attr, cast(value))
            except ValueError:
                log.warning(f"Ignoring invalid {ENV_PREFIX}{name}={value!r}")

        return settings
