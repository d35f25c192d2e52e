"""
Export service for the Ultimate sideline scorekeeper.

This module turns a submitted match into the CSV file written locally and
the JSON payload posted to the remote log sink.
"""
import csv
import io
import os
import re
from typing import Any, Dict, List

from ..models import MatchEvent, SubmittedMatch
from ..utils.constants import CSV_HEADER, MAX_FILENAME_LENGTH, DEFAULT_MATCH_NAME
from ..utils.logger import get_logger
from ..utils.time_utils import fmt_timestamp

log = get_logger("services.export")

_UNSAFE_FILENAME_CHARS = re.compile(r'[<>:"/\\|?*\x00-\x1f]')


def sanitize_filename(name: str) -> str:
    """
    Make ``name`` safe to use as a file name.

    Reserved characters and control characters become underscores and the
    result is capped at 120 characters; an empty result becomes "Game".
    """
    cleaned = _UNSAFE_FILENAME_CHARS.sub("_", str(name or "")).strip()
    cleaned = cleaned[:MAX_FILENAME_LENGTH]
    return cleaned or DEFAULT_MATCH_NAME


def event_row(event: MatchEvent, match_id: str) -> List[str]:
    """One export row: GameID, Time, Event, Team, Score, Assist."""
    return [
        event.match_id or match_id,
        fmt_timestamp(event.timestamp) if event.timestamp else "",
        event.event_type_label,
        event.team_name,
        event.scorer,
        event.assistor,
    ]


def build_csv(record: SubmittedMatch) -> str:
    """
    Render the match log as CSV in insertion order.

    Fields holding a comma, quote or line break are quoted; rows are joined
    with CRLF.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_MINIMAL, lineterminator="\r\n")
    writer.writerow(CSV_HEADER)
    for event in record.events:
        writer.writerow(event_row(event, record.match_id))
    return buffer.getvalue().rstrip("\r\n")


def build_remote_payload(record: SubmittedMatch) -> Dict[str, Any]:
    """Payload accepted by the spreadsheet log sink."""
    logs = []
    for event in record.events:
        game_id, time, event_label, team, score, assist = event_row(event, record.match_id)
        logs.append({
            "GameID": game_id,
            "Time": time,
            "Event": event_label,
            "Team": team,
            "Score": score,
            "Assist": assist,
        })
    return {"GameID": record.match_id, "Date": record.date, "logs": logs}


def export_filename(record: SubmittedMatch) -> str:
    return f"{sanitize_filename(record.match_id)}.csv"


class ExportService:
    """
    Writes submitted matches to CSV files.

    Args:
        export_dir: Folder receiving the CSV files (created on demand)
    """

    def __init__(self, export_dir: str = "exports"):
        self.export_dir = export_dir

    def write_csv(self, record: SubmittedMatch) -> str:
        """
        Write the CSV export of ``record``.

        Returns:
            Path of the written file

        Raises:
            OSError: If the file cannot be written
        """
        os.makedirs(self.export_dir, exist_ok=True)
        path = os.path.join(self.export_dir, export_filename(record))
        with open(path, "w", encoding="utf-8", newline="") as f:
            f.write(build_csv(record))
        log.info(f"Exported {len(record.events)} events to {path}")
        return path
