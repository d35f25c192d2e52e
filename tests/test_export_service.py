"""
Tests for CSV export, the remote payload and the remote log sink.
"""
import os
import tempfile
import unittest
from unittest.mock import MagicMock

import requests

from ultiscore.models import EventKind, MatchEvent, SubmittedMatch, TeamSide
from ultiscore.services import (
    ExportService, RemoteLogSink, SubmissionError, build_csv, build_remote_payload,
    sanitize_filename,
)


def sample_record(match_id: str = "Red vs Blue") -> SubmittedMatch:
    return SubmittedMatch(
        match_id=match_id,
        date="2024-06-01",
        events=(
            MatchEvent(kind=EventKind.MATCH_START, match_id=match_id, event_id=1),
            MatchEvent(
                kind=EventKind.SCORE, match_id=match_id, team_side=TeamSide.A,
                team_name="Red", scorer="Smith, Al", assistor='Jo "Jet" Lee', event_id=2,
            ),
            MatchEvent(
                kind=EventKind.TIMEOUT, match_id=match_id, team_side=TeamSide.B,
                team_name="Blue", event_id=3,
            ),
        ),
    )


class SanitizeFilenameTests(unittest.TestCase):
    def test_reserved_characters_replaced(self) -> None:
        self.assertEqual(sanitize_filename('Red/Blue: "final"?'), "Red_Blue_ _final__")

    def test_length_cap_and_fallback(self) -> None:
        self.assertEqual(len(sanitize_filename("x" * 500)), 120)
        self.assertEqual(sanitize_filename("   "), "Game")
        self.assertEqual(sanitize_filename(""), "Game")


class CsvExportTests(unittest.TestCase):
    def test_header_rows_and_crlf(self) -> None:
        text = build_csv(sample_record())
        lines = text.split("\r\n")

        self.assertEqual(lines[0], "GameID,Time,Event,Team,Score,Assist")
        self.assertEqual(len(lines), 4)
        self.assertFalse(text.endswith("\r\n"))
        self.assertEqual(lines[1], "Red vs Blue,,Start,,,")
        self.assertEqual(lines[2], 'Red vs Blue,,,Red,"Smith, Al","Jo ""Jet"" Lee"')
        self.assertEqual(lines[3], "Red vs Blue,,TimeOut,Blue,,")

    def test_write_csv_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            exporter = ExportService(os.path.join(tmp, "out"))
            path = exporter.write_csv(sample_record("Red/Blue"))

            self.assertEqual(os.path.basename(path), "Red_Blue.csv")
            with open(path, encoding="utf-8", newline="") as f:
                self.assertEqual(f.read(), build_csv(sample_record("Red/Blue")))


class RemotePayloadTests(unittest.TestCase):
    def test_payload_shape(self) -> None:
        payload = build_remote_payload(sample_record())

        self.assertEqual(payload["GameID"], "Red vs Blue")
        self.assertEqual(payload["Date"], "2024-06-01")
        self.assertEqual(len(payload["logs"]), 3)
        self.assertEqual(payload["logs"][1], {
            "GameID": "Red vs Blue",
            "Time": "",
            "Event": "",
            "Team": "Red",
            "Score": "Smith, Al",
            "Assist": 'Jo "Jet" Lee',
        })


class RemoteLogSinkTests(unittest.TestCase):
    def setUp(self) -> None:
        self.http = MagicMock()

    def test_posts_json(self) -> None:
        sink = RemoteLogSink("https://example.org/sink", timeout=5, session=self.http)
        payload = build_remote_payload(sample_record())

        self.assertTrue(sink.submit(payload))
        self.http.post.assert_called_once_with(
            "https://example.org/sink", json=payload, timeout=5
        )

    def test_unconfigured_sink_skips(self) -> None:
        sink = RemoteLogSink("", session=self.http)
        self.assertFalse(sink.configured)
        self.assertFalse(sink.submit({"logs": []}))
        self.http.post.assert_not_called()

    def test_transport_failure_raises(self) -> None:
        self.http.post.side_effect = requests.ConnectionError("offline")
        sink = RemoteLogSink("https://example.org/sink", session=self.http)
        with self.assertRaises(SubmissionError):
            sink.submit({"logs": []})


if __name__ == "__main__":
    unittest.main()
