"""
Tests for the data models, deployment settings and logging helpers.
"""
import logging
import tempfile
import unittest

from ultiscore.models import (
    EventKind, HalftimeReason, MatchConfig, MatchEvent, MatchState, TeamSide,
)
from ultiscore.utils import AppSettings, configure_log_dir, fmt_mmss, get_logger


class MatchConfigTests(unittest.TestCase):
    def test_defaults(self) -> None:
        config = MatchConfig()
        self.assertEqual(config.match_duration_seconds, 6000)
        self.assertEqual(config.halftime_threshold_seconds, 45 * 60)
        self.assertEqual(config.halftime_break_seconds, 7 * 60)
        self.assertFalse(config.uses_per_half_timeouts)
        self.assertEqual(config.half_allotment(), 2)

    def test_updated_keeps_unparseable_values(self) -> None:
        config = MatchConfig().updated(match_duration_min="", timeouts_total=None, gender_start="off")
        self.assertEqual(config.match_duration_min, 100)
        self.assertEqual(config.timeouts_total, 2)
        self.assertEqual(config.gender_start, "NONE")

    def test_trigger_never_exceeds_duration(self) -> None:
        config = MatchConfig().updated(match_duration_min=40, halftime_trigger_min=55)
        self.assertEqual(config.halftime_trigger_min, 40)
        self.assertEqual(config.halftime_threshold_seconds, 0)

    def test_json_round_trip_clamps(self) -> None:
        config = MatchConfig(timeouts_total=3, timeouts_per_half=1, gender_start="F")
        self.assertEqual(MatchConfig.from_json(config.to_json()), config)
        self.assertEqual(MatchConfig.from_json({"timeout_seconds": -5}).timeout_seconds, 1)
        self.assertEqual(MatchConfig.from_json(None), MatchConfig())


class MatchEventTests(unittest.TestCase):
    def test_dict_round_trip(self) -> None:
        event = MatchEvent(
            kind=EventKind.HALFTIME, match_id="Red vs Blue", timestamp=12.5,
            halftime_reason=HalftimeReason.CLOCK, event_id=4,
        )
        data = event.to_dict()
        self.assertEqual(data["id"], 4)
        self.assertEqual(data["kind"], "halftime")
        self.assertEqual(MatchEvent.from_dict(data), event)

    def test_labels(self) -> None:
        timeout = MatchEvent(kind=EventKind.TIMEOUT, team_side=TeamSide.B)
        self.assertEqual(timeout.display_label, "Time out")
        self.assertEqual(timeout.event_type_label, "TimeOut")
        self.assertEqual(MatchEvent(kind=EventKind.SCORE).event_type_label, "")

    def test_team_side_parse(self) -> None:
        self.assertIs(TeamSide.parse(" b "), TeamSide.B)
        self.assertIs(TeamSide.A.other, TeamSide.B)
        with self.assertRaises(ValueError):
            TeamSide.parse("C")


class MatchStateTests(unittest.TestCase):
    def test_defaults_fill_timeouts(self) -> None:
        state = MatchState(config=MatchConfig(timeouts_total=3, timeouts_per_half=1))
        self.assertEqual(state.timeouts["A"].total_remaining, 3)
        self.assertEqual(state.timeouts["B"].half_remaining, 1)

    def test_match_started_defaults_from_events(self) -> None:
        data = {"events": [{"id": 5, "kind": "matchstart"}]}
        state = MatchState.from_json(data)
        self.assertTrue(state.match_started)
        self.assertEqual(state.next_event_id, 6)


class AppSettingsTests(unittest.TestCase):
    def test_from_env(self) -> None:
        settings = AppSettings.from_env({
            "ULTISCORE_ROSTER_URL": " https://example.org/teams.json ",
            "ULTISCORE_PORT": "8080",
            "ULTISCORE_TICK_INTERVAL": "fast",
            "ULTISCORE_SUBMIT_URL": "   ",
        })
        self.assertEqual(settings.roster_url, "https://example.org/teams.json")
        self.assertEqual(settings.port, 8080)
        self.assertEqual(settings.tick_interval, 0.5)
        self.assertEqual(settings.submit_url, "")


class LoggingTests(unittest.TestCase):
    def test_fmt_mmss(self) -> None:
        self.assertEqual(fmt_mmss(90), "01:30")
        self.assertEqual(fmt_mmss(-75), "-01:15")

    def test_log_dir_applies_to_existing_loggers(self) -> None:
        logger = get_logger("tests.models")
        self.assertIs(get_logger("tests.models"), logger)

        with tempfile.TemporaryDirectory() as tmp:
            logfile = configure_log_dir(tmp)
            try:
                logger.info("written to file")
                file_handlers = [h for h in logger.handlers if isinstance(h, logging.FileHandler)]
                self.assertEqual(len(file_handlers), 1)
                file_handlers[0].flush()
                with open(logfile, encoding="utf-8") as f:
                    self.assertIn("INFO | ultiscore.tests.models | written to file", f.read())
            finally:
                configure_log_dir(None)

        self.assertFalse(any(isinstance(h, logging.FileHandler) for h in logger.handlers))


if __name__ == "__main__":
    unittest.main()
