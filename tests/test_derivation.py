"""
Tests for the functions that derive scoreboard values from the match log.
"""
import unittest

from ultiscore.models import EventKind, MatchConfig, MatchEvent, TeamSide
from ultiscore.services import (
    build_log_rows, compute_gender_label, compute_scoreboard,
    compute_timeout_balances, gender_labels,
)
from ultiscore.services.derivation import abba_label


def make_log(*specs):
    """Build events with ids from (kind, side) pairs."""
    events = []
    for index, (kind, side) in enumerate(specs, start=1):
        events.append(MatchEvent(
            kind=kind, team_side=side, event_id=index,
            scorer="P" if kind is EventKind.SCORE else "",
            assistor="Q" if kind is EventKind.SCORE else "",
        ))
    return events


SCORE_A = (EventKind.SCORE, TeamSide.A)
SCORE_B = (EventKind.SCORE, TeamSide.B)
TIMEOUT_A = (EventKind.TIMEOUT, TeamSide.A)
TIMEOUT_B = (EventKind.TIMEOUT, TeamSide.B)
HALFTIME = (EventKind.HALFTIME, TeamSide.NONE)
START = (EventKind.MATCH_START, TeamSide.NONE)


class ScoreboardTests(unittest.TestCase):
    def test_counts_only_scores(self) -> None:
        events = make_log(START, SCORE_A, TIMEOUT_B, SCORE_B, SCORE_A, HALFTIME)
        board = compute_scoreboard(events)
        self.assertEqual((board.team_a, board.team_b), (2, 1))
        self.assertEqual(board.leading_score, 2)
        self.assertEqual(board.display(), "2:1")

    def test_empty_log(self) -> None:
        self.assertEqual(compute_scoreboard([]).to_dict(), {"A": 0, "B": 0})


class GenderLabelTests(unittest.TestCase):
    def test_abba_sequence_from_male_start(self) -> None:
        labels = [abba_label("M", i) for i in range(9)]
        self.assertEqual(labels, ["M", "F", "F", "M", "M", "F", "F", "M", "M"])

    def test_abba_sequence_from_female_start(self) -> None:
        labels = [abba_label("F", i) for i in range(5)]
        self.assertEqual(labels, ["F", "M", "M", "F", "F"])

    def test_none_disables_labels(self) -> None:
        events = make_log(SCORE_A, SCORE_B, SCORE_A)
        self.assertEqual(set(gender_labels(events, "NONE").values()), {""})

    def test_labels_skip_non_score_events(self) -> None:
        events = make_log(START, SCORE_A, TIMEOUT_A, SCORE_B, HALFTIME, SCORE_B)
        labels = gender_labels(events, "M")
        self.assertEqual(labels[1], "")
        self.assertEqual([labels[2], labels[4], labels[6]], ["M", "F", "F"])
        self.assertEqual(labels[3], "")

    def test_compute_gender_label_by_position(self) -> None:
        events = make_log(SCORE_A, SCORE_B, SCORE_A, SCORE_A)
        self.assertEqual(compute_gender_label(events, "M", 3), "M")
        self.assertEqual(compute_gender_label(events, "M", 4), "")


class TimeoutBalanceTests(unittest.TestCase):
    def test_timeouts_debit_their_side(self) -> None:
        config = MatchConfig(timeouts_total=3)
        balances = compute_timeout_balances(config, make_log(TIMEOUT_A, TIMEOUT_A, TIMEOUT_B))
        self.assertEqual(balances[TeamSide.A].total_remaining, 1)
        self.assertEqual(balances[TeamSide.B].total_remaining, 2)
        # Per-half disabled: half mirrors total
        self.assertEqual(balances[TeamSide.A].half_remaining, 1)

    def test_halftime_resets_half_balance(self) -> None:
        config = MatchConfig(timeouts_total=3, timeouts_per_half=2)
        events = make_log(TIMEOUT_A, TIMEOUT_A, HALFTIME, TIMEOUT_B)
        balances = compute_timeout_balances(config, events)

        self.assertEqual(balances[TeamSide.A].total_remaining, 1)
        self.assertEqual(balances[TeamSide.A].half_remaining, 1)
        self.assertEqual(balances[TeamSide.B].total_remaining, 2)
        self.assertEqual(balances[TeamSide.B].half_remaining, 1)

    def test_balances_never_negative(self) -> None:
        config = MatchConfig(timeouts_total=1, timeouts_per_half=1)
        balances = compute_timeout_balances(config, make_log(TIMEOUT_A, TIMEOUT_A))
        self.assertEqual(balances[TeamSide.A].total_remaining, 0)
        self.assertEqual(balances[TeamSide.A].half_remaining, 0)

    def test_order_independent_of_edits(self) -> None:
        config = MatchConfig(timeouts_total=2)
        events = make_log(TIMEOUT_A, TIMEOUT_B, SCORE_A)
        before = compute_timeout_balances(config, events)
        after = compute_timeout_balances(config, list(reversed(events)))
        self.assertEqual(before, after)


class LogRowTests(unittest.TestCase):
    def test_rows_newest_first_with_running_score(self) -> None:
        events = make_log(START, SCORE_A, SCORE_B, SCORE_B, TIMEOUT_A)
        rows = build_log_rows(events, "M")

        self.assertEqual([row.event_id for row in rows], [5, 4, 3, 2, 1])
        self.assertEqual([row.scoreboard for row in rows], ["1:2", "1:2", "1:1", "1:0", "0:0"])
        self.assertEqual(rows[1].gender_label, "F")
        self.assertTrue(rows[0].editable)
        self.assertFalse(rows[-1].editable)
        self.assertEqual(rows[0].to_dict()["kind"], "timeout")


if __name__ == "__main__":
    unittest.main()
