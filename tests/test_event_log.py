import unittest

from ultiscore.models import EventKind, MatchEvent, TeamSide
from ultiscore.services import EventLog


def score(side: TeamSide = TeamSide.A, scorer: str = "Alice") -> MatchEvent:
    return MatchEvent(kind=EventKind.SCORE, team_side=side, scorer=scorer, assistor="Bob")


class EventLogTests(unittest.TestCase):
    def setUp(self) -> None:
        self.log = EventLog()

    def test_append_assigns_increasing_ids(self) -> None:
        first = self.log.append(score())
        second = self.log.append(MatchEvent(kind=EventKind.TIMEOUT, team_side=TeamSide.B))

        self.assertEqual((first, second), (1, 2))
        self.assertEqual(len(self.log), 2)
        self.assertEqual([e.event_id for e in self.log.all()], [1, 2])
        self.assertEqual(self.log.next_id, 3)

    def test_update_keeps_id_and_kind(self) -> None:
        event_id = self.log.append(score())
        self.assertTrue(self.log.update(event_id, scorer="Cara", kind=EventKind.TIMEOUT, event_id=99))

        event = self.log.get(event_id)
        self.assertEqual(event.scorer, "Cara")
        self.assertEqual(event.kind, EventKind.SCORE)
        self.assertEqual(event.event_id, event_id)
        self.assertFalse(self.log.update(42, scorer="Nobody"))

    def test_remove_and_get(self) -> None:
        ids = [self.log.append(score()) for _ in range(3)]
        removed = self.log.remove(ids[1])

        self.assertEqual(removed.event_id, ids[1])
        self.assertIsNone(self.log.get(ids[1]))
        self.assertIsNone(self.log.remove(ids[1]))
        self.assertEqual([e.event_id for e in self.log.all()], [ids[0], ids[2]])

    def test_latest_by_kind(self) -> None:
        self.log.append(MatchEvent(kind=EventKind.HALFTIME))
        self.log.append(score())
        second = self.log.append(MatchEvent(kind=EventKind.HALFTIME))

        self.assertEqual(self.log.latest(EventKind.HALFTIME).event_id, second)
        self.assertIsNone(self.log.latest(EventKind.STOPPAGE))

    def test_ids_not_reused_after_clear(self) -> None:
        self.log.append(score())
        self.log.append(score())
        self.log.clear()

        self.assertEqual(len(self.log), 0)
        self.assertEqual(self.log.append(score()), 3)

    def test_restore_reseats_counter(self) -> None:
        events = [score().with_updates(event_id=7), score().with_updates(event_id=3)]
        self.log.restore(events, next_id=2)

        self.assertEqual(self.log.next_id, 8)
        self.assertEqual([e.event_id for e in self.log.all()], [7, 3])

    def test_all_is_a_snapshot(self) -> None:
        self.log.append(score())
        view = self.log.all()
        self.log.append(score())
        self.assertEqual(len(view), 1)


if __name__ == "__main__":
    unittest.main()
