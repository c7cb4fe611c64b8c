import unittest
from behaviordispatch.domain.behavior import Behavior, GatheredRef
from behaviordispatch.domain.behavior_measured import PriorityLevel
from behaviordispatch.domain.behavior_triaged import UrgencyLevel
from behaviordispatch.domain.behavior_workstream import BehaviorWorkstream, WorkstreamDeliverable

class TestBehaviorWorkstream(unittest.TestCase):
    def setUp(self):
        ref = GatheredRef(behavior=Behavior(org="acme", repo="api", name="auth"), content_hash="h1")
        deliverable = WorkstreamDeliverable(gathered=ref, priority=PriorityLevel.P1, decision=UrgencyLevel.NOW, effect=2500.0)
        self.workstream = BehaviorWorkstream(slug="ws-1", name="auth", priority=PriorityLevel.P1, deliverables=(deliverable,))

    def test_with_rank_returns_new_instance(self):
        # Arrange
        # Act
        ranked = self.workstream.with_rank("r1")

        # Assert
        self.assertIsNone(self.workstream.rank)
        self.assertEqual(ranked.rank, "r1")
        self.assertEqual(ranked.deliverables, self.workstream.deliverables)

    def test_to_dict_from_dict(self):
        # Arrange
        ranked = self.workstream.with_rank("r2")

        # Act
        d = ranked.to_dict()
        restored = BehaviorWorkstream.from_dict(d)

        # Assert
        self.assertEqual(d["priority"], "p1")
        self.assertEqual(d["deliverables"][0]["decision"], "now")
        self.assertEqual(restored, ranked)

if __name__ == '__main__':
    unittest.main()
