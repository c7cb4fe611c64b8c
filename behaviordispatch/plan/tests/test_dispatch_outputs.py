import json
import tempfile
import unittest
from pathlib import Path
from behaviordispatch.domain.behavior import Behavior, GatheredRef
from behaviordispatch.domain.behavior_deptraced import BehaviorDeptraced
from behaviordispatch.domain.behavior_measured import PriorityLevel
from behaviordispatch.domain.behavior_triaged import UrgencyLevel
from behaviordispatch.domain.behavior_workstream import BehaviorWorkstream, WorkstreamDeliverable
from behaviordispatch.domain.dispatch_config import DispatchConfig
from behaviordispatch.plan.dispatch_outputs import archive_results_to_dict, resolve_output_dir, write_coordination_outputs, write_prioritization_outputs

def make_workstreams(decision: UrgencyLevel) -> list[BehaviorWorkstream]:
    ref = GatheredRef(behavior=Behavior("acme", "api", "alpha"), content_hash="hash-alpha")
    deliverable = WorkstreamDeliverable(gathered=ref, priority=PriorityLevel.P3, decision=decision, effect=750.0)
    return [BehaviorWorkstream(slug="ws-1", name="alpha", priority=PriorityLevel.P3, deliverables=(deliverable,), rank="r1")]

class TestResolveOutputDir(unittest.TestCase):
    def test_relative(self):
        config = DispatchConfig()
        self.assertEqual(resolve_output_dir(Path("/repo"), config), Path("/repo/.dispatch"))

    def test_absolute(self):
        config = DispatchConfig(output_dir="/var/dispatch")
        self.assertEqual(resolve_output_dir(Path("/repo"), config), Path("/var/dispatch"))

class TestWriteOutputs(unittest.TestCase):
    def test_prioritization_outputs(self):
        # Arrange
        ref = GatheredRef(behavior=Behavior("acme", "api", "alpha"), content_hash="hash-alpha")
        deptraced = [BehaviorDeptraced(gathered=ref)]
        with tempfile.TemporaryDirectory() as temp_dir:
            output_dir = Path(temp_dir) / ".dispatch"

            # Act
            results = write_prioritization_outputs(output_dir, deptraced, [], [])

            # Assert
            self.assertEqual(sorted(results.keys()), ["dependencies.md", "prioritization.json", "prioritization.md"])
            for name in results:
                self.assertTrue((output_dir / name).is_file())
            self.assertEqual(json.loads((output_dir / "prioritization.json").read_text(encoding="utf-8")), [])

    def test_coordination_outputs_are_archived_on_change(self):
        # Arrange
        with tempfile.TemporaryDirectory() as temp_dir:
            output_dir = Path(temp_dir)
            write_coordination_outputs(output_dir, make_workstreams(UrgencyLevel.NOW))

            # Act
            unchanged = write_coordination_outputs(output_dir, make_workstreams(UrgencyLevel.NOW))
            changed = write_coordination_outputs(output_dir, make_workstreams(UrgencyLevel.LATER))
            summary = archive_results_to_dict(output_dir, changed)

            # Assert
            self.assertFalse(any(result.archived for result in unchanged.values()))
            self.assertTrue(all(result.archived for result in changed.values()))
            self.assertEqual(summary["output_dir"], str(output_dir))
            self.assertTrue(summary["files"]["coordination.md"]["archived"])
            self.assertIn(".archive", summary["files"]["coordination.md"]["archive_path"])
            self.assertIn("[later] alpha", (output_dir / "coordination.md").read_text(encoding="utf-8"))

if __name__ == '__main__':
    unittest.main()
