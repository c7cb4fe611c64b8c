import unittest
from behaviordispatch.domain.behavior import Behavior, BehaviorGathered, BehaviorGatheredStatus, GatheredRef
from behaviordispatch.domain.behavior_deptraced import BehaviorDeptraced
from behaviordispatch.domain.behavior_measured import (
    BehaviorMeasured, CostAttend, CostExpend, GainLeverage, GainYieldage, MeasuredCost, MeasuredGain, PriorityLevel, YieldageDirect,
)
from behaviordispatch.domain.behavior_triaged import UrgencyLevel
from behaviordispatch.domain.dispatch_config import DispatchConfig
from behaviordispatch.domain.dispatch_context import DispatchContext
from behaviordispatch.estimator.estimator import LLMEstimator
from behaviordispatch.llm_util.response_mockllm import ResponseMockLLM
from behaviordispatch.triage.triage_behaviors import TriageStats, collect_delivered_names, triage_all
from behaviordispatch.triage.triage_dimensions import compute_bandwidth, compute_decision, compute_readiness, rank_measured

def make_ref(name: str) -> GatheredRef:
    return GatheredRef(behavior=Behavior("acme", "api", name), content_hash=f"hash-{name}")

def make_measured(name: str, effect: float, priority: PriorityLevel) -> BehaviorMeasured:
    return BehaviorMeasured(
        gathered=make_ref(name),
        gain=MeasuredGain(
            leverage=GainLeverage(direct=0.0, transitive=0.0),
            yieldage=GainYieldage(direct=YieldageDirect(chances=(), expected=0.0), transitive=0.0),
            composite=effect,
        ),
        cost=MeasuredCost(
            attend=CostAttend(upfront=0.0, recurrent=0.0, composite=0.0),
            expend=CostExpend(upfront=0.0, recurrent=0.0, composite=0.0),
            composite=0.0,
        ),
        effect=effect,
        priority=priority,
    )

def make_context(max_concurrency: int = 3) -> DispatchContext:
    config = DispatchConfig.model_validate({"constraints": {"max_concurrency": max_concurrency}})
    return DispatchContext(estimator=LLMEstimator.from_llm(ResponseMockLLM()), config=config)

class TestComputeReadiness(unittest.TestCase):
    def setUp(self):
        self.alpha, self.beta, self.gamma = make_ref("alpha"), make_ref("beta"), make_ref("gamma")

    def test_no_dependencies(self):
        deptraced = BehaviorDeptraced(gathered=self.alpha)
        self.assertEqual(compute_readiness(deptraced, set()), UrgencyLevel.NOW)

    def test_direct_dependencies_delivered(self):
        deptraced = BehaviorDeptraced(gathered=self.alpha, depends_on_direct=(self.beta,), depends_on_transitive=(self.beta, self.gamma))
        self.assertEqual(compute_readiness(deptraced, {"beta"}), UrgencyLevel.NOW)

    def test_blocked_by_one_hop(self):
        deptraced = BehaviorDeptraced(gathered=self.alpha, depends_on_direct=(self.beta,), depends_on_transitive=(self.beta,))
        self.assertEqual(compute_readiness(deptraced, set()), UrgencyLevel.SOON)

    def test_blocked_by_two_hops(self):
        deptraced = BehaviorDeptraced(gathered=self.alpha, depends_on_direct=(self.beta,), depends_on_transitive=(self.beta, self.gamma))
        self.assertEqual(compute_readiness(deptraced, set()), UrgencyLevel.LATER)

    def test_transitive_delivered(self):
        deptraced = BehaviorDeptraced(gathered=self.alpha, depends_on_direct=(self.beta,), depends_on_transitive=(self.beta, self.gamma))
        self.assertEqual(compute_readiness(deptraced, {"gamma"}), UrgencyLevel.SOON)

class TestComputeBandwidth(unittest.TestCase):
    def test_positions(self):
        # Arrange
        ranked = [make_measured(f"b{i}", effect=1000.0 - i, priority=PriorityLevel.P3) for i in range(5)]

        # Act
        levels = [compute_bandwidth(m, ranked, max_concurrency=2) for m in ranked]

        # Assert
        self.assertEqual(levels, [UrgencyLevel.NOW, UrgencyLevel.NOW, UrgencyLevel.SOON, UrgencyLevel.SOON, UrgencyLevel.LATER])

    def test_positions_with_three_slots(self):
        # Arrange
        measured = [make_measured(f"b{effect}", effect=float(effect), priority=PriorityLevel.P3) for effect in [700, 1000, 800, 900]]
        ranked = rank_measured(measured)

        # Act
        levels = [compute_bandwidth(m, ranked, max_concurrency=3) for m in ranked]

        # Assert
        self.assertEqual([m.effect for m in ranked], [1000.0, 900.0, 800.0, 700.0])
        self.assertEqual(levels, [UrgencyLevel.NOW, UrgencyLevel.NOW, UrgencyLevel.NOW, UrgencyLevel.SOON])

    def test_not_ranked(self):
        measured = make_measured("alpha", effect=1.0, priority=PriorityLevel.P5)
        self.assertEqual(compute_bandwidth(measured, [], max_concurrency=3), UrgencyLevel.LATER)

class TestComputeDecision(unittest.TestCase):
    def test_least_urgent_wins(self):
        self.assertEqual(compute_decision(UrgencyLevel.NOW, UrgencyLevel.NOW), UrgencyLevel.NOW)
        self.assertEqual(compute_decision(UrgencyLevel.NOW, UrgencyLevel.SOON), UrgencyLevel.SOON)
        self.assertEqual(compute_decision(UrgencyLevel.LATER, UrgencyLevel.NOW), UrgencyLevel.LATER)
        self.assertEqual(compute_decision(UrgencyLevel.SOON, UrgencyLevel.LATER), UrgencyLevel.LATER)

class TestRankMeasured(unittest.TestCase):
    def test_priority_then_effect(self):
        # Arrange
        measured = [
            make_measured("low", effect=100.0, priority=PriorityLevel.P5),
            make_measured("important-small", effect=2100.0, priority=PriorityLevel.P1),
            make_measured("critical", effect=20000.0, priority=PriorityLevel.P0),
            make_measured("important-big", effect=9000.0, priority=PriorityLevel.P1),
        ]

        # Act
        ranked = rank_measured(measured)

        # Assert
        self.assertEqual([m.gathered.behavior.name for m in ranked], ["critical", "important-big", "important-small", "low"])

class TestTriageAll(unittest.TestCase):
    def test_triage(self):
        # Arrange
        alpha = make_measured("alpha", effect=20000.0, priority=PriorityLevel.P0)
        beta = make_measured("beta", effect=3000.0, priority=PriorityLevel.P1)
        gamma = make_measured("gamma", effect=600.0, priority=PriorityLevel.P3)
        deptraced = [
            BehaviorDeptraced(gathered=alpha.gathered),
            BehaviorDeptraced(gathered=beta.gathered, depends_on_direct=(alpha.gathered,), depends_on_transitive=(alpha.gathered,)),
            BehaviorDeptraced(gathered=gamma.gathered),
        ]

        # Act
        result = triage_all([gamma, beta, alpha], deptraced, make_context(max_concurrency=1))

        # Assert
        names = [t.gathered.behavior.name for t in result.triaged]
        self.assertEqual(names, ["alpha", "beta", "gamma"])
        decisions = {t.gathered.behavior.name: t.decision for t in result.triaged}
        self.assertEqual(decisions["alpha"], UrgencyLevel.NOW)
        self.assertEqual(decisions["beta"], UrgencyLevel.SOON)
        self.assertEqual(decisions["gamma"], UrgencyLevel.LATER)
        self.assertEqual(result.triaged[1].priority, PriorityLevel.P1)
        self.assertEqual(result.stats, TriageStats(now=1, soon=1, later=1, total=3))

    def test_delivered_dependency_unblocks(self):
        # Arrange
        alpha = make_measured("alpha", effect=3000.0, priority=PriorityLevel.P1)
        deptraced = [BehaviorDeptraced(gathered=alpha.gathered, depends_on_direct=(make_ref("beta"),), depends_on_transitive=(make_ref("beta"),))]

        # Act
        result = triage_all([alpha], deptraced, make_context(), delivered_names=["beta"])

        # Assert
        self.assertEqual(result.triaged[0].dimensions.readiness, UrgencyLevel.NOW)
        self.assertEqual(result.triaged[0].decision, UrgencyLevel.NOW)

    def test_missing_deptraced_is_skipped(self):
        # Arrange
        alpha = make_measured("alpha", effect=3000.0, priority=PriorityLevel.P1)

        # Act
        with self.assertLogs("behaviordispatch.triage.triage_behaviors", level="WARNING"):
            result = triage_all([alpha], [], make_context())

        # Assert
        self.assertEqual(result.triaged, [])
        self.assertEqual(result.stats.total, 0)

    def test_empty(self):
        result = triage_all([], [], make_context())
        self.assertEqual(result.triaged, [])
        self.assertEqual(result.stats.to_dict(), {"now": 0, "soon": 0, "later": 0, "total": 0})

class TestCollectDeliveredNames(unittest.TestCase):
    def test_collect(self):
        # Arrange
        basket = [
            BehaviorGathered(behavior=Behavior("acme", "api", "alpha"), content_hash="h1", status=BehaviorGatheredStatus.DELIVERED),
            BehaviorGathered(behavior=Behavior("acme", "api", "beta"), content_hash="h2", status=BehaviorGatheredStatus.INFLIGHT),
        ]

        # Act
        names = collect_delivered_names(basket)

        # Assert
        self.assertEqual(names, {"alpha"})

if __name__ == '__main__':
    unittest.main()
