"""
Decide, for each measured behavior, whether to work on it now, soon or later.

Pure computation, no estimator calls.
"""
from dataclasses import dataclass, field
import logging
from typing import Iterable
from behaviordispatch.domain.behavior import BehaviorGathered, BehaviorGatheredStatus, find_by_ref
from behaviordispatch.domain.behavior_deptraced import BehaviorDeptraced
from behaviordispatch.domain.behavior_measured import BehaviorMeasured
from behaviordispatch.domain.behavior_triaged import BehaviorTriaged, TriagedDimensions, UrgencyLevel
from behaviordispatch.domain.dispatch_context import DispatchContext
from behaviordispatch.triage.triage_dimensions import compute_bandwidth, compute_decision, compute_readiness, rank_measured

logger = logging.getLogger(__name__)

@dataclass
class TriageStats:
    now: int = 0
    soon: int = 0
    later: int = 0
    total: int = 0

    @classmethod
    def from_triaged(cls, triaged: list[BehaviorTriaged]) -> "TriageStats":
        return cls(
            now=sum(1 for t in triaged if t.decision == UrgencyLevel.NOW),
            soon=sum(1 for t in triaged if t.decision == UrgencyLevel.SOON),
            later=sum(1 for t in triaged if t.decision == UrgencyLevel.LATER),
            total=len(triaged),
        )

    def to_dict(self) -> dict[str, int]:
        return {"now": self.now, "soon": self.soon, "later": self.later, "total": self.total}

@dataclass
class TriageResult:
    triaged: list[BehaviorTriaged] = field(default_factory=list)
    stats: TriageStats = field(default_factory=TriageStats)

def collect_delivered_names(gathered_basket: list[BehaviorGathered]) -> set[str]:
    return {g.behavior.name for g in gathered_basket if g.status == BehaviorGatheredStatus.DELIVERED}

def triage_all(measured_basket: list[BehaviorMeasured], deptraced_basket: list[BehaviorDeptraced], context: DispatchContext, delivered_names: Iterable[str] = ()) -> TriageResult:
    """
    The triaged behaviors are returned in ranked order.
    A measured behavior without a matching deptraced record is skipped.
    """
    max_concurrency = context.config.constraints.max_concurrency
    delivered = set(delivered_names)
    ranked = rank_measured(measured_basket)

    triaged: list[BehaviorTriaged] = []
    for measured in ranked:
        deptraced = find_by_ref(deptraced_basket, measured.gathered)
        if deptraced is None:
            logger.warning(f"Missing deptraced record for measured behavior {measured.gathered.behavior.name!r}, skipping.")
            continue
        readiness = compute_readiness(deptraced, delivered)
        bandwidth = compute_bandwidth(measured, ranked, max_concurrency)
        triaged.append(BehaviorTriaged(
            gathered=measured.gathered,
            dimensions=TriagedDimensions(readiness=readiness, bandwidth=bandwidth),
            decision=compute_decision(readiness, bandwidth),
            priority=measured.priority,
        ))

    stats = TriageStats.from_triaged(triaged)
    logger.info(f"Triaged {stats.total} behaviors. now: {stats.now}, soon: {stats.soon}, later: {stats.later}")
    return TriageResult(triaged=triaged, stats=stats)
