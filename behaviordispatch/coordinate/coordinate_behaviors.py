from dataclasses import dataclass, field
import logging
from typing import Optional
from behaviordispatch.coordinate.coordination_markdown import find_bottlenecks
from behaviordispatch.coordinate.group_workstreams import group_workstreams
from behaviordispatch.coordinate.rank_workstreams import rank_workstreams
from behaviordispatch.domain.behavior_deptraced import BehaviorDeptraced
from behaviordispatch.domain.behavior_measured import BehaviorMeasured
from behaviordispatch.domain.behavior_triaged import BehaviorTriaged
from behaviordispatch.domain.behavior_workstream import BehaviorWorkstream

logger = logging.getLogger(__name__)

@dataclass
class CoordinationStats:
    workstreams: int = 0
    deliverables: int = 0
    bottlenecks: int = 0

    def to_dict(self) -> dict[str, int]:
        return {"workstreams": self.workstreams, "deliverables": self.deliverables, "bottlenecks": self.bottlenecks}

@dataclass
class CoordinationResult:
    workstreams: list[BehaviorWorkstream] = field(default_factory=list)
    stats: CoordinationStats = field(default_factory=CoordinationStats)

def coordinate_all(triaged_basket: list[BehaviorTriaged], deptraced_basket: list[BehaviorDeptraced], measured_basket: Optional[list[BehaviorMeasured]] = None) -> CoordinationResult:
    """Group into workstreams, then rank them."""
    workstreams = rank_workstreams(group_workstreams(triaged_basket, deptraced_basket, measured_basket))
    stats = CoordinationStats(
        workstreams=len(workstreams),
        deliverables=sum(len(ws.deliverables) for ws in workstreams),
        bottlenecks=len(find_bottlenecks(workstreams)),
    )
    logger.info(f"Coordinated {stats.deliverables} deliverables in {stats.workstreams} workstreams. Bottlenecks: {stats.bottlenecks}")
    return CoordinationResult(workstreams=workstreams, stats=stats)
