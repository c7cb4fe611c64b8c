from dataclasses import dataclass, field, replace
from typing import Any, Optional
from behaviordispatch.domain.behavior import GatheredRef
from behaviordispatch.domain.behavior_measured import PriorityLevel
from behaviordispatch.domain.behavior_triaged import UrgencyLevel


@dataclass(frozen=True)
class WorkstreamDeliverable:
    gathered: GatheredRef
    priority: PriorityLevel
    decision: UrgencyLevel
    effect: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "gathered": self.gathered.to_dict(),
            "priority": self.priority.value,
            "decision": self.decision.value,
            "effect": self.effect,
        }

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> "WorkstreamDeliverable":
        return cls(
            gathered=GatheredRef.from_dict(d["gathered"]),
            priority=PriorityLevel(d["priority"]),
            decision=UrgencyLevel(d["decision"]),
            effect=d.get("effect", 0.0),
        )


@dataclass(frozen=True)
class BehaviorWorkstream:
    """
    A set of behaviors connected through direct dependency edges.
    rank is None until the workstreams have been ranked.
    """
    slug: str
    name: str
    priority: PriorityLevel
    deliverables: tuple[WorkstreamDeliverable, ...] = field(default_factory=tuple)
    rank: Optional[str] = None

    def with_rank(self, rank: str) -> "BehaviorWorkstream":
        return replace(self, rank=rank)

    def to_dict(self) -> dict[str, Any]:
        return {
            "slug": self.slug,
            "name": self.name,
            "rank": self.rank,
            "priority": self.priority.value,
            "deliverables": [d.to_dict() for d in self.deliverables],
        }

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> "BehaviorWorkstream":
        return cls(
            slug=d["slug"],
            name=d["name"],
            priority=PriorityLevel(d["priority"]),
            deliverables=tuple(WorkstreamDeliverable.from_dict(x) for x in d.get("deliverables", [])),
            rank=d.get("rank"),
        )
