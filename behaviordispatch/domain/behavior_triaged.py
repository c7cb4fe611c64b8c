from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from behaviordispatch.domain.behavior import GatheredRef, utc_now_iso
from behaviordispatch.domain.behavior_measured import PriorityLevel


class UrgencyLevel(str, Enum):
    NOW = "now"
    SOON = "soon"
    LATER = "later"


URGENCY_ORDER: dict[UrgencyLevel, int] = {
    UrgencyLevel.NOW: 0,
    UrgencyLevel.SOON: 1,
    UrgencyLevel.LATER: 2,
}


@dataclass(frozen=True)
class TriagedDimensions:
    readiness: UrgencyLevel
    bandwidth: UrgencyLevel

    def to_dict(self) -> dict[str, str]:
        return {"readiness": self.readiness.value, "bandwidth": self.bandwidth.value}


@dataclass(frozen=True)
class BehaviorTriaged:
    """decision is never more urgent than the least ready of the two dimensions."""
    gathered: GatheredRef
    dimensions: TriagedDimensions
    decision: UrgencyLevel
    priority: PriorityLevel
    triaged_at: str = field(default_factory=utc_now_iso)

    def to_dict(self) -> dict[str, Any]:
        return {
            "gathered": self.gathered.to_dict(),
            "dimensions": self.dimensions.to_dict(),
            "decision": self.decision.value,
            "priority": self.priority.value,
            "triaged_at": self.triaged_at,
        }

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> "BehaviorTriaged":
        return cls(
            gathered=GatheredRef.from_dict(d["gathered"]),
            dimensions=TriagedDimensions(
                readiness=UrgencyLevel(d["dimensions"]["readiness"]),
                bandwidth=UrgencyLevel(d["dimensions"]["bandwidth"]),
            ),
            decision=UrgencyLevel(d["decision"]),
            priority=PriorityLevel(d["priority"]),
            triaged_at=d.get("triaged_at") or utc_now_iso(),
        )
