"""
Economic measurement of a behavior.

Units:
- leverage: minutes saved per week
- yieldage: dollars per week
- attend: minutes (upfront) and minutes per week (recurrent)
- expend: dollars (upfront) and dollars per week (recurrent)
- composites, effect: dollars per week
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from behaviordispatch.domain.behavior import GatheredRef, utc_now_iso


class PriorityLevel(str, Enum):
    P0 = "p0"
    P1 = "p1"
    P3 = "p3"
    P5 = "p5"


# Lower is more valuable.
PRIORITY_ORDER: dict[PriorityLevel, int] = {
    PriorityLevel.P0: 0,
    PriorityLevel.P1: 1,
    PriorityLevel.P3: 2,
    PriorityLevel.P5: 3,
}


@dataclass(frozen=True)
class YieldageChance:
    yieldage: float
    probability: float

    def to_dict(self) -> dict[str, float]:
        return {"yieldage": self.yieldage, "probability": self.probability}


@dataclass(frozen=True)
class YieldageDirect:
    chances: tuple[YieldageChance, ...]
    expected: float

    def to_dict(self) -> dict[str, Any]:
        return {"chances": [c.to_dict() for c in self.chances], "expected": self.expected}


@dataclass(frozen=True)
class GainLeverage:
    direct: float
    transitive: float

    def to_dict(self) -> dict[str, float]:
        return {"direct": self.direct, "transitive": self.transitive}


@dataclass(frozen=True)
class GainYieldage:
    direct: YieldageDirect
    transitive: float

    def to_dict(self) -> dict[str, Any]:
        return {"direct": self.direct.to_dict(), "transitive": self.transitive}


@dataclass(frozen=True)
class MeasuredGain:
    leverage: GainLeverage
    yieldage: GainYieldage
    composite: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "leverage": self.leverage.to_dict(),
            "yieldage": self.yieldage.to_dict(),
            "composite": self.composite,
        }


@dataclass(frozen=True)
class CostAttend:
    upfront: float
    recurrent: float
    composite: float

    def to_dict(self) -> dict[str, float]:
        return {"upfront": self.upfront, "recurrent": self.recurrent, "composite": self.composite}


@dataclass(frozen=True)
class CostExpend:
    upfront: float
    recurrent: float
    composite: float

    def to_dict(self) -> dict[str, float]:
        return {"upfront": self.upfront, "recurrent": self.recurrent, "composite": self.composite}


@dataclass(frozen=True)
class MeasuredCost:
    attend: CostAttend
    expend: CostExpend
    composite: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "attend": self.attend.to_dict(),
            "expend": self.expend.to_dict(),
            "composite": self.composite,
        }


@dataclass(frozen=True)
class BehaviorMeasured:
    gathered: GatheredRef
    gain: MeasuredGain
    cost: MeasuredCost
    effect: float
    priority: PriorityLevel
    measured_at: str = field(default_factory=utc_now_iso)

    def to_dict(self) -> dict[str, Any]:
        return {
            "gathered": self.gathered.to_dict(),
            "gain": self.gain.to_dict(),
            "cost": self.cost.to_dict(),
            "effect": self.effect,
            "priority": self.priority.value,
            "measured_at": self.measured_at,
        }

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> "BehaviorMeasured":
        gain = d["gain"]
        cost = d["cost"]
        yieldage_direct = gain["yieldage"]["direct"]
        return cls(
            gathered=GatheredRef.from_dict(d["gathered"]),
            gain=MeasuredGain(
                leverage=GainLeverage(**gain["leverage"]),
                yieldage=GainYieldage(
                    direct=YieldageDirect(
                        chances=tuple(YieldageChance(**c) for c in yieldage_direct["chances"]),
                        expected=yieldage_direct["expected"],
                    ),
                    transitive=gain["yieldage"]["transitive"],
                ),
                composite=gain["composite"],
            ),
            cost=MeasuredCost(
                attend=CostAttend(**cost["attend"]),
                expend=CostExpend(**cost["expend"]),
                composite=cost["composite"],
            ),
            effect=d["effect"],
            priority=PriorityLevel(d["priority"]),
            measured_at=d.get("measured_at") or utc_now_iso(),
        )
