"""
Deterministic composition of the four estimates into a measured behavior.

    expected          = sum(chance.yieldage * chance.probability)
    yieldage.trans    = reverse_dependent_count * expected * transitive_multiplier
    gain.composite    = ((leverage.direct + leverage.transitive) / 60) * hourly_rate + expected + yieldage.trans
    attend.composite  = attend.upfront / horizon + attend.recurrent
    expend.composite  = expend.upfront / horizon + expend.recurrent
    cost.composite    = (attend.composite / 60) * hourly_rate + expend.composite
    effect            = gain.composite - cost.composite
"""
from behaviordispatch.domain.behavior import Behavior, GatheredRef
from behaviordispatch.domain.behavior_deptraced import BehaviorDeptraced
from behaviordispatch.domain.behavior_measured import (
    BehaviorMeasured, CostAttend, CostExpend, GainLeverage, GainYieldage, MeasuredCost, MeasuredGain,
    PriorityLevel, YieldageChance, YieldageDirect,
)
from behaviordispatch.domain.dispatch_config import DispatchConfig, PriorityThresholds
from behaviordispatch.measure.cost_estimates import AttendEstimate, ExpendEstimate
from behaviordispatch.measure.gain_estimates import LeverageEstimate, YieldageEstimate

MINUTES_PER_HOUR = 60.0

def compute_expected_yieldage(chances: list[YieldageChance]) -> float:
    return sum(chance.yieldage * chance.probability for chance in chances)

def compute_reverse_dependents(behavior: Behavior, deptraced_pool: list[BehaviorDeptraced]) -> list[BehaviorDeptraced]:
    """The other behaviors whose direct dependencies include this behavior."""
    return [
        d for d in deptraced_pool
        if d.gathered.behavior != behavior and any(dep.behavior == behavior for dep in d.depends_on_direct)
    ]

def compute_gain_composite(leverage: GainLeverage, yieldage: GainYieldage, hourly_rate: float) -> float:
    leverage_dollars = ((leverage.direct + leverage.transitive) / MINUTES_PER_HOUR) * hourly_rate
    return leverage_dollars + yieldage.direct.expected + yieldage.transitive

def compute_amortized(upfront: float, recurrent: float, horizon_weeks: float) -> float:
    if horizon_weeks <= 0:
        raise ValueError(f"horizon_weeks must be positive, got: {horizon_weeks!r}")
    return upfront / horizon_weeks + recurrent

def compute_cost_composite(attend: CostAttend, expend: CostExpend, hourly_rate: float) -> float:
    return (attend.composite / MINUTES_PER_HOUR) * hourly_rate + expend.composite

def assign_priority(effect: float, thresholds: PriorityThresholds) -> PriorityLevel:
    """On a boundary the more urgent tier wins."""
    if effect >= thresholds.p0:
        return PriorityLevel.P0
    if effect >= thresholds.p1:
        return PriorityLevel.P1
    if effect >= thresholds.p3:
        return PriorityLevel.P3
    return PriorityLevel.P5

def compose_measurement(
    gathered: GatheredRef,
    leverage_estimate: LeverageEstimate,
    yieldage_estimate: YieldageEstimate,
    attend_estimate: AttendEstimate,
    expend_estimate: ExpendEstimate,
    reverse_dependent_count: int,
    config: DispatchConfig,
) -> BehaviorMeasured:
    hourly_rate = config.hourly_rate
    horizon_weeks = config.cost_horizon_weeks

    chances = tuple(YieldageChance(yieldage=c.yieldage, probability=c.probability) for c in yieldage_estimate.chances)
    expected = compute_expected_yieldage(list(chances))
    yieldage = GainYieldage(
        direct=YieldageDirect(chances=chances, expected=expected),
        transitive=reverse_dependent_count * expected * config.transitive_multiplier,
    )
    leverage = GainLeverage(direct=leverage_estimate.direct, transitive=leverage_estimate.transitive)
    gain = MeasuredGain(
        leverage=leverage,
        yieldage=yieldage,
        composite=compute_gain_composite(leverage, yieldage, hourly_rate),
    )

    attend = CostAttend(
        upfront=attend_estimate.upfront,
        recurrent=attend_estimate.recurrent,
        composite=compute_amortized(attend_estimate.upfront, attend_estimate.recurrent, horizon_weeks),
    )
    expend = CostExpend(
        upfront=expend_estimate.upfront,
        recurrent=expend_estimate.recurrent,
        composite=compute_amortized(expend_estimate.upfront, expend_estimate.recurrent, horizon_weeks),
    )
    cost = MeasuredCost(
        attend=attend,
        expend=expend,
        composite=compute_cost_composite(attend, expend, hourly_rate),
    )

    effect = gain.composite - cost.composite
    return BehaviorMeasured(
        gathered=gathered,
        gain=gain,
        cost=cost,
        effect=effect,
        priority=assign_priority(effect, config.priority_thresholds),
    )
