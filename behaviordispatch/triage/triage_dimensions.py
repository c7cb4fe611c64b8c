"""
The two dimensions of urgency.

readiness: can work start, given the dependencies?
bandwidth: is there capacity, given the ranking and the max concurrency?
"""
from behaviordispatch.domain.behavior_deptraced import BehaviorDeptraced
from behaviordispatch.domain.behavior_measured import BehaviorMeasured, PRIORITY_ORDER
from behaviordispatch.domain.behavior_triaged import UrgencyLevel, URGENCY_ORDER


def compute_readiness(deptraced: BehaviorDeptraced, delivered_names: set[str]) -> UrgencyLevel:
    """
    now: no direct dependencies, or all direct dependencies delivered.
    later: some transitive-only dependency is not delivered.
    soon: otherwise, blocked by one hop.
    """
    if not deptraced.depends_on_direct:
        return UrgencyLevel.NOW
    if all(dep.behavior.name in delivered_names for dep in deptraced.depends_on_direct):
        return UrgencyLevel.NOW
    direct_identities = {dep.behavior for dep in deptraced.depends_on_direct}
    has_undelivered_transitive = any(
        dep.behavior.name not in delivered_names and dep.behavior not in direct_identities
        for dep in deptraced.depends_on_transitive
    )
    if has_undelivered_transitive:
        return UrgencyLevel.LATER
    return UrgencyLevel.SOON


def rank_measured(measured: list[BehaviorMeasured]) -> list[BehaviorMeasured]:
    """Priority first (p0 before p5), then effect, highest first. Ties keep their order."""
    return sorted(measured, key=lambda m: (PRIORITY_ORDER[m.priority], -m.effect))


def compute_bandwidth(measured: BehaviorMeasured, ranked_measured: list[BehaviorMeasured], max_concurrency: int) -> UrgencyLevel:
    position = next((i for i, m in enumerate(ranked_measured) if m.gathered == measured.gathered), None)
    if position is None:
        return UrgencyLevel.LATER
    if position < max_concurrency:
        return UrgencyLevel.NOW
    if position < 2 * max_concurrency:
        return UrgencyLevel.SOON
    return UrgencyLevel.LATER


def compute_decision(readiness: UrgencyLevel, bandwidth: UrgencyLevel) -> UrgencyLevel:
    """The less urgent of the two."""
    return max(readiness, bandwidth, key=lambda level: URGENCY_ORDER[level])
