from behaviordispatch.domain.behavior_measured import PRIORITY_ORDER
from behaviordispatch.domain.behavior_workstream import BehaviorWorkstream


def rank_workstreams(workstreams: list[BehaviorWorkstream]) -> list[BehaviorWorkstream]:
    """
    Best priority first. Within the same priority, more deliverables first.
    Ties keep their order. Assigns the rank labels r1..rN.
    """
    ordered = sorted(workstreams, key=lambda ws: (PRIORITY_ORDER[ws.priority], -len(ws.deliverables)))
    return [ws.with_rank(f"r{index + 1}") for index, ws in enumerate(ordered)]
