"""
Group behaviors into workstreams, by the connected components of the dependency graph.

Behaviors that share a direct dependency edge, in either direction, belong to the same
workstream. This closes over chains and diamonds. Independent behaviors form their own workstream.
"""
import logging
from typing import Optional
from behaviordispatch.domain.behavior import Behavior, find_by_ref
from behaviordispatch.domain.behavior_deptraced import BehaviorDeptraced
from behaviordispatch.domain.behavior_measured import BehaviorMeasured, PriorityLevel, PRIORITY_ORDER
from behaviordispatch.domain.behavior_triaged import BehaviorTriaged
from behaviordispatch.domain.behavior_workstream import BehaviorWorkstream, WorkstreamDeliverable

logger = logging.getLogger(__name__)

# Undirected graph. The neighbors are kept in insertion order, so the traversal is deterministic.
Adjacency = dict[Behavior, dict[Behavior, None]]

def build_adjacency(deptraced_basket: list[BehaviorDeptraced]) -> Adjacency:
    adjacency: Adjacency = {}
    for deptraced in deptraced_basket:
        node = deptraced.gathered.behavior
        adjacency.setdefault(node, {})
        for dep in deptraced.depends_on_direct:
            adjacency.setdefault(dep.behavior, {})
            adjacency[node][dep.behavior] = None
            adjacency[dep.behavior][node] = None
    return adjacency

def find_connected_components(adjacency: Adjacency) -> list[list[Behavior]]:
    """Depth first traversal with an explicit stack and visited set."""
    visited: set[Behavior] = set()
    components: list[list[Behavior]] = []
    for start in adjacency:
        if start in visited:
            continue
        component: list[Behavior] = []
        stack = [start]
        visited.add(start)
        while stack:
            node = stack.pop()
            component.append(node)
            # Reversed, so the neighbors are visited in insertion order.
            for neighbor in reversed(list(adjacency[node])):
                if neighbor not in visited:
                    visited.add(neighbor)
                    stack.append(neighbor)
        components.append(component)
    return components

def generate_workstream_name(names: list[str]) -> str:
    """
    One member: its name.
    Several members that share leading dot-delimited segments: "prefix.* (N behaviors)".
    Otherwise: "workstream (N behaviors)".
    """
    if len(names) == 1:
        return names[0]
    segments = [name.split(".") for name in names]
    shared: list[str] = []
    for parts in zip(*segments):
        if any(part != parts[0] for part in parts):
            break
        shared.append(parts[0])
    # The prefix must leave at least one segment of every name.
    max_prefix_length = min(len(s) for s in segments) - 1
    shared = shared[:max_prefix_length]
    if shared:
        return f"{'.'.join(shared)}.* ({len(names)} behaviors)"
    return f"workstream ({len(names)} behaviors)"

def best_priority(priorities: list[PriorityLevel]) -> PriorityLevel:
    return min(priorities, key=lambda p: PRIORITY_ORDER[p])

def group_workstreams(triaged_basket: list[BehaviorTriaged], deptraced_basket: list[BehaviorDeptraced], measured_basket: Optional[list[BehaviorMeasured]] = None) -> list[BehaviorWorkstream]:
    """
    One workstream per component with at least one triaged member.
    The deliverables follow the order of the triaged basket.
    The effect of a deliverable comes from the measured basket, 0.0 when it's not there.
    The workstreams are not ranked yet.
    """
    measured_basket = measured_basket or []
    triaged_position = {t.gathered.behavior: index for index, t in enumerate(triaged_basket)}
    components = find_connected_components(build_adjacency(deptraced_basket))
    grouped = {behavior for component in components for behavior in component}
    for triaged in triaged_basket:
        if triaged.gathered.behavior not in grouped:
            logger.warning(f"No deptraced record for triaged behavior {triaged.gathered.behavior.name!r}, skipping it.")

    workstreams: list[BehaviorWorkstream] = []
    for index, component in enumerate(components):
        members = sorted((b for b in component if b in triaged_position), key=lambda b: triaged_position[b])
        if not members:
            logger.debug(f"Component {index + 1} has no triaged members, skipping.")
            continue

        deliverables = []
        for behavior in members:
            triaged = triaged_basket[triaged_position[behavior]]
            measured: Optional[BehaviorMeasured] = find_by_ref(measured_basket, triaged.gathered)
            deliverables.append(WorkstreamDeliverable(
                gathered=triaged.gathered,
                priority=triaged.priority,
                decision=triaged.decision,
                effect=measured.effect if measured else 0.0,
            ))

        workstreams.append(BehaviorWorkstream(
            slug=f"ws-{index + 1}",
            name=generate_workstream_name([b.name for b in members]),
            priority=best_priority([d.priority for d in deliverables]),
            deliverables=tuple(deliverables),
        ))

    logger.info(f"Grouped {len(triaged_basket)} triaged behaviors into {len(workstreams)} workstreams.")
    return workstreams
