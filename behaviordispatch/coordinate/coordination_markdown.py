"""
Render the ranked workstreams as coordination.md for humans and coordination.json for machines.
"""
from dataclasses import dataclass
import json
from behaviordispatch.domain.behavior_measured import PriorityLevel
from behaviordispatch.domain.behavior_triaged import UrgencyLevel
from behaviordispatch.domain.behavior_workstream import BehaviorWorkstream, WorkstreamDeliverable

PRIORITY_EMOJI: dict[PriorityLevel, str] = {
    PriorityLevel.P0: "🔴",
    PriorityLevel.P1: "🟠",
    PriorityLevel.P3: "🟡",
    PriorityLevel.P5: "🟢",
}

PRIORITY_LABEL: dict[PriorityLevel, str] = {
    PriorityLevel.P0: "critical",
    PriorityLevel.P1: "important",
    PriorityLevel.P3: "desired",
    PriorityLevel.P5: "nice-to-have",
}

@dataclass(frozen=True)
class Bottleneck:
    workstream: BehaviorWorkstream
    blocked: WorkstreamDeliverable
    blocker: WorkstreamDeliverable

    def to_markdown(self) -> str:
        return f"- rank {self.workstream.rank} blocked: {self.blocked.gathered.behavior.name} depends on {self.blocker.gathered.behavior.name}"

def decision_tag(decision: UrgencyLevel, step: int) -> str:
    if decision == UrgencyLevel.NOW or step <= 1:
        return decision.value
    return f"blocked by #{step - 1}"

def find_bottlenecks(workstreams: list[BehaviorWorkstream]) -> list[Bottleneck]:
    """Deliverables that aren't 'now', paired with the first 'now' deliverable of their workstream."""
    bottlenecks = []
    for ws in workstreams:
        blocker = next((d for d in ws.deliverables if d.decision == UrgencyLevel.NOW), None)
        if blocker is None:
            continue
        for d in ws.deliverables:
            if d.decision != UrgencyLevel.NOW:
                bottlenecks.append(Bottleneck(workstream=ws, blocked=d, blocker=blocker))
    return bottlenecks

def render_coordination_markdown(workstreams: list[BehaviorWorkstream]) -> str:
    rows = []
    rows.append("# coordination")
    rows.append("")

    total_deliverables = sum(len(ws.deliverables) for ws in workstreams)
    rows.append("## summary")
    rows.append("")
    rows.append(f"- **total workstreams**: {len(workstreams)}")
    rows.append(f"- **total deliverables**: {total_deliverables}")
    rows.append("")

    rows.append("### priority distribution")
    rows.append("")
    for priority in PriorityLevel:
        count = sum(1 for ws in workstreams if ws.priority == priority)
        rows.append(f"- {PRIORITY_EMOJI[priority]} {priority.value} ({PRIORITY_LABEL[priority]}): {count}")
    rows.append("")

    for ws in workstreams:
        rows.append(f"## rank {ws.rank}: {ws.name}")
        rows.append(f"priority: {ws.priority.value} ({PRIORITY_LABEL[ws.priority]})")
        rows.append("")
        for step, d in enumerate(ws.deliverables, start=1):
            behavior = d.gathered.behavior
            rows.append(f"{step}. [{decision_tag(d.decision, step)}] {behavior.name} ({behavior.org}/{behavior.repo})")
        rows.append("")

    rows.append("## bottlenecks")
    rows.append("")
    bottlenecks = find_bottlenecks(workstreams)
    if not bottlenecks:
        rows.append("no bottlenecks detected - all behaviors are unblocked.")
    for bottleneck in bottlenecks:
        rows.append(bottleneck.to_markdown())
    rows.append("")

    rows.append("## review order")
    rows.append("")
    rows.append("if multiple workstreams blocked on human review, review in rank order:")
    for index, ws in enumerate(workstreams, start=1):
        rows.append(f"{index}. rank {ws.rank} ({ws.priority.value} = {PRIORITY_LABEL[ws.priority]})")
    rows.append("")

    return "\n".join(rows)

def render_coordination_json(workstreams: list[BehaviorWorkstream]) -> str:
    items = []
    for ws in workstreams:
        items.append({
            "slug": ws.slug,
            "name": ws.name,
            "rank": ws.rank,
            "priority": ws.priority.value,
            "deliverables": [
                {
                    "behavior": d.gathered.behavior.name,
                    "repo": f"{d.gathered.behavior.org}/{d.gathered.behavior.repo}",
                    "priority": d.priority.value,
                    "decision": d.decision.value,
                    "effect": d.effect,
                }
                for d in ws.deliverables
            ],
        })
    return json.dumps(items, indent=2)
