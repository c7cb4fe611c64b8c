"""
Render the triage decisions as prioritization.md for humans and prioritization.json for machines.
"""
import json
from typing import Optional
from behaviordispatch.domain.behavior import find_by_ref
from behaviordispatch.domain.behavior_measured import BehaviorMeasured, PriorityLevel
from behaviordispatch.domain.behavior_triaged import BehaviorTriaged, UrgencyLevel
from behaviordispatch.markdown_util.escape_table_cell import escape_table_cell
from behaviordispatch.triage.triage_behaviors import TriageStats

PRIORITY_EMOJI: dict[PriorityLevel, str] = {
    PriorityLevel.P0: "🔴",
    PriorityLevel.P1: "🟠",
    PriorityLevel.P3: "🟡",
    PriorityLevel.P5: "🟢",
}

SECTIONS = [
    (UrgencyLevel.NOW, "## 🚀 now", "behaviors ready to start immediately:"),
    (UrgencyLevel.SOON, "## ⏳ soon", "behaviors blocked by dependencies or capacity:"),
    (UrgencyLevel.LATER, "## 📅 later", "behaviors deferred due to dependencies or capacity:"),
]

def format_dollars_with_sign(value: float, sign: str) -> str:
    """Eg. 6360.4 with sign '+' becomes '+$6,360'."""
    return f"{sign}${abs(value):,.0f}"

def render_behavior_table(triaged: list[BehaviorTriaged], measured: list[BehaviorMeasured]) -> list[str]:
    rows = []
    rows.append("| behavior | repo | priority | gain(+$) | cost(-$) | effect(~$) | readiness | bandwidth |")
    rows.append("|----------|------|----------|----------|----------|------------|-----------|-----------|")
    for t in triaged:
        m: Optional[BehaviorMeasured] = find_by_ref(measured, t.gathered)
        gain = format_dollars_with_sign(m.gain.composite, "+") if m else "n/a"
        cost = format_dollars_with_sign(m.cost.composite, "-") if m else "n/a"
        effect = format_dollars_with_sign(m.effect, "~") if m else "n/a"
        behavior = t.gathered.behavior
        repo = f"{behavior.org}/{behavior.repo}"
        priority = f"{PRIORITY_EMOJI[t.priority]} {t.priority.value}"
        rows.append(f"| {escape_table_cell(behavior.name)} | {escape_table_cell(repo)} | {priority} | {gain} | {cost} | {effect} | {t.dimensions.readiness.value} | {t.dimensions.bandwidth.value} |")
    return rows

def render_prioritization_markdown(triaged: list[BehaviorTriaged], measured: list[BehaviorMeasured], stats: TriageStats) -> str:
    rows = []
    rows.append("# prioritization")
    rows.append("")
    rows.append("## summary")
    rows.append("")
    rows.append(f"- **total behaviors**: {stats.total}")
    rows.append(f"- 🚀 **now** (ready + capacity): {stats.now}")
    rows.append(f"- ⏳ **soon** (blocked or over capacity): {stats.soon}")
    rows.append(f"- 📅 **later** (deferred): {stats.later}")
    rows.append("")

    for decision, heading, description in SECTIONS:
        items = [t for t in triaged if t.decision == decision]
        if not items:
            continue
        rows.append(heading)
        rows.append("")
        rows.append(description)
        rows.append("")
        rows.extend(render_behavior_table(items, measured))
        rows.append("")

    return "\n".join(rows)

def render_prioritization_json(triaged: list[BehaviorTriaged], measured: list[BehaviorMeasured]) -> str:
    items = []
    for t in triaged:
        m: Optional[BehaviorMeasured] = find_by_ref(measured, t.gathered)
        items.append({
            "behavior": t.gathered.behavior.name,
            "repo": f"{t.gathered.behavior.org}/{t.gathered.behavior.repo}",
            "priority": t.priority.value,
            "gain": m.gain.composite if m else 0.0,
            "cost": m.cost.composite if m else 0.0,
            "effect": m.effect if m else 0.0,
            "decision": t.decision.value,
            "readiness": t.dimensions.readiness.value,
            "bandwidth": t.dimensions.bandwidth.value,
        })
    return json.dumps(items, indent=2)
