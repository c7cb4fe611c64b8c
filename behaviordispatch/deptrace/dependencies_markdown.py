"""
Render the dependency graph as markdown, for human review.

The output contains no timestamps, so the same graph always renders to the same bytes.
"""
from behaviordispatch.domain.behavior import Behavior
from behaviordispatch.domain.behavior_deptraced import BehaviorDeptraced


def count_dependents(behavior: Behavior, deptraced: list[BehaviorDeptraced]) -> int:
    """Number of behaviors that depend directly on this behavior."""
    return sum(1 for d in deptraced if any(dep.behavior == behavior for dep in d.depends_on_direct))


def build_reverse_dependency_index(deptraced: list[BehaviorDeptraced]) -> dict[Behavior, list[Behavior]]:
    index: dict[Behavior, list[Behavior]] = {}
    for d in deptraced:
        for dep in d.depends_on_direct:
            index.setdefault(dep.behavior, []).append(d.gathered.behavior)
    return index


def render_dependencies_markdown(deptraced: list[BehaviorDeptraced]) -> str:
    rows = []
    rows.append("# behavior dependencies")
    rows.append("")
    rows.append("this document shows the dependency graph for all gathered behaviors.")
    rows.append("")

    with_deps = sum(1 for d in deptraced if d.depends_on_direct)
    total_deps = sum(len(d.depends_on_direct) for d in deptraced)
    rows.append("## summary")
    rows.append("")
    rows.append(f"- total behaviors: {len(deptraced)}")
    rows.append(f"- behaviors with dependencies: {with_deps}")
    rows.append(f"- total direct dependencies: {total_deps}")
    rows.append("")

    rows.append("## dependency tree")
    rows.append("")

    # Most depended-on first. sorted() is stable, ties keep basket order.
    dependent_counts = {d.gathered.behavior: count_dependents(d.gathered.behavior, deptraced) for d in deptraced}
    sorted_deptraced = sorted(deptraced, key=lambda d: -dependent_counts[d.gathered.behavior])

    for d in sorted_deptraced:
        direct_count = len(d.depends_on_direct)
        dependent_count = dependent_counts[d.gathered.behavior]
        rows.append(f"### {d.gathered.behavior.name}")
        rows.append("")
        if dependent_count > 0:
            rows.append(f"- 🔗 **{dependent_count}** behaviors depend on this")
        if direct_count == 0:
            rows.append("- ✅ no dependencies (can start immediately)")
        else:
            rows.append(f"- ⏳ **direct dependencies** ({direct_count}):")
            for dep in d.depends_on_direct:
                rows.append(f"  - {dep.behavior.name}")

        direct_identities = {dep.behavior for dep in d.depends_on_direct}
        transitive_only = [t for t in d.depends_on_transitive if t.behavior not in direct_identities]
        if transitive_only:
            rows.append(f"- 🔄 **transitive dependencies** (+{len(transitive_only)}):")
            for dep in transitive_only:
                rows.append(f"  - {dep.behavior.name}")
        rows.append("")

    rows.append("## reverse dependencies")
    rows.append("")
    rows.append("behaviors that other behaviors depend on:")
    rows.append("")

    reverse_index = build_reverse_dependency_index(deptraced)
    if not reverse_index:
        rows.append("*no dependencies exist*")
    for behavior, dependents in sorted(reverse_index.items(), key=lambda item: -len(item[1])):
        rows.append(f"- **{behavior.name}** is depended on by:")
        for dependent in dependents:
            rows.append(f"  - {dependent.name}")

    rows.append("")
    return "\n".join(rows)
