"""
Render the dispatch results and write them to the output dir.

Every file is written with write_if_changed, so a previous version with different
content is kept in the ".archive" dir.
"""
import logging
from pathlib import Path
from typing import Any
from behaviordispatch.archive.output_archiver import ArchiveResult, write_if_changed
from behaviordispatch.coordinate.coordination_markdown import render_coordination_json, render_coordination_markdown
from behaviordispatch.deptrace.dependencies_markdown import render_dependencies_markdown
from behaviordispatch.domain.behavior_deptraced import BehaviorDeptraced
from behaviordispatch.domain.behavior_measured import BehaviorMeasured
from behaviordispatch.domain.behavior_triaged import BehaviorTriaged
from behaviordispatch.domain.behavior_workstream import BehaviorWorkstream
from behaviordispatch.domain.dispatch_config import DispatchConfig
from behaviordispatch.plan.filenames import OutputFilenameEnum
from behaviordispatch.triage.prioritization_markdown import render_prioritization_json, render_prioritization_markdown
from behaviordispatch.triage.triage_behaviors import TriageStats

logger = logging.getLogger(__name__)

def resolve_output_dir(repo_dir: Path, config: DispatchConfig) -> Path:
    """A relative output_dir is relative to the repository."""
    output_dir = Path(config.output_dir)
    if output_dir.is_absolute():
        return output_dir
    return repo_dir / output_dir

def write_outputs(output_dir: Path, contents: dict[OutputFilenameEnum, str]) -> dict[str, ArchiveResult]:
    results = {}
    for filename, content in contents.items():
        result = write_if_changed(output_dir / filename.value, content)
        results[filename.value] = result
        logger.debug(f"Wrote {filename.value}, archived: {result.archived}")
    return results

def write_prioritization_outputs(
    output_dir: Path,
    deptraced: list[BehaviorDeptraced],
    measured: list[BehaviorMeasured],
    triaged: list[BehaviorTriaged],
) -> dict[str, ArchiveResult]:
    stats = TriageStats.from_triaged(triaged)
    contents = {
        OutputFilenameEnum.DEPENDENCIES_MD: render_dependencies_markdown(deptraced),
        OutputFilenameEnum.PRIORITIZATION_MD: render_prioritization_markdown(triaged, measured, stats),
        OutputFilenameEnum.PRIORITIZATION_JSON: render_prioritization_json(triaged, measured),
    }
    return write_outputs(output_dir, contents)

def write_coordination_outputs(output_dir: Path, workstreams: list[BehaviorWorkstream]) -> dict[str, ArchiveResult]:
    contents = {
        OutputFilenameEnum.COORDINATION_MD: render_coordination_markdown(workstreams),
        OutputFilenameEnum.COORDINATION_JSON: render_coordination_json(workstreams),
    }
    return write_outputs(output_dir, contents)

def archive_results_to_dict(output_dir: Path, results: dict[str, ArchiveResult]) -> dict[str, Any]:
    return {
        "output_dir": str(output_dir),
        "files": {
            name: {
                "archived": result.archived,
                "archive_path": str(result.archive_path) if result.archive_path else None,
            }
            for name, result in results.items()
        },
    }
