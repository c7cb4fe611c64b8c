"""
Infer the direct dependencies of a behavior, by asking the estimator which of the other
behaviors in the basket it depends on, and resolving the answers against the basket.

PROMPT> python -m behaviordispatch.deptrace.resolve_dependency_refs
"""
import logging
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field
from behaviordispatch.domain.behavior import BehaviorGathered, GatheredRef
from behaviordispatch.domain.dispatch_context import DispatchContext
from behaviordispatch.gather.gathered_file_content import format_behavior_content

logger = logging.getLogger(__name__)

class DependencyRef(BaseModel):
    model_config = ConfigDict(strict=True)
    ref: str = Field(
        description="Name of the behavior that is depended upon, or 'repo/behavior-name'."
    )
    reason: str = Field(
        description="Why this dependency was inferred."
    )

class DependencyInference(BaseModel):
    model_config = ConfigDict(strict=True)
    dependencies: list[DependencyRef] = Field(
        description="The behaviors that must be delivered before this behavior. Empty when there are none."
    )

def build_dependency_prompt(gathered: BehaviorGathered, candidates: list[BehaviorGathered]) -> str:
    behavior = gathered.behavior
    content = format_behavior_content(gathered, include_blueprint=True)
    if candidates:
        candidate_lines = "\n".join(f"- {c.behavior.name} (repo: {c.behavior.repo})" for c in candidates)
    else:
        candidate_lines = "none"
    return f"""# dependency inference task: {behavior.name}

analyze the following behavior and identify which of the available behaviors it depends on.

## behavior being analyzed
name: {behavior.name}
org: {behavior.org}
repo: {behavior.repo}

{content}

## available behaviors in basket
{candidate_lines}

## instructions
1. read the behavior content
2. identify references to other behaviors, explicit or implicit, such as
   "depends on X", "requires X", "blocked by X", "after X is complete"
3. only reference behaviors from the list of available behaviors
4. use the behavior name as the ref
5. if there are no dependencies, return an empty list"""

def resolve_dep_ref(ref: str, candidates: list[BehaviorGathered]) -> Optional[BehaviorGathered]:
    """
    Match a reference against the candidates, in this order:
    1. exact name
    2. substring in either direction, eg. "feature-x" matches "v2025_01_01.feature-x"
    3. "repo-prefix/name", the repo contains the prefix and the name is exact
    """
    ref = ref.strip()
    if not ref:
        return None

    for candidate in candidates:
        if candidate.behavior.name == ref:
            return candidate

    for candidate in candidates:
        name = candidate.behavior.name
        if ref in name or name in ref:
            return candidate

    if "/" in ref:
        repo_prefix, _, name = ref.partition("/")
        for candidate in candidates:
            if repo_prefix in candidate.behavior.repo and candidate.behavior.name == name:
                return candidate

    return None

def resolve_direct(gathered: BehaviorGathered, pool: list[BehaviorGathered], context: DispatchContext) -> tuple[GatheredRef, ...]:
    """
    Ask the estimator for the direct dependencies of a behavior.

    The behavior itself is never a candidate. Unresolvable refs are logged and dropped.
    The result keeps the estimator's order, deduplicated by behavior identity.
    Estimator failures propagate.
    """
    candidates = [item for item in pool if item.behavior != gathered.behavior]
    prompt = build_dependency_prompt(gathered, candidates)
    inference = context.estimator.imagine(
        prompt,
        DependencyInference,
        cancel_event=context.cancel_event,
    )

    resolved: list[GatheredRef] = []
    seen = set()
    for dep in inference.dependencies:
        match = resolve_dep_ref(dep.ref, candidates)
        if match is None:
            logger.warning(f"Unresolved dependency reference. behavior: {gathered.behavior.name!r}, ref: {dep.ref!r}, reason: {dep.reason!r}")
            continue
        if match.behavior in seen:
            continue
        seen.add(match.behavior)
        resolved.append(match.ref)
    logger.debug(f"{gathered.behavior.name!r} has {len(resolved)} direct dependencies.")
    return tuple(resolved)

if __name__ == "__main__":
    from behaviordispatch.domain.behavior import Behavior, BehaviorGatheredStatus
    candidates = [
        BehaviorGathered(behavior=Behavior("acme", "api", "v2025_01_01.auth-tokens"), content_hash="a", status=BehaviorGatheredStatus.WISHED),
        BehaviorGathered(behavior=Behavior("acme", "web", "login-page"), content_hash="b", status=BehaviorGatheredStatus.WISHED),
    ]
    for ref in ["login-page", "auth-tokens", "api/v2025_01_01.auth-tokens", "unknown"]:
        match = resolve_dep_ref(ref, candidates)
        print(f"{ref!r} -> {match.behavior.slug if match else None}")
