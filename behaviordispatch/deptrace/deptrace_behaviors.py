"""
Resolve the dependency graph of a basket of gathered behaviors.

PROMPT> python -m behaviordispatch.deptrace.deptrace_behaviors
"""
from dataclasses import dataclass, field
import logging
from typing import Optional
from behaviordispatch.deptrace.resolve_transitive_dependencies import DirectCache, resolve_transitive
from behaviordispatch.domain.behavior import BehaviorGathered
from behaviordispatch.domain.behavior_deptraced import BehaviorDeptraced
from behaviordispatch.domain.dispatch_context import DispatchContext
from behaviordispatch.domain.stage_failure import StageFailure
from behaviordispatch.estimator.estimator import EstimatorCancelledError

logger = logging.getLogger(__name__)

STAGE_NAME = "deptrace"

@dataclass
class DeptraceResult:
    deptraced: list[BehaviorDeptraced] = field(default_factory=list)
    failures: list[StageFailure] = field(default_factory=list)

def deptrace_one(gathered: BehaviorGathered, pool: list[BehaviorGathered], context: DispatchContext, direct_cache: Optional[DirectCache] = None) -> BehaviorDeptraced:
    """
    Direct and transitive dependencies of one behavior. Estimator failures propagate.
    """
    resolution = resolve_transitive(gathered, pool, context, direct_cache=direct_cache)
    if resolution.circular:
        logger.warning(f"Circular dependency detected. behavior: {gathered.behavior.name!r}")
    return BehaviorDeptraced(
        gathered=gathered.ref,
        depends_on_direct=resolution.direct,
        depends_on_transitive=resolution.transitive,
    )

def deptrace_all(basket: list[BehaviorGathered], context: DispatchContext) -> DeptraceResult:
    """
    Deptrace every behavior in the basket, sequentially and in basket order.

    A behavior whose estimator call fails is recorded as a failure, and the rest of the
    basket continues, unless the config says to stop on the first failure.
    Cancellation always stops the run.
    """
    if not isinstance(basket, list):
        raise ValueError(f"basket must be a list, got: {basket!r}")
    stop_on_failure = context.config.pipeline.stop_on_failure
    direct_cache: DirectCache = {}
    result = DeptraceResult()
    for gathered in basket:
        context.raise_if_cancelled()
        try:
            deptraced = deptrace_one(gathered, basket, context, direct_cache=direct_cache)
        except EstimatorCancelledError:
            raise
        except Exception as e:
            if stop_on_failure:
                raise
            logger.error(f"Failed to deptrace {gathered.behavior.name!r}: {e}")
            result.failures.append(StageFailure.from_exception(gathered.ref, STAGE_NAME, e))
            continue
        result.deptraced.append(deptraced)

    logger.info(f"Deptraced {len(result.deptraced)} of {len(basket)} behaviors. Failures: {len(result.failures)}")
    return result

if __name__ == "__main__":
    from pathlib import Path
    import sys
    from behaviordispatch.estimator.estimator import LLMEstimator
    from behaviordispatch.gather.gather_local_behaviors import gather_local_behaviors
    from behaviordispatch.llm_factory import get_llm

    logging.basicConfig(level=logging.INFO)
    repo_dir = Path(sys.argv[1] if len(sys.argv) > 1 else ".").resolve()
    basket = gather_local_behaviors(repo_dir, org="local", repo=repo_dir.name)
    context = DispatchContext(estimator=LLMEstimator.from_llm(get_llm()))
    result = deptrace_all(basket, context)
    for item in result.deptraced:
        print(f"{item.gathered.behavior.name}: {len(item.depends_on_direct)} direct dependencies")
