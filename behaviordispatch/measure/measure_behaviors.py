"""
Measure the gain, cost, effect and priority of gathered behaviors.

For each behavior four estimates are requested concurrently: leverage, yieldage, attend, expend.
If any of them fails, the measurement of that behavior fails.

PROMPT> python -m behaviordispatch.measure.measure_behaviors
"""
from concurrent.futures import ThreadPoolExecutor, wait, FIRST_EXCEPTION, Future
from dataclasses import dataclass, field
import logging
import time
from typing import Optional
from behaviordispatch.domain.behavior import BehaviorGathered, find_by_ref
from behaviordispatch.domain.behavior_deptraced import BehaviorDeptraced
from behaviordispatch.domain.behavior_measured import BehaviorMeasured
from behaviordispatch.domain.dispatch_context import DispatchContext
from behaviordispatch.domain.stage_failure import StageFailure
from behaviordispatch.estimator.estimator import EstimatorCancelledError
from behaviordispatch.measure.compose_measurement import compose_measurement, compute_reverse_dependents
from behaviordispatch.measure.cost_estimates import imagine_attend, imagine_expend
from behaviordispatch.measure.gain_estimates import imagine_leverage, imagine_yieldage

logger = logging.getLogger(__name__)

STAGE_NAME = "measure"

@dataclass
class MeasureResult:
    measured: list[BehaviorMeasured] = field(default_factory=list)
    failures: list[StageFailure] = field(default_factory=list)

def measure_one(gathered: BehaviorGathered, deptraced: BehaviorDeptraced, deptraced_pool: list[BehaviorDeptraced], context: DispatchContext) -> BehaviorMeasured:
    """
    Measure one behavior. The four estimator calls run in parallel.
    The first failure, in the order leverage, yieldage, attend, expend, is raised.
    """
    if deptraced.gathered != gathered.ref:
        raise ValueError(f"deptraced record doesn't belong to {gathered.behavior.slug!r}")
    context.raise_if_cancelled()

    reverse_dependents = compute_reverse_dependents(gathered.behavior, deptraced_pool)
    dependent_names = [d.gathered.behavior.name for d in reverse_dependents]

    start_time = time.perf_counter()
    with ThreadPoolExecutor(max_workers=4, thread_name_prefix="measure") as executor:
        futures: list[Future] = [
            executor.submit(imagine_leverage, gathered, dependent_names, context),
            executor.submit(imagine_yieldage, gathered, context),
            executor.submit(imagine_attend, gathered, context),
            executor.submit(imagine_expend, gathered, context),
        ]
        done, not_done = wait(futures, return_when=FIRST_EXCEPTION)
        for future in not_done:
            future.cancel()
    # Leaving the with-block waits for the calls that are still in flight.
    for future in futures:
        if not future.cancelled() and future.exception() is not None:
            raise future.exception()
    leverage, yieldage, attend, expend = (future.result() for future in futures)
    duration = time.perf_counter() - start_time

    measured = compose_measurement(
        gathered=gathered.ref,
        leverage_estimate=leverage,
        yieldage_estimate=yieldage,
        attend_estimate=attend,
        expend_estimate=expend,
        reverse_dependent_count=len(reverse_dependents),
        config=context.config,
    )
    logger.info(f"Measured {gathered.behavior.name!r} in {duration:.1f} seconds. effect: {measured.effect:.2f}, priority: {measured.priority.value}")
    return measured

def measure_all(gathered_basket: list[BehaviorGathered], deptraced_basket: list[BehaviorDeptraced], context: DispatchContext) -> MeasureResult:
    """
    Measure every gathered behavior that has a matching deptraced record.

    Up to config.pipeline.measure_workers behaviors are measured at the same time.
    The result is sorted by effect, highest first. Ties keep the basket order,
    regardless of the order in which the measurements completed.
    """
    if not isinstance(gathered_basket, list):
        raise ValueError(f"gathered_basket must be a list, got: {gathered_basket!r}")
    if not isinstance(deptraced_basket, list):
        raise ValueError(f"deptraced_basket must be a list, got: {deptraced_basket!r}")

    pairs: list[tuple[BehaviorGathered, BehaviorDeptraced]] = []
    for gathered in gathered_basket:
        deptraced: Optional[BehaviorDeptraced] = find_by_ref(deptraced_basket, gathered.ref)
        if deptraced is None:
            logger.warning(f"No deptraced record for {gathered.behavior.name!r} with content hash {gathered.content_hash[:12]!r}, skipping.")
            continue
        pairs.append((gathered, deptraced))

    stop_on_failure = context.config.pipeline.stop_on_failure
    workers = context.config.pipeline.measure_workers
    slots: list[Optional[BehaviorMeasured]] = [None] * len(pairs)
    result = MeasureResult()

    def handle_failure(gathered: BehaviorGathered, e: Exception) -> None:
        if isinstance(e, EstimatorCancelledError) or stop_on_failure:
            raise e
        logger.error(f"Failed to measure {gathered.behavior.name!r}: {e}")
        result.failures.append(StageFailure.from_exception(gathered.ref, STAGE_NAME, e))

    if workers <= 1:
        for index, (gathered, deptraced) in enumerate(pairs):
            context.raise_if_cancelled()
            try:
                slots[index] = measure_one(gathered, deptraced, deptraced_basket, context)
            except Exception as e:
                handle_failure(gathered, e)
    else:
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="measure-all") as executor:
            futures = [
                executor.submit(measure_one, gathered, deptraced, deptraced_basket, context)
                for gathered, deptraced in pairs
            ]
            try:
                for index, future in enumerate(futures):
                    try:
                        slots[index] = future.result()
                    except Exception as e:
                        handle_failure(pairs[index][0], e)
            except Exception:
                for future in futures:
                    future.cancel()
                raise

    measured = [item for item in slots if item is not None]
    result.measured = sorted(measured, key=lambda m: -m.effect)
    logger.info(f"Measured {len(result.measured)} of {len(gathered_basket)} behaviors. Failures: {len(result.failures)}")
    return result

if __name__ == "__main__":
    from pathlib import Path
    import sys
    from behaviordispatch.deptrace.deptrace_behaviors import deptrace_all
    from behaviordispatch.estimator.estimator import LLMEstimator
    from behaviordispatch.gather.gather_local_behaviors import gather_local_behaviors
    from behaviordispatch.llm_factory import get_llm

    logging.basicConfig(level=logging.INFO)
    repo_dir = Path(sys.argv[1] if len(sys.argv) > 1 else ".").resolve()
    basket = gather_local_behaviors(repo_dir, org="local", repo=repo_dir.name)
    context = DispatchContext(estimator=LLMEstimator.from_llm(get_llm()))
    deptraced = deptrace_all(basket, context).deptraced
    for item in measure_all(basket, deptraced, context).measured:
        print(f"{item.gathered.behavior.name}: effect={item.effect:.2f} priority={item.priority.value}")
