"""
Ask the estimator for the cost of a behavior: attend (time spent) and expend (money spent).
"""
import logging
from pydantic import BaseModel, ConfigDict, Field
from behaviordispatch.domain.behavior import BehaviorGathered
from behaviordispatch.domain.dispatch_context import DispatchContext
from behaviordispatch.gather.gathered_file_content import format_behavior_content
from behaviordispatch.measure.briefs import COST_BRIEF

logger = logging.getLogger(__name__)

class AttendEstimate(BaseModel):
    model_config = ConfigDict(strict=True)
    upfront: float = Field(description="One-time time cost in minutes to complete this behavior.")
    recurrent: float = Field(description="Ongoing time cost in minutes per week after completion.")
    rationale: str = Field(description="Explanation of how the time cost was estimated.")

class ExpendEstimate(BaseModel):
    model_config = ConfigDict(strict=True)
    upfront: float = Field(description="One-time money cost in dollars to complete this behavior.")
    recurrent: float = Field(description="Ongoing money cost in dollars per week after completion.")
    rationale: str = Field(description="Explanation of how the money cost was estimated.")

def build_attend_prompt(gathered: BehaviorGathered, horizon_weeks: float) -> str:
    return f"""# attend estimation task: {gathered.behavior.name}

estimate the time that people must spend (attend) to deliver and to keep running this behavior.

## behavior being analyzed
name: {gathered.behavior.name}
status: {gathered.status.value}

{format_behavior_content(gathered, include_blueprint=True)}

## cost horizon
upfront time is amortized over {horizon_weeks:g} weeks.

## instructions
1. estimate the one-time effort to build and ship the behavior, in minutes
2. estimate the ongoing effort to operate and maintain it, in minutes per week"""

def build_expend_prompt(gathered: BehaviorGathered, horizon_weeks: float) -> str:
    return f"""# expend estimation task: {gathered.behavior.name}

estimate the money that must be spent (expend) to deliver and to keep running this behavior.
do not include the cost of people's time, only direct spend such as infrastructure, licenses, services.

## behavior being analyzed
name: {gathered.behavior.name}
status: {gathered.status.value}

{format_behavior_content(gathered, include_blueprint=True)}

## cost horizon
upfront spend is amortized over {horizon_weeks:g} weeks.

## instructions
1. estimate the one-time spend, in dollars
2. estimate the ongoing spend, in dollars per week"""

def imagine_attend(gathered: BehaviorGathered, context: DispatchContext) -> AttendEstimate:
    prompt = build_attend_prompt(gathered, context.config.cost_horizon_weeks)
    estimate = context.estimator.imagine(
        prompt,
        AttendEstimate,
        briefs=[COST_BRIEF],
        cancel_event=context.cancel_event,
    )
    logger.debug(f"Attend of {gathered.behavior.name!r}: upfront={estimate.upfront}, recurrent={estimate.recurrent}")
    return estimate

def imagine_expend(gathered: BehaviorGathered, context: DispatchContext) -> ExpendEstimate:
    prompt = build_expend_prompt(gathered, context.config.cost_horizon_weeks)
    estimate = context.estimator.imagine(
        prompt,
        ExpendEstimate,
        briefs=[COST_BRIEF],
        cancel_event=context.cancel_event,
    )
    logger.debug(f"Expend of {gathered.behavior.name!r}: upfront={estimate.upfront}, recurrent={estimate.recurrent}")
    return estimate
