"""
Ask the estimator for the gain of a behavior: leverage (time saved) and yieldage (money gained).
"""
import logging
from pydantic import BaseModel, ConfigDict, Field
from behaviordispatch.domain.behavior import BehaviorGathered
from behaviordispatch.domain.dispatch_config import LeverageWeights
from behaviordispatch.domain.dispatch_context import DispatchContext
from behaviordispatch.gather.gathered_file_content import format_behavior_content
from behaviordispatch.measure.briefs import GAIN_BRIEF, LEVERAGE_BRIEF, YIELDAGE_BRIEF

logger = logging.getLogger(__name__)

class LeverageEstimate(BaseModel):
    model_config = ConfigDict(strict=True)
    direct: float = Field(description="Minutes per week saved directly by this behavior.")
    transitive: float = Field(description="Additional minutes per week saved by unblocking dependent behaviors.")
    rationale: str = Field(description="Explanation of how the leverage was estimated.")

class YieldageChanceEstimate(BaseModel):
    model_config = ConfigDict(strict=True)
    yieldage: float = Field(description="Dollars per week gained in this outcome.")
    probability: float = Field(ge=0.0, le=1.0, description="Probability of this outcome, between 0 and 1.")

class YieldageEstimate(BaseModel):
    model_config = ConfigDict(strict=True)
    chances: list[YieldageChanceEstimate] = Field(description="Possible outcomes with their probabilities.")
    rationale: str = Field(description="Explanation of how the yieldage was estimated.")

def format_dependents(dependent_names: list[str]) -> str:
    if not dependent_names:
        return "none"
    return "\n".join(f"- {name}" for name in dependent_names)

def build_leverage_prompt(gathered: BehaviorGathered, dependent_names: list[str], weights: LeverageWeights) -> str:
    return f"""# leverage estimation task: {gathered.behavior.name}

estimate the time savings (leverage) for completing this behavior.

## behavior being analyzed
name: {gathered.behavior.name}
status: {gathered.status.value}

{format_behavior_content(gathered)}

## weights for leverage calculation
- author weight: {weights.author} (time saved to create or add features)
- support weight: {weights.support} (time saved to operate or fix issues)

## dependent behaviors (unblocked by this behavior)
{format_dependents(dependent_names)}

## instructions
1. analyze the behavior content to estimate time savings
2. consider both author leverage and support leverage, with the weights above
3. estimate transitive leverage from unblocking the dependent behaviors
4. express all values in minutes per week"""

def build_yieldage_prompt(gathered: BehaviorGathered, base_yieldage: float) -> str:
    return f"""# yieldage estimation task: {gathered.behavior.name}

estimate the money gained or protected (yieldage) by completing this behavior.

## behavior being analyzed
name: {gathered.behavior.name}
status: {gathered.status.value}

{format_behavior_content(gathered)}

## reference
a typical behavior yields around ${base_yieldage:,.0f} per week.

## instructions
1. list the possible outcomes, each with a yieldage in dollars per week
2. give each outcome a probability between 0 and 1
3. include the outcome where the behavior yields nothing, when it is likely"""

def imagine_leverage(gathered: BehaviorGathered, dependent_names: list[str], context: DispatchContext) -> LeverageEstimate:
    prompt = build_leverage_prompt(gathered, dependent_names, context.config.criteria.leverage_weights)
    estimate = context.estimator.imagine(
        prompt,
        LeverageEstimate,
        briefs=[GAIN_BRIEF, LEVERAGE_BRIEF],
        cancel_event=context.cancel_event,
    )
    logger.debug(f"Leverage of {gathered.behavior.name!r}: direct={estimate.direct}, transitive={estimate.transitive}")
    return estimate

def imagine_yieldage(gathered: BehaviorGathered, context: DispatchContext) -> YieldageEstimate:
    prompt = build_yieldage_prompt(gathered, context.config.base_yieldage)
    estimate = context.estimator.imagine(
        prompt,
        YieldageEstimate,
        briefs=[GAIN_BRIEF, YIELDAGE_BRIEF],
        cancel_event=context.cancel_event,
    )
    logger.debug(f"Yieldage of {gathered.behavior.name!r}: {len(estimate.chances)} chances")
    return estimate
