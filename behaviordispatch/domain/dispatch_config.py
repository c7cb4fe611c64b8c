"""
Settings for a dispatch run, loaded from dispatch_config.json.

Every field has a default, so an empty json object is a valid config.

PROMPT> python -m behaviordispatch.domain.dispatch_config
"""
import json
import logging
from pathlib import Path
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, ValidationError

logger = logging.getLogger(__name__)


class DispatchConfigError(Exception):
    """Raised when the dispatch configuration cannot be loaded."""
    pass


class FrozenModel(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class LeverageWeights(FrozenModel):
    author: float = Field(default=0.5, description="Weight of time saved when creating or adding features.")
    support: float = Field(default=0.5, description="Weight of time saved when operating or fixing issues.")


class CriteriaConfig(FrozenModel):
    leverage_weights: LeverageWeights = Field(default_factory=LeverageWeights)


class EquateCash(FrozenModel):
    dollars: float = Field(default=150.0, gt=0)


class EquateTime(FrozenModel):
    hours: float = Field(default=1.0, gt=0)


class EquateConfig(FrozenModel):
    cash: EquateCash = Field(default_factory=EquateCash)
    time: EquateTime = Field(default_factory=EquateTime)


class ConvertConfig(FrozenModel):
    equate: EquateConfig = Field(default_factory=EquateConfig)


class CostHorizon(FrozenModel):
    weeks: float = Field(default=24.0, gt=0, description="Upfront costs are amortized over this many weeks.")


class CostConfig(FrozenModel):
    horizon: CostHorizon = Field(default_factory=CostHorizon)


class ConstraintsConfig(FrozenModel):
    max_concurrency: int = Field(default=3, ge=1, description="How many behaviors can be worked on in parallel.")


class PriorityThresholds(FrozenModel):
    p0: float = 10000.0
    p1: float = 2000.0
    p3: float = 500.0


class PipelineSettings(FrozenModel):
    measure_workers: int = Field(default=1, ge=1, description="Number of behaviors measured in parallel.")
    stop_on_failure: bool = Field(default=False, description="Abort the whole basket on the first failed behavior.")


class DispatchConfig(FrozenModel):
    output_dir: str = ".dispatch"
    criteria: CriteriaConfig = Field(default_factory=CriteriaConfig)
    convert: ConvertConfig = Field(default_factory=ConvertConfig)
    cost: CostConfig = Field(default_factory=CostConfig)
    constraints: ConstraintsConfig = Field(default_factory=ConstraintsConfig)
    priority_thresholds: PriorityThresholds = Field(default_factory=PriorityThresholds)
    transitive_multiplier: float = Field(default=0.3, ge=0)
    base_yieldage: float = Field(default=500.0, ge=0)
    pipeline: PipelineSettings = Field(default_factory=PipelineSettings)
    models: dict[str, str] = Field(default_factory=dict, description="Model tier name to llm_config.json name.")

    @property
    def hourly_rate(self) -> float:
        """Dollars per hour, derived from the cash/time equivalence."""
        equate = self.convert.equate
        return equate.cash.dollars / equate.time.hours

    @property
    def cost_horizon_weeks(self) -> float:
        return self.cost.horizon.weeks

    @classmethod
    def load(cls, path: Optional[Path]) -> "DispatchConfig":
        """
        Load the config from a json file. When path is None the defaults are used.
        """
        if path is None:
            logger.debug("No dispatch_config.json, using defaults.")
            return cls()
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise DispatchConfigError(f"Cannot read dispatch config {path!r}: {e}") from e
        try:
            config = cls.model_validate(data)
        except ValidationError as e:
            raise DispatchConfigError(f"Invalid dispatch config {path!r}: {e}") from e
        logger.debug(f"Loaded dispatch config from {path!r}")
        return config


if __name__ == "__main__":
    config = DispatchConfig()
    print(json.dumps(config.model_dump(), indent=2))
    print(f"hourly_rate: {config.hourly_rate}")
