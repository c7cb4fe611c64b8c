from dataclasses import dataclass
from behaviordispatch.domain.behavior import GatheredRef


@dataclass(frozen=True)
class StageFailure:
    """A behavior that a stage could not process. The rest of the basket is unaffected."""
    gathered: GatheredRef
    stage: str
    error_type: str
    error_message: str

    @classmethod
    def from_exception(cls, gathered: GatheredRef, stage: str, e: Exception) -> "StageFailure":
        return cls(
            gathered=gathered,
            stage=stage,
            error_type=e.__class__.__name__,
            error_message=str(e),
        )
