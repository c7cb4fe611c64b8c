from dataclasses import dataclass, field
import threading
from behaviordispatch.domain.dispatch_config import DispatchConfig
from behaviordispatch.estimator.estimator import Estimator, EstimatorCancelledError


@dataclass(frozen=True)
class DispatchContext:
    """Passed explicitly to every stage. Holds the estimator, the config and the cancel signal."""
    estimator: Estimator
    config: DispatchConfig = field(default_factory=DispatchConfig)
    cancel_event: threading.Event = field(default_factory=threading.Event)

    @property
    def is_cancelled(self) -> bool:
        return self.cancel_event.is_set()

    def raise_if_cancelled(self) -> None:
        if self.cancel_event.is_set():
            raise EstimatorCancelledError("Dispatch run was cancelled.")
