"""
Ask an LLM a question, and get the answer back as an instance of a pydantic model.

The estimator never retries and never coerces. A response that doesn't fit the
schema raises EstimatorSchemaError, any other failure raises EstimatorCallError.
Retry policy belongs to the caller.

PROMPT> python -m behaviordispatch.estimator.estimator
"""
from abc import ABC, abstractmethod
from enum import Enum
import logging
from math import ceil
import threading
import time
from typing import Optional, Type, TypeVar
from llama_index.core.llms import ChatMessage, MessageRole
from llama_index.core.llms.llm import LLM
from pydantic import BaseModel

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


class ModelTier(str, Enum):
    DEFAULT = "default"
    FAST = "fast"
    SMART = "smart"


class EstimatorError(Exception):
    """Base class for estimator failures."""
    pass


class EstimatorCallError(EstimatorError):
    """The LLM call itself failed, eg. network error or provider error."""
    pass


class EstimatorSchemaError(EstimatorError):
    """The LLM responded, but the response doesn't match the output schema."""
    pass


class EstimatorCancelledError(EstimatorError):
    """The run was cancelled before or while the estimator was working."""
    pass


def raise_if_cancelled(cancel_event: Optional[threading.Event], message: str) -> None:
    if cancel_event is not None and cancel_event.is_set():
        raise EstimatorCancelledError(message)


class Estimator(ABC):
    @abstractmethod
    def imagine(
        self,
        prompt: str,
        output_cls: Type[T],
        briefs: Optional[list[str]] = None,
        model_tier: ModelTier = ModelTier.DEFAULT,
        cancel_event: Optional[threading.Event] = None,
    ) -> T:
        """
        Answer the prompt, with the briefs as background knowledge.

        :return: An instance of output_cls.
        :raises EstimatorCallError: The call failed.
        :raises EstimatorSchemaError: The response doesn't validate against output_cls.
        :raises EstimatorCancelledError: cancel_event was set.
        """
        raise NotImplementedError()


class LLMEstimator(Estimator):
    """
    Estimator backed by llama_index LLMs, one per model tier.
    A tier without its own LLM uses the default tier.
    """
    def __init__(self, llm_by_tier: dict[ModelTier, LLM]):
        if not isinstance(llm_by_tier, dict):
            raise ValueError(f"llm_by_tier must be a dict, got: {llm_by_tier!r}")
        if ModelTier.DEFAULT not in llm_by_tier:
            raise ValueError("llm_by_tier must contain an LLM for ModelTier.DEFAULT")
        for tier, llm in llm_by_tier.items():
            if not isinstance(tier, ModelTier):
                raise ValueError(f"Invalid model tier: {tier!r}")
            if not isinstance(llm, LLM):
                raise ValueError(f"Invalid LLM instance for tier {tier.value!r}: {llm!r}")
        self.llm_by_tier = dict(llm_by_tier)

    @classmethod
    def from_llm(cls, llm: LLM) -> "LLMEstimator":
        return cls(llm_by_tier={ModelTier.DEFAULT: llm})

    def llm_for_tier(self, model_tier: ModelTier) -> LLM:
        return self.llm_by_tier.get(model_tier, self.llm_by_tier[ModelTier.DEFAULT])

    @staticmethod
    def build_messages(prompt: str, briefs: Optional[list[str]]) -> list[ChatMessage]:
        messages = []
        if briefs:
            messages.append(ChatMessage(role=MessageRole.SYSTEM, content="\n\n".join(briefs)))
        messages.append(ChatMessage(role=MessageRole.USER, content=prompt))
        return messages

    def imagine(
        self,
        prompt: str,
        output_cls: Type[T],
        briefs: Optional[list[str]] = None,
        model_tier: ModelTier = ModelTier.DEFAULT,
        cancel_event: Optional[threading.Event] = None,
    ) -> T:
        if not isinstance(prompt, str):
            raise ValueError(f"Invalid prompt: {prompt!r}")
        schema_name = output_cls.__name__
        raise_if_cancelled(cancel_event, f"Cancelled before asking for {schema_name}.")

        llm = self.llm_for_tier(model_tier)
        sllm = llm.as_structured_llm(output_cls)
        messages = self.build_messages(prompt, briefs)
        logger.debug(f"Asking for {schema_name}, model tier: {model_tier.value!r}, prompt:\n{prompt}")

        start_time = time.perf_counter()
        try:
            chat_response = sllm.chat(messages)
        except ValueError as e:
            # pydantic's ValidationError is a ValueError, as are the json extraction errors.
            logger.error(f"{schema_name}: the response doesn't match the schema. {e}")
            raise EstimatorSchemaError(f"Response for {schema_name} doesn't match the schema: {e}") from e
        except Exception as e:
            logger.error(f"{schema_name}: LLM chat interaction failed: {e}")
            raise EstimatorCallError(f"LLM chat interaction failed for {schema_name}.") from e
        end_time = time.perf_counter()
        duration = int(ceil(end_time - start_time))

        raise_if_cancelled(cancel_event, f"Cancelled while asking for {schema_name}. The response is discarded.")

        raw = chat_response.raw
        if not isinstance(raw, output_cls):
            raise EstimatorSchemaError(f"Expected an instance of {schema_name}, got: {type(raw).__name__}")

        response_byte_count = len(chat_response.message.content.encode("utf-8")) if chat_response.message.content else 0
        logger.info(f"{schema_name}: LLM chat interaction completed in {duration} seconds. Response byte count: {response_byte_count}")
        return raw


if __name__ == "__main__":
    from pydantic import Field
    from behaviordispatch.llm_factory import get_llm

    logging.basicConfig(level=logging.DEBUG)

    class Greeting(BaseModel):
        text: str = Field(description="A short greeting.")

    estimator = LLMEstimator.from_llm(get_llm())
    result = estimator.imagine("Say hello to the dispatcher.", Greeting, briefs=["You are polite."])
    print(f"result: {result!r}")
