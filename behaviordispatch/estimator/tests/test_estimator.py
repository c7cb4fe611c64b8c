import threading
import unittest
from pydantic import BaseModel, Field
from behaviordispatch.estimator.estimator import (
    EstimatorCallError, EstimatorCancelledError, EstimatorSchemaError, LLMEstimator, ModelTier,
)
from behaviordispatch.llm_util.response_mockllm import ResponseMockLLM

class Greeting(BaseModel):
    text: str = Field(description="A short greeting.")
    count: int = Field(description="How many times to greet.")

class TestLLMEstimator(unittest.TestCase):
    def test_imagine_success(self):
        # Arrange
        llm = ResponseMockLLM(responses=['{"text": "hello", "count": 2}'])
        estimator = LLMEstimator.from_llm(llm)

        # Act
        result = estimator.imagine("Say hello.", Greeting)

        # Assert
        self.assertIsInstance(result, Greeting)
        self.assertEqual(result.text, "hello")
        self.assertEqual(result.count, 2)

    def test_briefs_are_part_of_the_prompt(self):
        # Arrange
        llm = ResponseMockLLM(responses=['{"text": "hello", "count": 1}'])
        estimator = LLMEstimator.from_llm(llm)

        # Act
        estimator.imagine("Say hello.", Greeting, briefs=["You are a polite dispatcher."])

        # Assert
        self.assertEqual(len(llm.prompts), 1)
        self.assertIn("You are a polite dispatcher.", llm.prompts[0])
        self.assertIn("Say hello.", llm.prompts[0])

    def test_schema_error_no_json(self):
        # Arrange
        llm = ResponseMockLLM(responses=["I refuse to answer in json."])
        estimator = LLMEstimator.from_llm(llm)

        # Act
        # Assert
        with self.assertRaises(EstimatorSchemaError):
            estimator.imagine("Say hello.", Greeting)

    def test_schema_error_missing_field(self):
        # Arrange
        llm = ResponseMockLLM(responses=['{"text": "hello"}'])
        estimator = LLMEstimator.from_llm(llm)

        # Act
        # Assert
        with self.assertRaises(EstimatorSchemaError):
            estimator.imagine("Say hello.", Greeting)

    def test_call_error(self):
        # Arrange
        llm = ResponseMockLLM(responses=["raise:provider is down"])
        estimator = LLMEstimator.from_llm(llm)

        # Act
        # Assert
        with self.assertRaises(EstimatorCallError):
            estimator.imagine("Say hello.", Greeting)

    def test_cancelled_before_call(self):
        # Arrange
        llm = ResponseMockLLM(responses=['{"text": "hello", "count": 1}'])
        estimator = LLMEstimator.from_llm(llm)
        cancel_event = threading.Event()
        cancel_event.set()

        # Act
        with self.assertRaises(EstimatorCancelledError):
            estimator.imagine("Say hello.", Greeting, cancel_event=cancel_event)

        # Assert
        self.assertEqual(llm.prompts, [])

    def test_model_tier_fallback_to_default(self):
        # Arrange
        default_llm = ResponseMockLLM(responses=['{"text": "default", "count": 1}'])
        smart_llm = ResponseMockLLM(responses=['{"text": "smart", "count": 1}'])
        estimator = LLMEstimator(llm_by_tier={ModelTier.DEFAULT: default_llm, ModelTier.SMART: smart_llm})

        # Act
        smart = estimator.imagine("Say hello.", Greeting, model_tier=ModelTier.SMART)
        fast = estimator.imagine("Say hello.", Greeting, model_tier=ModelTier.FAST)

        # Assert
        self.assertEqual(smart.text, "smart")
        self.assertEqual(fast.text, "default")

    def test_missing_default_tier(self):
        # Arrange
        llm = ResponseMockLLM()

        # Act
        # Assert
        with self.assertRaises(ValueError):
            LLMEstimator(llm_by_tier={ModelTier.FAST: llm})

    def test_invalid_llm(self):
        # Arrange
        # Act
        # Assert
        with self.assertRaises(ValueError):
            LLMEstimator(llm_by_tier={ModelTier.DEFAULT: "not an llm"})

if __name__ == '__main__':
    unittest.main()
