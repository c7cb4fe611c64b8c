"""
Canned LLM for tests and offline runs, no network calls.

A reply is picked by a text fragment of the prompt (a route), falling back to a fixed
sequence of replies. Routes matter when the estimator runs behaviors in a thread pool,
since then the call order is not deterministic.

A reply of the form "raise:some message" raises instead, to simulate a failing provider.

PROMPT> python -m behaviordispatch.llm_util.response_mockllm
"""
from typing import Any, Optional, Sequence
from llama_index.core.llms import MockLLM, ChatResponse, ChatMessage, MessageRole, CompletionResponse
from llama_index.core.llms.callbacks import llm_completion_callback
import itertools
import threading

class ResponseMockLLM(MockLLM):
    """
    routes: fragment -> reply. Checked in insertion order, the first fragment contained in the prompt wins.
    responses: replies handed out in a loop when no route matches.
    prompts: every prompt seen, in call order.
    """
    def __init__(self, responses: Optional[list[str]] = None, routes: Optional[dict[str, str]] = None, **kwargs):
        responses = responses or []
        routes = routes or {}
        candidates = responses + list(routes.values())
        # MockLLM truncates to max_tokens
        max_tokens = max([len(text) for text in candidates] + [1])
        super().__init__(max_tokens=max_tokens, **kwargs)
        object.__setattr__(self, 'responses', responses or ["Mock response"])
        object.__setattr__(self, 'routes', dict(routes))
        object.__setattr__(self, 'response_cycle', itertools.cycle(self.responses))
        object.__setattr__(self, 'prompts', [])
        object.__setattr__(self, 'lock', threading.Lock())

    def raise_exception_if_needed(self, response_text: str) -> None:
        if response_text.startswith("raise:"):
            raise Exception(response_text.split(":", 1)[1])

    def next_response(self, prompt: str) -> str:
        with self.lock:
            self.prompts.append(prompt)
            reply = next((text for fragment, text in self.routes.items() if fragment in prompt), None)
            if reply is None:
                reply = next(self.response_cycle)
        self.raise_exception_if_needed(reply)
        return reply

    @llm_completion_callback()
    def complete(self, prompt: str, formatted: bool = False, **kwargs: Any) -> CompletionResponse:
        return CompletionResponse(text=self.next_response(prompt))

    def chat(self, messages: Sequence[ChatMessage], **kwargs: Any) -> ChatResponse:
        """The messages are joined into one prompt, so routes can match on any of them."""
        joined = "\n".join(str(message.content) for message in messages)
        return ChatResponse(message=ChatMessage(role=MessageRole.ASSISTANT, content=self.next_response(joined)))

    def _generate_text(self, length: int) -> str:
        return self.next_response("")

if __name__ == "__main__":
    llm = ResponseMockLLM(
        responses=['{"depends_on": []}'],
        routes={
            "# dependency inference task: checkout": '{"depends_on": ["cart", "payment"]}',
            "# dependency inference task: refund": "raise:provider unavailable",
        },
    )

    for name in ["checkout", "cart", "refund"]:
        message = ChatMessage(role=MessageRole.USER, content=f"# dependency inference task: {name}\nList the behaviors it depends on.")
        try:
            print(f"{name}: {llm.chat([message]).message.content}")
        except Exception as e:
            print(f"{name}: failed with {e}")
    print(f"prompts seen: {len(llm.prompts)}")
