"""
Append the LLM activity of a dispatch run to a jsonl file, for troubleshooting the estimates.

Each record is tagged with the task header of the prompt, eg. "# leverage estimation task: alpha",
so the events of one behavior can be found with grep.

Usage:
python -m behaviordispatch.llm_util.track_activity
"""
import json
import logging
import threading
from datetime import datetime
from pathlib import Path
from typing import Any, Optional
from llama_index.core.instrumentation import get_dispatcher
from llama_index.core.instrumentation.event_handlers.base import BaseEventHandler
from llama_index.core.instrumentation.events.llm import LLMChatStartEvent, LLMChatEndEvent, LLMCompletionStartEvent, LLMCompletionEndEvent
from llama_index.core.llms import MessageRole

logger = logging.getLogger(__name__)

TRACKED_EVENTS = (LLMChatStartEvent, LLMChatEndEvent, LLMCompletionStartEvent, LLMCompletionEndEvent)

def task_header_from_text(text: Optional[str]) -> Optional[str]:
    """The first line, when it's a markdown heading."""
    if not text:
        return None
    first_line = text.lstrip().split("\n", 1)[0].strip()
    if not first_line.startswith("# "):
        return None
    return first_line

def task_header_from_event(event: Any) -> Optional[str]:
    prompt = getattr(event, "prompt", None)
    if prompt:
        return task_header_from_text(prompt)
    for message in reversed(getattr(event, "messages", None) or []):
        if message.role == MessageRole.USER:
            return task_header_from_text(message.content)
    return None

class TrackActivity(BaseEventHandler):
    """
    Records which model was asked, what the input/output was, and when it started/ended.
    The measure stage asks from several threads, so the writes are serialized.
    """
    model_config = {'extra': 'allow'}

    def __init__(self, jsonl_file_path: Path, write_to_logger: bool = False):
        super().__init__()
        if not isinstance(jsonl_file_path, Path):
            raise ValueError(f"jsonl_file_path must be a Path, got: {jsonl_file_path!r}")
        if not isinstance(write_to_logger, bool):
            raise ValueError(f"write_to_logger must be a bool, got: {write_to_logger!r}")
        self.jsonl_file_path = jsonl_file_path
        self.write_to_logger = write_to_logger
        self.write_lock = threading.Lock()

    @classmethod
    def class_name(cls) -> str:
        return "TrackActivity"

    def handle(self, event, **kwargs):
        if not isinstance(event, TRACKED_EVENTS):
            return
        task = task_header_from_event(event)
        event_record = {
            "timestamp": datetime.now().isoformat(),
            "thread": threading.current_thread().name,
            "task": task,
            "event_type": event.__class__.__name__,
            "event_data": json.loads(event.model_dump_json()),
        }

        with self.write_lock:
            with open(self.jsonl_file_path, 'a', encoding='utf-8') as f:
                f.write(json.dumps(event_record) + '\n')

        if self.write_to_logger:
            logger.info(f"{event.__class__.__name__} task: {task!r}")


if __name__ == "__main__":
    from behaviordispatch.llm_util.response_mockllm import ResponseMockLLM

    logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    jsonl_file_path = Path("track_activity.jsonl")
    get_dispatcher().add_event_handler(TrackActivity(jsonl_file_path=jsonl_file_path, write_to_logger=True))

    llm = ResponseMockLLM(responses=["hello"])
    response = llm.complete("# greeting task: dispatcher\nSay hello.")
    print(f"response:\n{response!r}")
