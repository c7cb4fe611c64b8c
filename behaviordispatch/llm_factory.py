"""
Create llama_index LLM instances from the entries in llm_config.json.

Each entry looks like:
    "openrouter-gemini-flash": {
        "class": "OpenRouter",
        "arguments": {"model": "google/gemini-2.0-flash-001", "api_key": "${OPENROUTER_API_KEY}"},
        "priority": 1
    }

PROMPT> python -m behaviordispatch.llm_factory
"""
import json
import logging
from pathlib import Path
from typing import Any, Optional
from llama_index.core.llms.llm import LLM
from llama_index.llms.ollama import Ollama
from llama_index.llms.openai import OpenAI
from llama_index.llms.openrouter import OpenRouter
from behaviordispatch.utils.dispatch_config_locator import DispatchConfigLocator
from behaviordispatch.utils.dispatch_dotenv import DispatchDotEnv

logger = logging.getLogger(__name__)

__all__ = ["get_llm", "get_llm_names_by_priority", "is_valid_llm_name", "substitute_env_vars", "load_llm_configs"]

LLM_CLASSES: dict[str, type] = {
    "OpenAI": OpenAI,
    "Ollama": Ollama,
    "OpenRouter": OpenRouter,
}

_llm_configs: Optional[dict[str, Any]] = None


def load_config(config_path: Optional[Path]) -> dict[str, Any]:
    """Loads the configuration from a JSON file."""
    if config_path is None:
        logger.warning("llm_config.json not found. No LLMs are configured.")
        return {}
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            return json.load(f)
    except FileNotFoundError:
        logger.error(f"llm_config.json not found at {config_path}.")
        return {}
    except json.JSONDecodeError as e:
        raise ValueError(f"Error decoding JSON from {config_path}: {e}")


def load_llm_configs() -> dict[str, Any]:
    """Lazily load llm_config.json, only once."""
    global _llm_configs
    if _llm_configs is None:
        locator = DispatchConfigLocator.load()
        _llm_configs = load_config(locator.llm_config_json_path)
    return _llm_configs


def substitute_env_vars(config: dict[str, Any], env_vars: dict[str, str]) -> dict[str, Any]:
    """Recursively substitutes "${NAME}" values in the configuration."""

    def replace_value(value: Any) -> Any:
        if isinstance(value, str) and value.startswith("${") and value.endswith("}"):
            var_name = value[2:-1]
            if var_name in env_vars:
                return env_vars[var_name]
            logger.warning(f"Environment variable {var_name!r} not found.")
        return value

    def process_item(item):
        if isinstance(item, dict):
            return {k: process_item(v) for k, v in item.items()}
        elif isinstance(item, list):
            return [process_item(i) for i in item]
        else:
            return replace_value(item)

    return process_item(config)


def get_llm_names_by_priority() -> list[str]:
    """
    Returns a list of LLM names sorted by priority.
    Lowest values comes first. Entries without a priority are left out.
    """
    configs = [(name, config) for name, config in load_llm_configs().items() if config.get("priority") is not None]
    configs.sort(key=lambda x: x[1].get("priority", 0))
    return [name for name, _ in configs]


def is_valid_llm_name(llm_name: str) -> bool:
    return llm_name in load_llm_configs()


def get_llm(llm_name: Optional[str] = None, **kwargs: Any) -> LLM:
    """
    Returns an LLM instance based on the llm_config.json file.

    :param llm_name: The name/key of the LLM to instantiate. If None, the LLM with the best priority is used.
    :param kwargs: Additional keyword arguments to override default model parameters.
    :return: An instance of a LlamaIndex LLM class.
    """
    llm_configs = load_llm_configs()
    if not llm_name:
        llm_names = get_llm_names_by_priority()
        if not llm_names:
            raise ValueError("No LLM models configured. Please add 'priority' values to llm_config.json.")
        llm_name = llm_names[0]

    if llm_name not in llm_configs:
        logger.error(f"Cannot create LLM, the llm_name {llm_name!r} is not found in llm_config.json.")
        raise ValueError(f"Unsupported LLM name: {llm_name}")

    config = llm_configs[llm_name]
    class_name = config.get("class")
    arguments = config.get("arguments", {})

    arguments = substitute_env_vars(arguments, DispatchDotEnv.load().dotenv_dict)
    arguments.update(kwargs)

    llm_class = LLM_CLASSES.get(class_name)
    if llm_class is None:
        raise ValueError(f"Invalid LLM class name in llm_config.json: {class_name}")
    try:
        return llm_class(**arguments)
    except TypeError as e:
        raise ValueError(f"Error instantiating {class_name} with arguments: {e}")


if __name__ == '__main__':
    logging.basicConfig(level=logging.INFO)
    llm_names = get_llm_names_by_priority()
    print("LLM names by priority:")
    for llm_name in llm_names:
        print(f"- {llm_name}")
    if llm_names:
        llm = get_llm(llm_names[0])
        print(f"Successfully loaded LLM: {llm.__class__.__name__}")
