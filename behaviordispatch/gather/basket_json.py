"""
Save and load baskets of records as json, for the intermediate files of the pipeline.
"""
import json
from pathlib import Path
from typing import Any, Callable, TypeVar

T = TypeVar("T")

def basket_to_json(records: list[Any]) -> str:
    return json.dumps([record.to_dict() for record in records], indent=2)

def save_basket(records: list[Any], path: Path) -> None:
    with open(path, "w", encoding="utf-8") as f:
        f.write(basket_to_json(records))

def load_basket(path: Path, from_dict: Callable[[dict[str, Any]], T]) -> list[T]:
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, list):
        raise ValueError(f"Expected a json array in {path}, got: {type(data).__name__}")
    return [from_dict(item) for item in data]
