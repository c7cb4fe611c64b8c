"""
Read the text artifacts of a gathered behavior, on demand.

A behavior may split an artifact over several files, eg. `0.wish.md` and `0.wish.scope.md`.
The matching files are joined with a blank line, in file name order.
"""
import re
from behaviordispatch.domain.behavior import BehaviorGathered

WISH_PATTERN = re.compile(r"^0\.wish(\..+)?\.md$")
VISION_PATTERN = re.compile(r"^1\.vision(\..+)?\.md$")
CRITERIA_PATTERN = re.compile(r"^2\.criteria(\..+)?\.md$")
BLUEPRINT_PATTERN = re.compile(r"\.blueprint\..+\.md$")

def read_matching_files(gathered: BehaviorGathered, pattern: re.Pattern) -> str:
    refs = sorted((f for f in gathered.files if pattern.search(f.file_name)), key=lambda f: f.file_name)
    return "\n\n".join(ref.read_text() for ref in refs)

def get_gathered_wish(gathered: BehaviorGathered) -> str:
    return read_matching_files(gathered, WISH_PATTERN)

def get_gathered_vision(gathered: BehaviorGathered) -> str:
    return read_matching_files(gathered, VISION_PATTERN)

def get_gathered_criteria(gathered: BehaviorGathered) -> str:
    return read_matching_files(gathered, CRITERIA_PATTERN)

def get_gathered_blueprint(gathered: BehaviorGathered) -> str:
    return read_matching_files(gathered, BLUEPRINT_PATTERN)

def format_behavior_content(gathered: BehaviorGathered, include_blueprint: bool = False) -> str:
    """Markdown sections with the non-empty artifacts. Used as context in the estimator prompts."""
    sections = [
        ("wish", get_gathered_wish(gathered)),
        ("vision", get_gathered_vision(gathered)),
        ("criteria", get_gathered_criteria(gathered)),
    ]
    if include_blueprint:
        sections.append(("blueprint", get_gathered_blueprint(gathered)))
    return "\n\n".join(f"## {title}\n{text.strip()}" for title, text in sections if text.strip())
