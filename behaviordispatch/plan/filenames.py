from enum import Enum

class FilenameEnum(str, Enum):
    GATHERED = "001-gathered.json"
    DEPTRACED = "002-deptraced.json"
    MEASURED = "003-measured.json"
    TRIAGED = "004-triaged.json"
    WORKSTREAMS = "005-workstreams.json"
    PRIORITIZATION_OUTPUTS = "006-prioritization_outputs.json"
    COORDINATION_OUTPUTS = "007-coordination_outputs.json"
    PIPELINE_COMPLETE = "999-pipeline_complete.txt"

class ExtraFilenameEnum(str, Enum):
    LOG_TXT = "log.txt"
    TRACK_ACTIVITY_JSONL = "track_activity.jsonl"

class OutputFilenameEnum(str, Enum):
    """Files written to the output dir, these are archived when their content changes."""
    DEPENDENCIES_MD = "dependencies.md"
    PRIORITIZATION_MD = "prioritization.md"
    PRIORITIZATION_JSON = "prioritization.json"
    COORDINATION_MD = "coordination.md"
    COORDINATION_JSON = "coordination.json"
