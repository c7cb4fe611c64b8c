from enum import Enum
from dataclasses import dataclass
import os
from pathlib import Path
from typing import Optional

class PipelineEnvironmentEnum(Enum):
    """Environment variables read by the dispatch pipeline."""
    RUN_ID_DIR = "RUN_ID_DIR"
    REPO_DIR = "REPO_DIR"
    LLM_MODEL = "LLM_MODEL"

def validate_dir(name: str, value: str, must_be_absolute: bool) -> Path:
    path = Path(value)
    if must_be_absolute and not path.is_absolute():
        raise ValueError(f"{name} must be an absolute path, got: {value}")
    if not path.is_dir():
        raise ValueError(f"{name} must be a directory, got: {value}")
    return path

@dataclass
class PipelineEnvironment:
    run_id_dir: Optional[str] = None
    repo_dir: Optional[str] = None
    llm_model: Optional[str] = None

    @classmethod
    def from_env(cls) -> "PipelineEnvironment":
        return cls(
            run_id_dir=os.environ.get(PipelineEnvironmentEnum.RUN_ID_DIR.value),
            repo_dir=os.environ.get(PipelineEnvironmentEnum.REPO_DIR.value),
            llm_model=os.environ.get(PipelineEnvironmentEnum.LLM_MODEL.value),
        )

    def get_run_id_dir(self) -> Path:
        """
        The run dir with the intermediate files, eg. '/absolute/path/to/run/20261019_083000'.

        Raises:
            ValueError: If run_id_dir is None, not an absolute path, or not a directory.
        """
        if self.run_id_dir is None:
            raise ValueError("run_id_dir is not set")
        return validate_dir("run_id_dir", self.run_id_dir, must_be_absolute=True)

    def get_repo_dir(self) -> Path:
        """The repository with the '.behavior' dir. Defaults to the current working directory."""
        if self.repo_dir is None:
            return Path.cwd()
        return validate_dir("repo_dir", self.repo_dir, must_be_absolute=False).resolve()
