"""
Locate the config files of a dispatch run: dispatch_config.json, llm_config.json and .env.

A config file is taken from the first place where it exists:
1. The DISPATCH_CONFIG_PATH dir, an absolute path set in the environment.
2. The current working directory.
The three files are looked up independently, so llm_config.json can be shared while dispatch_config.json is per repository.

Usage: without any DISPATCH_CONFIG_PATH environment variable.
PROMPT> python -m behaviordispatch.utils.dispatch_config_locator

Usage: with a DISPATCH_CONFIG_PATH environment variable set.
PROMPT> DISPATCH_CONFIG_PATH='/absolute/path/to/config_dir' python -m behaviordispatch.utils.dispatch_config_locator
"""
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, ClassVar
import logging
import os
from enum import Enum

logger = logging.getLogger(__name__)

class ConfigNameEnum(str, Enum):
    DOTENV = ".env"
    LLM_CONFIG_JSON = "llm_config.json"
    DISPATCH_CONFIG_JSON = "dispatch_config.json"

@dataclass
class DispatchConfigLocator:
    """
    Holds the resolved paths to the config files. A path is None when the file wasn't found.
    """
    dispatch_config_path: Optional[Path]
    dotenv_path: Optional[Path]
    llm_config_json_path: Optional[Path]
    dispatch_config_json_path: Optional[Path]

    _instance: ClassVar[Optional['DispatchConfigLocator']] = None

    @classmethod
    def load(cls) -> 'DispatchConfigLocator':
        """
        The paths are located once per process. Call reset() to locate them again.
        """
        if cls._instance is not None:
            return cls._instance

        logger.debug("DispatchConfigLocator.load() creating a new instance...")
        cls._instance = cls.locate()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        cls._instance = None

    @classmethod
    def locate(cls) -> 'DispatchConfigLocator':
        dispatch_config_path = cls.resolve_dispatch_config_path()
        return cls(
            dispatch_config_path=dispatch_config_path,
            dotenv_path=cls.find_file_in_search_order(ConfigNameEnum.DOTENV.value, dispatch_config_path),
            llm_config_json_path=cls.find_file_in_search_order(ConfigNameEnum.LLM_CONFIG_JSON.value, dispatch_config_path),
            dispatch_config_json_path=cls.find_file_in_search_order(ConfigNameEnum.DISPATCH_CONFIG_JSON.value, dispatch_config_path),
        )

    @classmethod
    def resolve_dispatch_config_path(cls) -> Optional[Path]:
        """
        The DISPATCH_CONFIG_PATH dir, or None when it is unset, relative or not a dir.
        """
        path_str = os.environ.get("DISPATCH_CONFIG_PATH")
        if path_str is None:
            logger.debug("DISPATCH_CONFIG_PATH is not set")
            return None

        path_obj = Path(path_str)
        if not path_obj.is_absolute():
            logger.error(f"DISPATCH_CONFIG_PATH must be an absolute path: {path_obj!r}")
            return None
        if not path_obj.is_dir():
            logger.error(f"DISPATCH_CONFIG_PATH must be a directory: {path_obj!r}")
            return None
        logger.debug(f"Using DISPATCH_CONFIG_PATH: {path_obj!r}")
        return path_obj

    @classmethod
    def find_file_in_search_order(cls, filename: str, dispatch_config_path: Optional[Path]) -> Optional[Path]:
        """
        :param filename: eg. "dispatch_config.json".
        :param dispatch_config_path: The validated DISPATCH_CONFIG_PATH dir, or None.
        :return: The first existing file, or None.
        """
        if dispatch_config_path is not None:
            config_file_path = dispatch_config_path / filename
            if config_file_path.is_file():
                logger.debug(f"Using {filename!r} from DISPATCH_CONFIG_PATH: {config_file_path!r}")
                return config_file_path

        cwd_file_path = Path.cwd() / filename
        if cwd_file_path.is_file():
            logger.debug(f"Using {filename!r} from the current working directory: {cwd_file_path!r}")
            return cwd_file_path

        logger.info(f"{filename!r} not found in any of the search locations (ENV_VAR, CWD).")
        return None

if __name__ == "__main__":
    logging.basicConfig(level=logging.DEBUG)
    locator = DispatchConfigLocator.load()
    print(f"locator: {locator!r}")
