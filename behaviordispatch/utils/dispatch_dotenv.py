"""
Load the .env file, containing secrets such as API keys, like: OPENROUTER_API_KEY.

Values in the process environment take priority over values in the .env file.
The process environment itself is never modified.

PROMPT> python -m behaviordispatch.utils.dispatch_dotenv
"""
from dataclasses import dataclass
import os
from pathlib import Path
from typing import Optional
from dotenv import dotenv_values
import logging
from behaviordispatch.utils.dispatch_config_locator import DispatchConfigLocator

logger = logging.getLogger(__name__)

@dataclass
class DispatchDotEnv:
    dotenv_path: Optional[Path]
    dotenv_dict: dict[str, str]

    @classmethod
    def load(cls) -> "DispatchDotEnv":
        locator = DispatchConfigLocator.load()
        return cls.load_from_path(locator.dotenv_path)

    @classmethod
    def load_from_path(cls, dotenv_path: Optional[Path]) -> "DispatchDotEnv":
        dotenv_dict: dict[str, str] = {}
        if dotenv_path is not None:
            file_dict = dotenv_values(dotenv_path=dotenv_path)
            dotenv_dict = {key: value for key, value in file_dict.items() if value is not None}
            logger.debug(f"Loaded {len(dotenv_dict)} variables from {dotenv_path!r}")
        else:
            logger.debug("No .env file found, using environment variables only.")

        # Environment variables win over the .env file.
        for key, value in os.environ.items():
            dotenv_dict[key] = value
        return cls(dotenv_path=dotenv_path, dotenv_dict=dotenv_dict)

    def get(self, key: str) -> Optional[str]:
        return self.dotenv_dict.get(key)

    def __repr__(self) -> str:
        return f"DispatchDotEnv(dotenv_path={self.dotenv_path!r}, keys={len(self.dotenv_dict)})"

if __name__ == "__main__":
    logging.basicConfig(level=logging.DEBUG)
    dotenv = DispatchDotEnv.load()
    print(f"dotenv: {dotenv!r}")
