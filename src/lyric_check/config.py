#!/usr/bin/env python3

import logging
import os
from typing import Optional

import dotenv

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

LOG_LEVEL_VARIABLE = "LYRIC_CHECK_LOG_LEVEL"
REPORT_NON_ASCII_VARIABLE = "LYRIC_CHECK_REPORT_NON_ASCII"

_FALSE_VALUES = ("0", "false", "no", "off")


def load_env(directory: Optional[str] = None) -> Optional[str]:
    """
    Load environment variables from .env or .env.default in the given directory.

    Variables already set in the process environment are not overridden.

    Args:
        directory (Optional[str]): Where to look for the env files. Defaults to the working directory.

    Returns:
        Optional[str]: Path of the file that was loaded, or None if neither exists.
    """
    directory = directory or os.getcwd()
    dotenv_path: str = os.path.join(directory, ".env")
    if not os.path.exists(dotenv_path):
        dotenv_path = os.path.join(directory, ".env.default")
    if not os.path.exists(dotenv_path):
        return None
    dotenv.load_dotenv(dotenv_path)
    return dotenv_path


def get_log_level() -> int:
    name: str = os.getenv(LOG_LEVEL_VARIABLE, "WARNING").strip().upper()
    level = getattr(logging, name, None)
    if not isinstance(level, int):
        raise ValueError(f"{LOG_LEVEL_VARIABLE} `{name}` is not a logging level")
    return level


def report_non_ascii() -> bool:
    """Whether the script reader warns about characters outside ASCII."""
    value: str = os.getenv(REPORT_NON_ASCII_VARIABLE, "1").strip().lower()
    return value not in _FALSE_VALUES


def configure_logging(level: Optional[int] = None, directory: Optional[str] = None) -> int:
    """
    Set up root logging for a command line or web front end.

    Args:
        level (Optional[int]): Explicit level, overrides LYRIC_CHECK_LOG_LEVEL.
        directory (Optional[str]): Where to look for .env files.

    Returns:
        int: The level that was configured.
    """
    loaded: Optional[str] = load_env(directory)
    if level is None:
        level = get_log_level()
    logging.basicConfig(level=level, format=LOG_FORMAT)
    if loaded:
        logger.debug(f"Loaded environment from {loaded}")
    return level


# Load environment variables from .env or .env.default file
load_env()
