"""File logging for skillkit commands.

Logging stays off unless ``--verbose`` is given. Each verbose run writes one
file, ``~/.skillkit/logs/skillkit_<command>_<timestamp>.log``, holding the
records of every ``skillkit.*`` module plus the CLI. Terminal output goes
through ``utils.terminal_ui`` and is never duplicated by a log handler.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

from .runtime import get_log_dir

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_log_file_path: Optional[Path] = None


def _log_file_name(command: str) -> str:
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    slug = command.replace(" ", "-") if command else "run"
    return f"skillkit_{slug}_{timestamp}.log"


def setup_logger(
    command: str = "",
    log_dir: Optional[str] = None,
    log_level: Optional[str] = None,
) -> Path:
    """Attach a file handler to the root logger for one command run.

    Calling it again returns the already open log file.

    Args:
        command: Subcommand being run, used in the file name
        log_dir: Directory for the log file (default: ~/.skillkit/logs/)
        log_level: Level name (default: Config.LOG_LEVEL)

    Returns:
        Path of the log file
    """
    global _log_file_path

    if _log_file_path is not None:
        return _log_file_path

    if log_level is None:
        from config import Config

        log_level = Config.LOG_LEVEL
    level = getattr(logging, log_level.upper(), logging.DEBUG)

    directory = Path(log_dir or get_log_dir())
    directory.mkdir(parents=True, exist_ok=True)
    log_file = directory / _log_file_name(command)

    handler = logging.FileHandler(log_file, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    logging.root.addHandler(handler)
    logging.root.setLevel(level)

    _log_file_path = log_file
    logging.getLogger(__name__).info(
        f"skillkit {command or '-'}: logging at {log_level} to {log_file}"
    )
    return log_file


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def get_log_file_path() -> Optional[Path]:
    """Path of the current run's log file, or None when not verbose."""
    return _log_file_path
