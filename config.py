"""Configuration management for skillkit."""

import os

# Path constants are defined here rather than imported from utils.runtime,
# since utils.terminal_ui imports Config.
_RUNTIME_DIR = os.path.join(os.path.expanduser("~"), ".skillkit")
_CONFIG_FILE = os.path.join(_RUNTIME_DIR, "config")

# Default configuration template
_DEFAULT_CONFIG = """\
# skillkit configuration

# Branch cloned for git links and GitHub imports when none is given
DEFAULT_BRANCH=main

# Shallow clone depth for git retrieval
GIT_CLONE_DEPTH=1

# GitHub import defaults
IMPORT_SKILLS_PATH=skills
IMPORT_TARGET_DIR=./skills

# Optional settings
LOG_LEVEL=DEBUG
TUI_THEME=dark
"""


def _load_config(path: str) -> dict[str, str]:
    """Parse a KEY=VALUE config file, skipping comments and blank lines."""
    cfg: dict[str, str] = {}
    if not os.path.isfile(path):
        return cfg
    with open(path, encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            if "=" not in line:
                continue
            key, _, value = line.partition("=")
            # Strip inline comments (# ...) from the value
            if "#" in value:
                value = value[: value.index("#")]
            cfg[key.strip()] = value.strip()
    return cfg


def ensure_config() -> str:
    """Create ~/.skillkit/config with defaults if it does not exist.

    Returns:
        Path to the config file
    """
    if not os.path.exists(_CONFIG_FILE):
        os.makedirs(_RUNTIME_DIR, exist_ok=True)
        with open(_CONFIG_FILE, "w", encoding="utf-8") as f:
            f.write(_DEFAULT_CONFIG)
    return _CONFIG_FILE


_cfg = _load_config(_CONFIG_FILE)


class Config:
    """Configuration for skillkit, read once from ~/.skillkit/config."""

    # Git retrieval
    DEFAULT_BRANCH = _cfg.get("DEFAULT_BRANCH") or "main"
    GIT_CLONE_DEPTH = int(_cfg.get("GIT_CLONE_DEPTH", "1"))

    # GitHub import
    IMPORT_SKILLS_PATH = _cfg.get("IMPORT_SKILLS_PATH") or "skills"
    IMPORT_TARGET_DIR = _cfg.get("IMPORT_TARGET_DIR") or "./skills"

    # Logging Configuration
    # Note: Logging is controlled via --verbose flag; files go to ~/.skillkit/logs/
    LOG_LEVEL = _cfg.get("LOG_LEVEL", "DEBUG").upper()

    # Terminal output
    TUI_THEME = _cfg.get("TUI_THEME", "dark")  # "dark" or "light"

    @classmethod
    def validate(cls):
        """Validate configuration values.

        Raises:
            ValueError: If a configuration value is out of range
        """
        if cls.TUI_THEME not in ("dark", "light"):
            raise ValueError(
                f"TUI_THEME must be 'dark' or 'light' (got '{cls.TUI_THEME}'). "
                f"Please fix it in {_CONFIG_FILE}."
            )
        if cls.GIT_CLONE_DEPTH < 1:
            raise ValueError(
                f"GIT_CLONE_DEPTH must be at least 1 (got {cls.GIT_CLONE_DEPTH}). "
                f"Please fix it in {_CONFIG_FILE}."
            )
