# missingkit/config/__init__.py
"""Configuration package: settings, logging and constants."""

from missingkit.config.logging_config import get_logger, set_log_level, setup_logging
from missingkit.config.settings import Settings, get_settings, settings

__all__ = [
    "Settings",
    "settings",
    "get_settings",
    "setup_logging",
    "get_logger",
    "set_log_level",
]
