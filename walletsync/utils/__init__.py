"""Shared utilities for configuration and logging"""

from walletsync.utils.config_loader import ConfigLoader, ConfigurationError
from walletsync.utils.logging_config import configure_logging, get_logger

__all__ = ["ConfigLoader", "ConfigurationError", "configure_logging", "get_logger"]
