"""
Common utilities: configuration loading and logging setup.
"""

from .config_loader import ConfigLoader, ConfigurationError
from .global_config import init_logger, get_logger

__all__ = [
    "ConfigLoader",
    "ConfigurationError",
    "init_logger",
    "get_logger",
]
