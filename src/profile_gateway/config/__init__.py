"""
Configuration package.

Environment configuration and logging setup for the gateway.
"""

from .config import ConfigurationError, EnvironmentConfig, load_environment_config
from .logfire_config import get_logger, setup_logfire

__all__ = [
    "ConfigurationError",
    "EnvironmentConfig",
    "load_environment_config",
    "get_logger",
    "setup_logfire",
]
