"""
bootstrap/ - Configuration and logging setup
"""

from .config import (
    ClassifierConfig,
    LoggingConfig,
    BuildGraphConfig,
    setup_logging,
    configure_logging,
    load_config,
    get_config,
)

__all__ = [
    "ClassifierConfig",
    "LoggingConfig",
    "BuildGraphConfig",
    "setup_logging",
    "configure_logging",
    "load_config",
    "get_config",
]
