"""
Configuration module for the ledger core.
"""
from .logging_config import LoggingConfig, configure_logging, reset_logging
from .settings import LedgerConfig, get_config, load_config, reload_config

__all__ = [
    "LedgerConfig",
    "LoggingConfig",
    "configure_logging",
    "get_config",
    "load_config",
    "reload_config",
    "reset_logging",
]
