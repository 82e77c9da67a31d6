"""
CapToken Configuration

Loads the [token] and [logging] sections of captoken.toml.
Environment variables override TOML values.
"""

from .loader import (
    CapTokenConfig,
    LoggingConfig,
    TokenConfig,
    load_config,
)

__all__ = [
    "CapTokenConfig",
    "LoggingConfig",
    "TokenConfig",
    "load_config",
]
