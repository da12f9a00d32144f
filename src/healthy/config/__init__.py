"""Config package for healthy-sdk.

Resolves wait settings from defaults, config files, ``HEALTHY_*`` variables
and command-line flags.
"""
from __future__ import annotations

from healthy.config.defaults import DEFAULT_CONFIG
from healthy.config.loader import ConfigLoader
from healthy.config.schema import WaitConfig, validate_config

__all__ = [
    "WaitConfig",
    "validate_config",
    "ConfigLoader",
    "DEFAULT_CONFIG",
]
