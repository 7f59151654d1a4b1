"""
PairFilter v0.1.0

Configuration management for PairFilter.

Author: PairFilter Development Team
License: Dual License (Academic/Commercial)
"""

from .parser import ConfigParser, ConfigValidationError
from .schema import (
    DEFAULT_CONFIG,
    CONFIG_TEMPLATES,
    FilterSettings,
    save_config_template,
    validate_config,
)

__all__ = [
    "ConfigParser",
    "ConfigValidationError",
    "DEFAULT_CONFIG",
    "CONFIG_TEMPLATES",
    "FilterSettings",
    "save_config_template",
    "validate_config",
]
