"""
ContigWeaver v0.1.0

Configuration management for ContigWeaver.

Author: ContigWeaver Development Team
License: MIT - See LICENSE
"""

from .parser import ConfigParser, ConfigValidationError
from .schema import (
    DEFAULT_CONFIG,
    TEMPLATES,
    load_config,
    save_config_template,
    validate_config,
)

__all__ = [
    "ConfigParser",
    "ConfigValidationError",
    "DEFAULT_CONFIG",
    "TEMPLATES",
    "load_config",
    "save_config_template",
    "validate_config",
]
