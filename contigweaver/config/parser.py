#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
ContigWeaver v0.1.0

Configuration parser: YAML config loading, merging, and validation.

Author: ContigWeaver Development Team
License: MIT - See LICENSE
"""

import copy
import os
import re
import yaml
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Union

from .schema import DEFAULT_CONFIG, _deep_merge, validate_config
from ..assembly_core.data_structures import AssemblyParameters
from ..errors import ContigWeaverError


class ConfigValidationError(ContigWeaverError):
    """Raised when configuration validation fails."""
    pass


class ConfigParser:
    """
    Parse and validate ContigWeaver configuration files.
    
    Features:
    - Load YAML configuration files
    - Merge with default values
    - Environment variable substitution (${VAR} and ${VAR:-default})
    - CLI parameter overrides
    - Schema validation
    - Dotted notation access (e.g., config.get('assembly.min_overlap'))
    """
    
    def __init__(self, config_file: Optional[Union[str, Path]] = None):
        """
        Initialize configuration parser.
        
        Args:
            config_file: Path to YAML configuration file (optional)
        """
        self.config_file = Path(config_file) if config_file else None
        self._config: Dict[str, Any] = copy.deepcopy(DEFAULT_CONFIG)
        
        # Load user configuration if provided
        if self.config_file:
            self._load_user_config()
    
    def _load_user_config(self):
        """Load and merge user configuration file."""
        if not self.config_file.exists():
            raise FileNotFoundError(
                f"Configuration file not found: {self.config_file}"
            )
        
        try:
            with open(self.config_file, 'r') as f:
                user_config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigValidationError(
                f"Invalid YAML in config file {self.config_file}: {e}"
            )
        
        if user_config is None:
            return
        if not isinstance(user_config, dict):
            raise ConfigValidationError(
                f"Config file {self.config_file} must contain a mapping at the top level"
            )
        
        # User values override defaults
        self._config = _deep_merge(self._config, user_config)
        self._config = self._substitute_env_vars(self._config)
    
    def _substitute_env_vars(self, config: Any) -> Any:
        """
        Recursively substitute environment variables in configuration.
        
        Supports:
        - ${VAR}: Replace with environment variable VAR
        - ${VAR:-default}: Replace with VAR, or 'default' if not set
        
        Args:
            config: Configuration value (can be dict, list, or string)
        
        Returns:
            Configuration with substituted values
        """
        if isinstance(config, dict):
            return {k: self._substitute_env_vars(v) for k, v in config.items()}
        
        elif isinstance(config, list):
            return [self._substitute_env_vars(item) for item in config]
        
        elif isinstance(config, str):
            # Pattern: ${VAR} or ${VAR:-default}
            pattern = r'\$\{([^}:]+)(?::-(.*?))?\}'
            
            def replace_var(match):
                var_name = match.group(1)
                default_value = match.group(2)
                return os.environ.get(var_name, default_value or '')
            
            return re.sub(pattern, replace_var, config)
        
        else:
            return config
    
    def merge_cli_overrides(self, overrides: Dict[str, Any]):
        """
        Merge command-line overrides into configuration.
        
        Args:
            overrides: Dictionary of override values
                      Keys can use dotted notation (e.g., 'assembly.min_overlap')
        """
        for key, value in overrides.items():
            keys = key.split('.')
            
            # Navigate to the nested dictionary
            target = self._config
            for k in keys[:-1]:
                if not isinstance(target.get(k), dict):
                    target[k] = {}
                target = target[k]
            
            target[keys[-1]] = value
    
    @staticmethod
    def parse_overrides(items: Iterable[str]) -> Dict[str, Any]:
        """
        Parse ``key=value`` strings from the command line.
        
        Values are read as YAML scalars, so ``assembly.kmer_size=21`` gives
        an int and ``assembly.min_identity=0.95`` a float.
        
        Raises:
            ConfigValidationError: If an item has no ``=``
        """
        overrides = {}
        for item in items:
            if '=' not in item:
                raise ConfigValidationError(f"Override must look like key=value, got '{item}'")
            key, raw = item.split('=', 1)
            overrides[key.strip()] = yaml.safe_load(raw) if raw else None
        return overrides
    
    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value by key.
        
        Supports dotted notation for nested access.
        
        Args:
            key: Configuration key (e.g., 'assembly.min_overlap')
            default: Default value if key not found
        
        Returns:
            Configuration value
        """
        keys = key.split('.')
        value = self._config
        
        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default
        
        return value
    
    def get_assembly_config(self) -> Dict[str, Any]:
        """Get assembly configuration section."""
        return self._config.get('assembly', {})
    
    def get_preprocessing_config(self) -> Dict[str, Any]:
        """Get preprocessing configuration section."""
        return self._config.get('preprocessing', {})
    
    def get_output_config(self) -> Dict[str, Any]:
        """Get output configuration section."""
        return self._config.get('output', {})
    
    def get_assembly_parameters(self) -> AssemblyParameters:
        """Validated AssemblyParameters from the ``assembly`` section."""
        return AssemblyParameters.from_dict(self.get_assembly_config())
    
    def to_dict(self) -> Dict[str, Any]:
        """
        Export configuration as dictionary.
        
        Returns:
            Complete configuration dictionary
        """
        return copy.deepcopy(self._config)
    
    def validate(self) -> bool:
        """
        Validate configuration against the schema.
        
        Returns:
            True if valid
        
        Raises:
            ConfigValidationError: If validation fails (all problems listed)
        """
        errors = validate_config(self._config)
        if errors:
            raise ConfigValidationError(
                "Invalid configuration:\n  " + "\n  ".join(errors)
            )
        return True
    
    def __repr__(self) -> str:
        """String representation."""
        return f"ConfigParser(config_file={self.config_file})"

# ContigWeaver v0.1.0
# Any usage is subject to this software's license.
