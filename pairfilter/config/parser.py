#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
PairFilter v0.1.0

Configuration parser — YAML config loading, merging, and validation.

Author: PairFilter Development Team
License: Dual License (Academic/Commercial)
"""

import copy
import os
import re
import yaml
from pathlib import Path
from typing import Any, Dict, List, Optional, Union


class ConfigValidationError(Exception):
    """Raised when configuration validation fails."""
    pass


class ConfigParser:
    """
    Parse and validate PairFilter configuration files.

    Features:
    - Load YAML configuration files
    - Merge with default values
    - Environment variable substitution (${VAR} and ${VAR:-default})
    - CLI parameter overrides
    - Schema validation
    - Dotted notation access (e.g., config.get('filter.threshold'))
    """

    def __init__(self, config_file: Optional[Union[str, Path]] = None):
        """
        Initialize configuration parser.

        Args:
            config_file: Path to YAML configuration file (optional)
        """
        self.config_file = Path(config_file) if config_file else None
        self._config: Dict[str, Any] = {}

        # Load default configuration
        self._load_defaults()

        # Load user configuration if provided
        if self.config_file:
            self._load_user_config()

    def _load_defaults(self):
        """Load default configuration values."""
        # Imported here to avoid circular dependency with schema
        from .schema import DEFAULT_CONFIG
        self._config = copy.deepcopy(DEFAULT_CONFIG)

    def _load_user_config(self):
        """Load and merge user configuration file."""
        if not self.config_file or not self.config_file.exists():
            raise ConfigValidationError(
                f"Configuration file not found: {self.config_file}"
            )

        try:
            with open(self.config_file, 'r') as f:
                user_config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigValidationError(
                f"Invalid YAML in config file {self.config_file}: {e}"
            ) from e

        if user_config is None:
            return

        if not isinstance(user_config, dict):
            raise ConfigValidationError(
                f"Config file {self.config_file} must contain a mapping, "
                f"got {type(user_config).__name__}"
            )

        # Merge user config with defaults (user values override defaults)
        self._config = self._deep_merge(self._config, user_config)

        # Substitute environment variables
        self._config = self._substitute_env_vars(self._config)

    def _deep_merge(self, base: Dict, override: Dict) -> Dict:
        """
        Deep merge two dictionaries.

        Args:
            base: Base dictionary (defaults)
            override: Override dictionary (user values)

        Returns:
            Merged dictionary
        """
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result

    def _substitute_env_vars(self, config: Any) -> Any:
        """
        Recursively substitute environment variables in configuration.

        Supports:
        - ${VAR}: Replace with environment variable VAR
        - ${VAR:-default}: Replace with VAR, or 'default' if not set
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

        None values are skipped so that unset CLI options keep the file
        or default value.

        Args:
            overrides: Dictionary of override values
                      Keys use dotted notation (e.g., 'filter.threshold')
        """
        for key, value in overrides.items():
            if value is None:
                continue

            keys = key.split('.')

            # Navigate to the nested dictionary
            target = self._config
            for k in keys[:-1]:
                if k not in target or not isinstance(target[k], dict):
                    target[k] = {}
                target = target[k]

            target[keys[-1]] = value

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value by key.

        Supports dotted notation for nested access.

        Args:
            key: Configuration key (e.g., 'filter.threshold')
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

    def to_dict(self) -> Dict[str, Any]:
        """Export configuration as a (deep-copied) dictionary."""
        return copy.deepcopy(self._config)

    def errors(self) -> List[str]:
        """Validation errors for the current configuration."""
        from .schema import validate_config
        return validate_config(self._config)

    def validate(self) -> bool:
        """
        Validate configuration against the schema.

        Raises:
            ConfigValidationError: If validation fails
        """
        errors = self.errors()
        if errors:
            raise ConfigValidationError("; ".join(errors))
        return True

    def to_settings(self):
        """Build the immutable FilterSettings for a run."""
        from .schema import FilterSettings
        return FilterSettings.from_config(self._config)

    def __repr__(self) -> str:
        return f"ConfigParser(config_file={self.config_file})"

# PairFilter v0.1.0
# Any usage is subject to this software's license.
