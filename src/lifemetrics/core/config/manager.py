"""
Configuration Manager

Handles hierarchical configuration loading, validation, and management
with support for CLI args -> environment variables -> config files -> defaults.
"""

import json
import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml
from pydantic import ValidationError

from lifemetrics.core.config.models import AppConfig, FilterConfig, OutputConfig
from lifemetrics.core.exceptions import ConfigurationError, ErrorCode


class ConfigManager:
    """
    Manages application configuration with hierarchical loading and validation.

    Configuration sources in order of precedence:
    1. CLI arguments (highest priority)
    2. Environment variables
    3. Configuration files
    4. Default values (lowest priority)
    """

    def __init__(self, config_file: Optional[Union[str, Path]] = None):
        """
        Initialize configuration manager.

        Args:
            config_file: Optional path to configuration file
        """
        self.config_file = Path(config_file) if config_file else None
        self._config: Optional[AppConfig] = None
        self._config_paths = self._get_default_config_paths()

    def _get_default_config_paths(self) -> List[Path]:
        """Get default configuration file search paths."""
        search_paths = [
            Path.cwd() / "lifemetrics.yaml",
            Path.cwd() / "lifemetrics.yml",
            Path.cwd() / ".lifemetrics.yaml",
            Path.cwd() / ".lifemetrics.yml",
            Path.home() / ".config" / "lifemetrics" / "config.yaml",
        ]

        xdg_config = os.environ.get('XDG_CONFIG_HOME')
        if xdg_config:
            search_paths.append(Path(xdg_config) / "lifemetrics" / "config.yaml")

        return search_paths

    def load_config(
        self,
        cli_args: Optional[Dict[str, Any]] = None,
        env_prefix: str = "LIFEMETRICS_"
    ) -> AppConfig:
        """
        Load and validate configuration from all sources.

        Args:
            cli_args: Dictionary of CLI arguments
            env_prefix: Prefix for environment variables

        Returns:
            Validated AppConfig instance

        Raises:
            ConfigurationError: If configuration is invalid
        """
        config_data = {}

        file_config = self._load_config_file()
        if file_config:
            config_data.update(file_config)

        env_config = self._load_env_config(env_prefix)
        if env_config:
            config_data = self._deep_merge(config_data, env_config)

        if cli_args:
            cli_config = self._normalize_cli_args(cli_args)
            config_data = self._deep_merge(config_data, cli_config)

        try:
            self._config = AppConfig(**config_data)
            return self._config
        except ValidationError as e:
            raise ConfigurationError(
                f"Configuration validation failed: {e}",
                error_code=ErrorCode.CONFIG_SCHEMA_VALIDATION,
                cause=e
            )

    def _load_config_file(self) -> Optional[Dict[str, Any]]:
        """Load configuration from file."""
        config_file = self.config_file

        if config_file and not config_file.exists():
            raise ConfigurationError(
                f"Configuration file not found: {config_file}",
                error_code=ErrorCode.CONFIG_FILE_NOT_FOUND,
                config_file=str(config_file)
            )

        if not config_file:
            for path in self._config_paths:
                if path.exists() and path.is_file():
                    config_file = path
                    break

        if not config_file:
            return None

        try:
            with open(config_file, 'r', encoding='utf-8') as f:
                if config_file.suffix.lower() == '.json':
                    data = json.load(f)
                else:
                    data = yaml.safe_load(f) or {}
        except (IOError, yaml.YAMLError, json.JSONDecodeError) as e:
            raise ConfigurationError(
                f"Failed to load config file {config_file}: {e}",
                error_code=ErrorCode.CONFIG_INVALID_FORMAT,
                config_file=str(config_file),
                cause=e
            )

        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Config file {config_file} must contain a mapping",
                error_code=ErrorCode.CONFIG_INVALID_FORMAT,
                config_file=str(config_file)
            )
        return data

    def _load_env_config(self, prefix: str) -> Dict[str, Any]:
        """Load configuration from environment variables."""
        env_config = {}

        env_mappings = {
            # Filter configuration
            f"{prefix}SOURCE": ("filters", "source", str),
            f"{prefix}STRICT": ("filters", "strict", self._parse_bool),
            f"{prefix}SEARCH": ("filters", "search", str),
            f"{prefix}SEARCH_FIELDS": ("filters", "search_fields", self._parse_list),
            f"{prefix}SORT_KEY": ("filters", "sort_key", str),
            f"{prefix}SORT_DIRECTION": ("filters", "sort_direction", str),

            # Output configuration
            f"{prefix}OUTPUT_FORMAT": ("output", "format", str),
            f"{prefix}COLUMNS": ("output", "columns", self._parse_list),
            f"{prefix}MAX_ROWS": ("output", "max_rows", int),

            # General settings
            f"{prefix}VERBOSE": ("verbose", None, self._parse_bool),
            f"{prefix}DEBUG": ("debug", None, self._parse_bool),
        }

        for env_var, (section, key, parser) in env_mappings.items():
            value = os.environ.get(env_var)
            if value is not None:
                try:
                    parsed_value = parser(value)
                    if key is None:
                        env_config[section] = parsed_value
                    else:
                        env_config.setdefault(section, {})[key] = parsed_value
                except (ValueError, TypeError) as e:
                    raise ConfigurationError(
                        f"Invalid value for {env_var}: {value} ({e})",
                        error_code=ErrorCode.CONFIG_INVALID_VALUE,
                        cause=e
                    )

        return env_config

    def _normalize_cli_args(self, cli_args: Dict[str, Any]) -> Dict[str, Any]:
        """Normalize CLI arguments to configuration structure."""
        normalized = {}

        cli_mappings = {
            # Direct mappings to top level
            'verbose': 'verbose',
            'debug': 'debug',

            # Filter section
            'source': ('filters', 'source'),
            'strict': ('filters', 'strict'),
            'search': ('filters', 'search'),
            'fields': ('filters', 'search_fields'),
            'search_fields': ('filters', 'search_fields'),
            'sort': ('filters', 'sort_key'),
            'sort_key': ('filters', 'sort_key'),
            'direction': ('filters', 'sort_direction'),
            'sort_direction': ('filters', 'sort_direction'),
            'groups': ('filters', 'groups'),

            # Output section
            'output_format': ('output', 'format'),
            'columns': ('output', 'columns'),
            'max_rows': ('output', 'max_rows'),
        }

        for cli_key, value in cli_args.items():
            if value is None:
                continue

            mapping = cli_mappings.get(cli_key)
            if mapping:
                if isinstance(mapping, tuple):
                    section, key = mapping
                    normalized.setdefault(section, {})[key] = value
                else:
                    normalized[mapping] = value

        return normalized

    def _deep_merge(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Deep merge two dictionaries, with override taking precedence."""
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result

    @staticmethod
    def _parse_bool(value: Union[str, bool]) -> bool:
        """Parse boolean value from string."""
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            return value.lower() in {'true', '1', 'yes', 'on', 'enabled'}
        return bool(value)

    @staticmethod
    def _parse_list(value: Union[str, List[str]]) -> List[str]:
        """Parse list value from string."""
        if isinstance(value, list):
            return value
        if isinstance(value, str):
            return [item.strip() for item in value.split(',') if item.strip()]
        return []

    def validate_config(self, config: Optional[AppConfig] = None) -> List[str]:
        """
        Validate configuration and return list of warnings/issues.

        Args:
            config: Configuration to validate (uses loaded config if None)

        Returns:
            List of validation warnings/issues
        """
        # Imported here: the factory depends on config models
        from lifemetrics.filters.factory import FilterFactory

        if config is None:
            config = self._config

        if config is None:
            return ["No configuration loaded"]

        warnings = []

        if config.filters.source not in FilterFactory.ADAPTER_REGISTRY:
            available = ', '.join(sorted(FilterFactory.ADAPTER_REGISTRY))
            warnings.append(f"Unknown record source '{config.filters.source}' (available: {available})")

        try:
            state = FilterFactory.create_filter_state({"groups": config.filters.groups})
            warnings.extend(FilterFactory.validate_filter_state(state))
        except Exception as e:
            warnings.append(f"Invalid filter groups: {e}")

        if config.filters.search is not None and not config.filters.search.strip():
            warnings.append("Search query is blank and will be ignored")

        return warnings

    def generate_schema(self, output_file: Optional[Path] = None) -> Dict[str, Any]:
        """
        Generate JSON schema for configuration.

        Args:
            output_file: Optional file to write schema to

        Returns:
            JSON schema dictionary
        """
        schema = AppConfig.model_json_schema()

        if output_file:
            with open(output_file, 'w', encoding='utf-8') as f:
                json.dump(schema, f, indent=2)

        return schema

    def create_example_config(self, output_file: Path, profile: str = "default") -> None:
        """
        Create example configuration file.

        Args:
            output_file: Path to write configuration file
            profile: Configuration profile (default, todos, notion)
        """
        if profile == "todos":
            config = AppConfig(
                filters=FilterConfig(
                    groups=[{
                        "operator": "and",
                        "filters": [
                            {"property": "status", "operator": "not_equals", "value": "Done"},
                        ],
                    }],
                    search_fields=["title", "notes"],
                    sort_key="due",
                    sort_direction="asc",
                ),
                output=OutputConfig(columns=["title", "status", "due"]),
            )
        elif profile == "notion":
            config = AppConfig(
                filters=FilterConfig(
                    source="notion",
                    strict=True,
                    groups=[{
                        "operator": "and",
                        "filters": [
                            {"property": "Date", "propertyType": "date", "operator": "past_month"},
                        ],
                    }],
                ),
            )
        else:
            config = AppConfig()

        config_dict = config.model_dump(mode='json')

        with open(output_file, 'w', encoding='utf-8') as f:
            yaml.dump(config_dict, f, default_flow_style=False, indent=2)

    @property
    def config(self) -> Optional[AppConfig]:
        """Get the loaded configuration."""
        return self._config
