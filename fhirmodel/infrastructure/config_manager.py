"""Configuration Manager for Parse Policies and Output Settings.

This module loads the runtime configuration of fhirmodel: how trees are parsed
(unknown-key and required-field policies), logging level, and codec/report
output settings.

Architecture:
    - Infrastructure layer; the domain only sees the resulting ``ParseOptions``
    - Two sources: environment variables (``FM_*``, with ``.env`` support via
      python-dotenv) and JSON files
    - Type-safe configuration using Pydantic models, validated on load
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, Field, field_validator

from fhirmodel.domain.enums import RequiredFieldPolicy, UnknownKeyPolicy
from fhirmodel.domain.ports import ParseOptions

logger = logging.getLogger(__name__)

ENV_PREFIX = "FM_"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ModelConfig(BaseModel):
    """Runtime configuration.

    Parameters:
        unknown_keys: Policy for undeclared keys when parsing trees
        required_fields: Policy for absent required fields when parsing trees
        log_level: Root logging level for the CLI
        json_indent: Indentation for JSON output; 0 writes compact JSON
        xml_pretty: Indent XML output
        report_dir: Directory validation reports are written to
    """

    unknown_keys: UnknownKeyPolicy = Field(default=UnknownKeyPolicy.REJECT, description="reject | preserve")
    required_fields: RequiredFieldPolicy = Field(default=RequiredFieldPolicy.WARN, description="error | warn")
    log_level: str = Field(default="INFO", description="Logging level")
    json_indent: int = Field(default=2, ge=0, le=8, description="JSON indentation")
    xml_pretty: bool = Field(default=True, description="Indent XML output")
    report_dir: str = Field(default="reports", description="Directory for validation reports")

    @field_validator("unknown_keys", "required_fields", mode="before")
    @classmethod
    def normalize_policy(cls, v: Any) -> Any:
        """Accept policy names in any case."""
        return v.lower() if isinstance(v, str) else v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate logging level name."""
        level = v.upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"Unsupported log level: {v}. Supported: {list(_LOG_LEVELS)}")
        return level

    def parse_options(self) -> ParseOptions:
        """Parse options derived from the configured policies."""
        return ParseOptions(unknown_keys=self.unknown_keys, required_fields=self.required_fields)


class ConfigManager:
    """Configuration manager for fhirmodel settings.

    Example Usage:
        ```python
        # Load from environment variables
        config = ConfigManager.from_environment()
        options = config.get_model_config().parse_options()

        # Load from file
        config = ConfigManager.from_file("fhirmodel.json")
        ```
    """

    def __init__(self, config_data: Dict[str, Any]):
        """Initialize configuration manager.

        Parameters:
            config_data: Configuration dictionary; model settings live under "model"
        """
        self._config_data = config_data
        self._model_config: Optional[ModelConfig] = None

    @classmethod
    def from_environment(cls) -> 'ConfigManager':
        """Load configuration from environment variables.

        Environment Variables:
            - FM_UNKNOWN_KEYS: reject | preserve
            - FM_REQUIRED_FIELDS: error | warn
            - FM_LOG_LEVEL: Logging level
            - FM_JSON_INDENT: JSON indentation
            - FM_XML_PRETTY: true | false
            - FM_REPORT_DIR: Report output directory

        A ``.env`` file found from the working directory is loaded first;
        variables already set in the environment win.

        Returns:
            ConfigManager instance
        """
        env_path = find_dotenv(usecwd=True)
        if env_path:
            load_dotenv(env_path)
            logger.debug(f"Loaded environment variables from {env_path}")

        names = {
            "unknown_keys": "UNKNOWN_KEYS",
            "required_fields": "REQUIRED_FIELDS",
            "log_level": "LOG_LEVEL",
            "json_indent": "JSON_INDENT",
            "xml_pretty": "XML_PRETTY",
            "report_dir": "REPORT_DIR",
        }
        model = {}
        for key, suffix in names.items():
            value = os.getenv(f"{ENV_PREFIX}{suffix}")
            if value is not None and value != "":
                model[key] = value

        return cls({"model": model})

    @classmethod
    def from_file(cls, config_path: Union[str, Path]) -> 'ConfigManager':
        """Load configuration from a JSON file.

        Parameters:
            config_path: Path to configuration file

        Returns:
            ConfigManager instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config file is invalid
        """
        config_file = Path(config_path)
        if not config_file.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        try:
            with open(config_file, 'r', encoding='utf-8') as f:
                config_data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in configuration file: {str(e)}") from e

        if not isinstance(config_data, dict):
            raise ValueError(f"Configuration file must contain a JSON object: {config_path}")
        return cls(config_data)

    def get_model_config(self) -> ModelConfig:
        """Get the validated model configuration.

        Raises:
            pydantic.ValidationError: If a configured value is invalid
        """
        if self._model_config is None:
            self._model_config = ModelConfig(**self._config_data.get("model", {}))
        return self._model_config

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value by key.

        Parameters:
            key: Configuration key (supports dot notation, e.g., "model.json_indent")
            default: Default value if key not found

        Returns:
            Configuration value
        """
        value = self._config_data
        for k in key.split("."):
            if isinstance(value, dict):
                value = value.get(k)
            else:
                return default
        return value if value is not None else default


# ============================================================================
# Convenience Functions
# ============================================================================

def get_model_config() -> ModelConfig:
    """Convenience function to get the model configuration from the environment."""
    return ConfigManager.from_environment().get_model_config()
