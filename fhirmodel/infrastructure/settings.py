"""Application Settings.

This module combines the configuration manager with application metadata and
exposes a global ``settings`` instance used by the CLI and readers.
"""

from typing import Optional

from fhirmodel import __version__
from fhirmodel.domain.ports import ParseOptions
from fhirmodel.infrastructure.config_manager import ConfigManager, ModelConfig

# Application metadata
APP_NAME = "fhirmodel"
APP_VERSION = __version__


class Settings:
    """Application settings loaded lazily from the configuration manager.

    The configuration is read on first access so that tests and the CLI can
    set ``FM_*`` variables before anything is loaded.
    """

    def __init__(self):
        self.app_name = APP_NAME
        self.app_version = APP_VERSION
        self._config_manager: Optional[ConfigManager] = None

    @property
    def config_manager(self) -> ConfigManager:
        """Get configuration manager instance."""
        if self._config_manager is None:
            self._config_manager = ConfigManager.from_environment()
        return self._config_manager

    @property
    def config(self) -> ModelConfig:
        """Get the validated model configuration."""
        return self.config_manager.get_model_config()

    @property
    def log_level(self) -> str:
        return self.config.log_level

    def parse_options(self) -> ParseOptions:
        """Parse options for the configured policies."""
        return self.config.parse_options()

    def reload(self) -> None:
        """Drop cached configuration so the next access re-reads the environment."""
        self._config_manager = None


# Global settings instance
settings = Settings()
