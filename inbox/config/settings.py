"""
Inbox reader settings
Loads and validates settings from settings.yml using Pydantic
"""

import logging
import re
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

logger = logging.getLogger("Inbox.Settings")

_MARGIN_TOKEN = re.compile(r"^-?\d+(\.\d+)?(px|%)$")


class PaginationSettings(BaseModel):
    """Page sizes for the inbox list and for detail navigation"""
    page_size: int = Field(
        default=20,
        ge=1,
        le=100,
        description="Number of newsletters requested per page (1-100)"
    )
    navigation_page_size: int = Field(
        default=50,
        ge=1,
        le=100,
        description="Page size used while navigating between newsletters (1-100)"
    )


class ScrollSettings(BaseModel):
    """Infinite scroll trigger settings"""
    enabled: bool = Field(
        default=True,
        description="Load more newsletters when the list end becomes visible"
    )
    root_margin: str = Field(
        default="100px",
        description="Margin around the viewport, CSS style (px or %)"
    )
    threshold: float = Field(
        default=0.1,
        ge=0.0,
        le=1.0,
        description="Visible fraction of the sentinel that counts as visible"
    )
    min_load_interval: float = Field(
        default=0.5,
        ge=0.0,
        description="Cooldown in seconds between two load-more requests"
    )
    preload_distance: int = Field(
        default=5,
        ge=0,
        description="Preload the next page when this close to the loaded end"
    )

    @field_validator('root_margin')
    @classmethod
    def validate_root_margin(cls, v: str) -> str:
        """Accept one to four px/% values"""
        tokens = v.split()
        if not 1 <= len(tokens) <= 4:
            raise ValueError("root_margin takes one to four values")
        for token in tokens:
            if token != "0" and not _MARGIN_TOKEN.match(token):
                raise ValueError(f"invalid root_margin value: {token!r}")
        return v


class ConnectionSettings(BaseModel):
    """Page server connection settings"""
    uri: str = Field(
        default="ws://localhost:8765",
        description="WebSocket URI of the newsletter page server"
    )
    max_size: int = Field(
        default=5 * 1024 * 1024,
        ge=1024,
        description="Maximum size of one response message in bytes"
    )
    open_timeout: float = Field(
        default=5.0,
        gt=0,
        description="Seconds to wait for the connection handshake"
    )

    @field_validator('uri')
    @classmethod
    def validate_uri(cls, v: str) -> str:
        """Only websocket schemes are supported"""
        if not v.startswith(("ws://", "wss://")):
            raise ValueError("uri must start with ws:// or wss://")
        return v


class LoggingSettings(BaseModel):
    """Logging settings"""
    level: str = Field(default="INFO", description="Root log level")

    @field_validator('level')
    @classmethod
    def validate_level(cls, v: str) -> str:
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"unknown log level: {v}")
        return level


class Settings(BaseModel):
    """Main settings model"""
    pagination: PaginationSettings = Field(default_factory=PaginationSettings)
    scroll: ScrollSettings = Field(default_factory=ScrollSettings)
    connection: ConnectionSettings = Field(default_factory=ConnectionSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


class SettingsManager:
    """Manages loading and accessing settings"""

    def __init__(self, config_path: Optional[Path] = None):
        """
        Initialize settings manager

        Args:
            config_path: Path to settings.yml file. Defaults to ./settings.yml
        """
        if config_path is None:
            config_path = Path("settings.yml")

        self.config_path = Path(config_path)
        self.settings = self._load_settings()

    def _load_settings(self) -> Settings:
        """Load and validate settings from YAML file"""
        if not self.config_path.exists():
            logger.info(f"Settings file not found at {self.config_path}, using defaults")
            return Settings()

        try:
            with open(self.config_path, 'r') as f:
                config_data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            logger.warning(f"Error parsing settings YAML: {e}. Using default settings")
            return Settings()

        if config_data is None:
            logger.info("Settings file is empty, using defaults")
            return Settings()

        if not isinstance(config_data, dict):
            logger.warning("Settings file must contain a mapping, using defaults")
            return Settings()

        try:
            settings = Settings(**config_data)
        except ValidationError as e:
            logger.warning(f"Invalid settings in {self.config_path}: {e}. Using default settings")
            return Settings()

        logger.info(f"Loaded settings from {self.config_path}")
        logger.debug(f"  - Page size: {settings.pagination.page_size}")
        return settings

    def reload(self):
        """Reload settings from file"""
        self.settings = self._load_settings()

    @property
    def page_size(self) -> int:
        return self.settings.pagination.page_size

    @property
    def navigation_page_size(self) -> int:
        return self.settings.pagination.navigation_page_size

    @property
    def scroll(self) -> ScrollSettings:
        return self.settings.scroll

    @property
    def connection(self) -> ConnectionSettings:
        return self.settings.connection

    @property
    def log_level(self) -> str:
        return self.settings.logging.level

    def save(self):
        """Save current settings to YAML file"""
        config_data = self.settings.model_dump()
        with open(self.config_path, 'w') as f:
            yaml.dump(config_data, f, default_flow_style=False)


# Global settings instance
_settings_manager: Optional[SettingsManager] = None


def get_settings(config_path: Optional[Path] = None) -> SettingsManager:
    """Get the global settings manager instance"""
    global _settings_manager
    if _settings_manager is None:
        _settings_manager = SettingsManager(config_path)
    return _settings_manager
