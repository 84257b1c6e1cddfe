"""Configuration Management for CargoLink

Handles loading, validation, and management of client configuration.
Supports hierarchical YAML configuration with environment overrides.
"""

import os
import logging
import threading
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, SecretStr, ValidationError, field_validator

from .error_handler import ConfigurationError


class APIConfig(BaseModel):
    """Configuration for the logistics API endpoint."""
    host: str = Field(default="localhost")
    port: int = Field(default=5001, ge=1, le=65535)
    origin: Optional[str] = None
    timeout: int = Field(default=30, ge=1, le=300)
    verify_ssl: bool = Field(default=True)
    user_agent: str = Field(default="CargoLink/1.0.0")

    @field_validator('host')
    @classmethod
    def validate_host(cls, v):
        """Host names never carry a scheme or a path"""
        if not v or '/' in v:
            raise ValueError("Host must be a bare host name, e.g. 'localhost'")
        return v

    @field_validator('origin')
    @classmethod
    def validate_origin(cls, v):
        """Origin must be an absolute http(s) URL"""
        if v is not None and not v.startswith(('http://', 'https://')):
            raise ValueError("Origin must start with http:// or https://")
        return v


class SessionConfig(BaseModel):
    """Configuration for session credential persistence."""
    backend: str = Field(default="file", pattern="^(file|keyring|memory)$")
    storage_dir: str = Field(default="~/.cargolink")
    keyring_service: str = Field(default="CargoLink")
    encryption_secret: SecretStr = Field(default=SecretStr("cargolink-session-store"))


class LoggingConfig(BaseModel):
    """Configuration for logging."""
    level: str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")
    log_dir: str = Field(default="logs")
    log_to_file: bool = Field(default=True)
    log_to_console: bool = Field(default=True)


class AppConfig(BaseModel):
    """Main client configuration."""
    model_config = ConfigDict(validate_assignment=True)

    app_name: str = Field(default="CargoLink")
    version: str = Field(default="1.0.0")
    environment: str = Field(default="development", pattern="^(development|staging|production)$")
    debug_mode: bool = Field(default=False)

    api: APIConfig = Field(default_factory=APIConfig)
    session: SessionConfig = Field(default_factory=SessionConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @property
    def is_production(self) -> bool:
        return self.environment == "production"


class ConfigManager:
    """Manages configuration loading and validation."""

    ENV_PREFIX = "CARGOLINK_"
    # CARGOLINK_API__HOST -> api.host
    ENV_NESTING = "__"

    def __init__(self, config_path: Optional[Path] = None, environment: Optional[str] = None):
        """Initialize configuration manager.

        Args:
            config_path: Optional path to the configuration directory
            environment: Environment name (development, staging, production)
        """
        self.config_base_path = Path(config_path) if config_path else self._get_default_config_path()
        self.environment = environment or os.getenv('CARGOLINK_ENV', 'development')
        self._config: Optional[AppConfig] = None
        self._lock = threading.Lock()
        self.logger = logging.getLogger(__name__)

        self.config_files = self._get_config_files()

    def _get_default_config_path(self) -> Path:
        """Get the default configuration directory."""
        config_locations = [
            Path("config"),
            Path.home() / ".cargolink",
            Path("/etc/cargolink"),
        ]

        for location in config_locations:
            if location.exists() and location.is_dir():
                return location

        return Path("config")

    def _get_config_files(self) -> Dict[str, Path]:
        """Get configuration file paths for hierarchical loading."""
        base_dir = self.config_base_path

        return {
            'default': base_dir / 'default_config.yaml',
            'environment': base_dir / f'{self.environment}.yaml',
            'local': base_dir / 'local.yaml'
        }

    def load_config(self) -> AppConfig:
        """Load and validate configuration with hierarchical overrides.

        Returns:
            Validated configuration

        Raises:
            ConfigurationError: If a file cannot be parsed or validation fails
        """
        with self._lock:
            if self._config:
                return self._config

            config_data: Dict[str, Any] = {}

            for config_type, config_file in self.config_files.items():
                if config_file.exists():
                    self.logger.info(f"Loading {config_type} config from {config_file}")
                    self._deep_merge(config_data, self._load_yaml_file(config_file))

            env_overrides = self._get_env_overrides()
            if env_overrides:
                self.logger.info(f"Applying environment overrides: {list(env_overrides.keys())}")
                self._deep_merge(config_data, env_overrides)

            # the selected mode chose the files above; they never override it
            file_environment = config_data.get('environment')
            if file_environment is not None and file_environment != self.environment:
                self.logger.warning(
                    f"Ignoring environment '{file_environment}' from config files; using '{self.environment}'"
                )
            config_data['environment'] = self.environment

            try:
                self._config = AppConfig(**config_data)
            except ValidationError as e:
                self.logger.error(f"Configuration validation failed: {e}")
                raise ConfigurationError(f"Invalid configuration: {e}") from e

            return self._config

    def reload_config(self) -> AppConfig:
        """Drop the cached configuration and load it again."""
        with self._lock:
            self._config = None
        return self.load_config()

    def _load_yaml_file(self, file_path: Path) -> Dict[str, Any]:
        """Load YAML configuration file."""
        try:
            with open(file_path, 'r') as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            self.logger.error(f"Failed to parse YAML file {file_path}: {e}")
            raise ConfigurationError(f"Invalid YAML in {file_path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigurationError(f"Top level of {file_path} must be a mapping")
        return data

    def _get_env_overrides(self) -> Dict[str, Any]:
        """Get configuration overrides from environment variables.

        Environment variables follow pattern: CARGOLINK_<SECTION>__<KEY>
        Example: CARGOLINK_API__VERIFY_SSL -> api.verify_ssl
        """
        overrides: Dict[str, Any] = {}

        for key, value in os.environ.items():
            if not key.startswith(self.ENV_PREFIX) or key == 'CARGOLINK_ENV':
                continue

            config_path = key[len(self.ENV_PREFIX):].lower().split(self.ENV_NESTING)

            current = overrides
            for part in config_path[:-1]:
                current = current.setdefault(part, {})

            current[config_path[-1]] = self._convert_env_value(value)

        return overrides

    def _convert_env_value(self, value: str) -> Union[str, int, float, bool]:
        """Convert environment variable string to appropriate type."""
        if value.lower() in ('true', 'false'):
            return value.lower() == 'true'

        try:
            if '.' in value:
                return float(value)
            return int(value)
        except ValueError:
            pass

        return value

    def _deep_merge(self, base: Dict[str, Any], updates: Dict[str, Any]):
        """Recursively merge updates into base in place."""
        for key, value in updates.items():
            if isinstance(value, dict) and isinstance(base.get(key), dict):
                self._deep_merge(base[key], value)
            else:
                base[key] = value

    def save_default_config(self) -> Path:
        """Write the current configuration as default_config.yaml, without secrets or the deployment mode."""
        config = self.load_config()
        default_file = self.config_files['default']
        default_file.parent.mkdir(parents=True, exist_ok=True)

        config_dict = config.model_dump(
            mode='json',
            exclude={'environment': True, 'session': {'encryption_secret'}}
        )

        with open(default_file, 'w') as f:
            yaml.dump(config_dict, f, default_flow_style=False, sort_keys=False)

        self.logger.info(f"Created default configuration at {default_file}")
        return default_file

    @property
    def config(self) -> AppConfig:
        return self.load_config()
