"""Configuration management for subnetcheck.

Settings are resolved with the following precedence:
1. Explicitly passed parameters (CLI options, API fields)
2. Environment variables (SUBNETCHECK_*)
3. Configuration file (YAML)
4. Default values
"""
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

# Load environment variables from .env file if it exists
load_dotenv()

logger = logging.getLogger("subnetcheck.config")


class Config:
    """Process-level configuration read from the environment."""

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
    LOG_FORMAT: str = os.getenv(
        "LOG_FORMAT",
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    # Settings file given through the environment
    CONFIG_PATH: str = os.getenv("SUBNETCHECK_CONFIG", "")

    ENV_PREFIX: str = "SUBNETCHECK_"


DEFAULT_CONFIG_PATHS = [
    Path("/etc/subnetcheck/config.yaml"),
    Path("~/.config/subnetcheck/config.yaml").expanduser(),
    Path("subnetcheck.yaml").absolute(),
]


class LoggingSettings(BaseModel):
    """Logging configuration."""
    level: str = Field(
        default_factory=lambda: Config.LOG_LEVEL,
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )
    file: Optional[str] = Field(
        default=None,
        description="Path to log file (if None, logs to stdout only)"
    )
    max_size_mb: int = Field(
        default=10,
        description="Maximum log file size in MB before rotation"
    )
    backup_count: int = Field(
        default=3,
        description="Number of backup log files to keep"
    )

    @field_validator('level')
    @classmethod
    def normalize_level(cls, v: str) -> str:
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level: {v}")
        return level


class AnalyzerSettings(BaseModel):
    """Settings controlling one analysis run."""
    skip_invalid_records: bool = Field(
        default=True,
        description="Skip records with a bad address or prefix instead of aborting"
    )
    workers: int = Field(
        default=1,
        ge=1,
        description="Threads used to classify interface groups"
    )
    ignore_interfaces: List[str] = Field(
        default_factory=lambda: ["lo"],
        description="Interface names dropped before analysis"
    )
    warn_down_interfaces: bool = Field(
        default=True,
        description="Log a warning for every DOWN interface seen"
    )
    fail_on_duplicate_addresses: bool = Field(
        default=False,
        description="Fail the run when an address is configured on more than one endpoint"
    )
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    model_config = {"extra": "ignore"}

    @field_validator('ignore_interfaces', mode='before')
    @classmethod
    def split_interfaces(cls, v: Any) -> Any:
        if isinstance(v, str):
            return [name.strip() for name in v.split(",") if name.strip()]
        return v

    @classmethod
    def load(cls, config_path: Optional[Union[str, Path]] = None) -> 'AnalyzerSettings':
        """Load settings from a YAML file and environment overrides."""
        config_data: Dict[str, Any] = {}

        config_path = config_path or Config.CONFIG_PATH or None
        if config_path:
            config_path = Path(config_path).expanduser().absolute()
            if config_path.exists():
                config_data = cls._load_config_file(config_path)
            else:
                logger.warning(f"Config file not found: {config_path}")
        else:
            for path in DEFAULT_CONFIG_PATHS:
                path = path.expanduser().absolute()
                if path.exists():
                    config_data = cls._load_config_file(path)
                    break

        config_data.update(cls._env_overrides())
        return cls(**config_data)

    @classmethod
    def _env_overrides(cls) -> Dict[str, Any]:
        overrides: Dict[str, Any] = {}
        for name in ("skip_invalid_records", "workers", "ignore_interfaces",
                     "warn_down_interfaces", "fail_on_duplicate_addresses"):
            value = os.getenv(f"{Config.ENV_PREFIX}{name.upper()}")
            if value is not None:
                overrides[name] = value

        log_overrides = {}
        for name in ("level", "file"):
            value = os.getenv(f"{Config.ENV_PREFIX}LOG_{name.upper()}")
            if value is not None:
                log_overrides[name] = value
        if log_overrides:
            overrides["logging"] = log_overrides
        return overrides

    @classmethod
    def _load_config_file(cls, path: Path) -> Dict[str, Any]:
        """Load configuration from a YAML file."""
        try:
            with open(path, 'r') as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.warning(f"Failed to load config from {path}: {e}")
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Ignoring config {path}: expected a mapping, got {type(data).__name__}")
            return {}
        return data

    def save(self, path: Union[str, Path]) -> None:
        """Save settings to a YAML file."""
        path = Path(path).expanduser().absolute()
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w') as f:
            yaml.safe_dump(self.model_dump(exclude_none=True), f, default_flow_style=False, sort_keys=False)


# Global settings instance
_settings: Optional[AnalyzerSettings] = None


def get_settings(config_path: Optional[Union[str, Path]] = None) -> AnalyzerSettings:
    """Get or create the global settings instance."""
    global _settings
    if _settings is None or config_path is not None:
        _settings = AnalyzerSettings.load(config_path)
    return _settings


def set_settings(settings: Optional[AnalyzerSettings]) -> None:
    """Set (or clear, with None) the global settings instance."""
    global _settings
    _settings = settings
