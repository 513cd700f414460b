"""
AddonStreams configuration.

pydantic sections read from config.yaml, with a few settings overridable
through ADDONSTREAMS_* environment variables.
"""

import os
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, Field

# Global configuration instance
_config: Optional["AddonStreamsConfig"] = None


class HttpConfig(BaseModel):
    """Outbound HTTP settings shared by every addon instance."""
    default_timeout: int = 15000  # milliseconds


class FailoverConfig(BaseModel):
    """Failover order reporting settings."""
    report_path: str = "/failover_order"


class LoggingConfig(BaseModel):
    """Logging configuration."""
    level: str = "INFO"
    file: str = "logs/addonstreams.log"
    max_size: str = "10MB"
    backup_count: int = 5
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    to_console: bool = True
    to_file: bool = False

    @property
    def max_bytes(self) -> int:
        """max_size parsed into bytes ("10MB", "512KB", "1048576")."""
        value = self.max_size.strip().upper()
        for suffix, factor in (("GB", 1024 ** 3), ("MB", 1024 ** 2), ("KB", 1024)):
            if value.endswith(suffix):
                return int(float(value[: -len(suffix)]) * factor)
        return int(value)


class AddonStreamsConfig(BaseModel):
    """Main AddonStreams configuration."""
    http: HttpConfig = Field(default_factory=HttpConfig)
    failover: FailoverConfig = Field(default_factory=FailoverConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


# Environment variable -> (section, key). Values are coerced by the models.
ENV_OVERRIDES: dict[str, tuple[str, str]] = {
    "ADDONSTREAMS_DEFAULT_TIMEOUT": ("http", "default_timeout"),
    "ADDONSTREAMS_LOG_LEVEL": ("logging", "level"),
    "ADDONSTREAMS_LOG_FILE": ("logging", "file"),
}


def load_config(config_path: Optional[str] = None) -> AddonStreamsConfig:
    """
    Load configuration and make it the current one.

    Without a path, ``config.yaml`` in the working directory is used if it
    exists. A missing file means defaults. ``ADDONSTREAMS_*`` environment
    variables are applied last.
    """
    global _config

    path = Path(config_path) if config_path else Path("config.yaml")

    config_data: dict[str, Any] = {}
    if path.is_file():
        with open(path) as f:
            config_data = yaml.safe_load(f) or {}

    _apply_env_overrides(config_data)

    _config = AddonStreamsConfig(**config_data)
    return _config


def get_config() -> AddonStreamsConfig:
    """Current configuration, loaded on first access."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reload_config() -> AddonStreamsConfig:
    global _config
    _config = None
    return load_config()


def _apply_env_overrides(config_data: dict[str, Any]) -> None:
    for env_var, (section, key) in ENV_OVERRIDES.items():
        value = os.environ.get(env_var)
        if value is None:
            continue
        if not isinstance(config_data.get(section), dict):
            config_data[section] = {}
        config_data[section][key] = value
