"""
Configuration management for the Rails Expert tooling.

Precedence: env vars > .env file > .rails-expert.yaml > defaults

Config file: {repo}/.rails-expert.yaml
"""

import logging
import os
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import Field, model_validator
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".rails-expert.yaml"

# Known config keys that may appear in .rails-expert.yaml
CONFIG_KEYS = {
    "repo_path", "host", "port", "log_level", "log_format",
    "skip_checks", "link_ignore",
}


def _resolve_repo_path() -> Path:
    """Resolve repo path from env or default, before Settings init."""
    raw = os.environ.get("REPO_PATH", "")
    if raw:
        return Path(raw).expanduser().resolve()
    return Path.cwd().resolve()


def _load_yaml_config(repo_path: Path) -> dict[str, Any]:
    """Load .rails-expert.yaml from the repository root."""
    config_file = repo_path / CONFIG_FILENAME
    if not config_file.exists():
        return {}
    try:
        with open(config_file) as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            logger.warning(f"{CONFIG_FILENAME} is not a mapping, ignoring: {config_file}")
            return {}
        unknown = set(data) - CONFIG_KEYS
        if unknown:
            logger.warning(f"Unknown keys in {config_file}: {', '.join(sorted(unknown))}")
        return data
    except Exception as e:
        logger.warning(f"Error loading {CONFIG_FILENAME}: {e}")
        return {}


def save_yaml_config(repo_path: Path, data: dict[str, Any]) -> Path:
    """Write config values to {repo}/.rails-expert.yaml."""
    config_file = get_config_path(repo_path)
    config_file.parent.mkdir(parents=True, exist_ok=True)
    with open(config_file, "w") as f:
        yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False)
    return config_file


def get_config_path(repo_path: Path) -> Path:
    """Get the config file path for a repository."""
    return repo_path / CONFIG_FILENAME


class Settings(BaseSettings):
    """Tool configuration. Precedence: env vars > .env > .rails-expert.yaml > defaults."""

    repo_path: Path = Field(
        default_factory=lambda: Path.cwd(),
        description="Root of the marketplace repository",
    )

    # Catalog server
    host: str = Field(default="127.0.0.1", description="Catalog server bind address")
    port: int = Field(default=3340, description="Catalog server port")

    # Logging
    log_level: str = Field(default="INFO", description="Log level")
    log_format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log format string",
    )

    # Checks
    skip_checks: list[str] = Field(
        default_factory=list,
        description="Check names skipped unless requested explicitly",
    )
    link_ignore: list[str] = Field(
        default_factory=list,
        description="Regexes of link targets the link check ignores",
    )

    model_config = {
        "env_prefix": "",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    @model_validator(mode="before")
    @classmethod
    def _inject_yaml_config(cls, data: Any) -> Any:
        """Inject .rails-expert.yaml values as fallbacks below env vars and .env."""
        if not isinstance(data, dict):
            data = {}

        repo_path = Path(data["repo_path"]).expanduser() if data.get("repo_path") else _resolve_repo_path()
        yaml_config = _load_yaml_config(repo_path)

        for key, value in yaml_config.items():
            if key not in CONFIG_KEYS:
                continue
            if key not in data or data[key] is None:
                env_val = os.environ.get(key.upper()) or os.environ.get(key)
                if env_val is None:
                    data[key] = value

        return data

    @property
    def marketplace_path(self) -> Path:
        return self.repo_path / ".claude-plugin" / "marketplace.json"


# Global settings instance, created on first use
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reload_settings(**overrides: Any) -> Settings:
    """Reload settings from environment, applying explicit overrides."""
    global _settings
    _settings = Settings(**overrides)
    return _settings


def reset_settings() -> None:
    """Drop the cached settings; the next get_settings() rebuilds them."""
    global _settings
    _settings = None
