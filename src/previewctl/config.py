"""Configuration management for previewctl using Pydantic."""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator

from previewctl.core.exceptions import ConfigError
from previewctl.core.output import OutputFormat
from previewctl.core.logging import LogLevel


def _from_env(*names: str) -> str | None:
    """Return the first non-empty environment variable among names."""
    for name in names:
        value = os.environ.get(name)
        if value:
            return value
    return None


class VercelConfig(BaseModel):
    """Vercel API configuration."""

    token: str | None = None
    project_id: str | None = None
    org_id: str | None = None
    base_url: str = "https://api.vercel.com"
    timeout: float = 30

    @field_validator("timeout")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("timeout must be positive")
        return v

    def get_token(self) -> str | None:
        """Get Vercel token from config or environment."""
        token = self.token
        if token == "from_env" or token is None:
            token = _from_env("PREVIEWCTL_VERCEL_TOKEN", "VERCEL_TOKEN")
        return token

    def get_project_id(self) -> str | None:
        """Get Vercel project ID from config or environment."""
        return _from_env("PREVIEWCTL_VERCEL_PROJECT_ID", "VERCEL_PROJECT_ID") or self.project_id

    def get_org_id(self) -> str | None:
        """Get Vercel org ID from config or environment."""
        return _from_env("PREVIEWCTL_VERCEL_ORG_ID", "VERCEL_ORG_ID") or self.org_id


class PreviewConfig(BaseModel):
    """Preview environment settings."""

    branch: str | None = None
    domain: str = "mrdibre.com"
    env_key: str = "VITE_API_URL"
    env_type: str = "plain"
    target: str = "preview"
    deployment_limit: int = 50
    git_provider: str = "github"

    @field_validator("deployment_limit")
    @classmethod
    def validate_limit(cls, v: int) -> int:
        if v < 1:
            raise ValueError("deployment_limit must be at least 1")
        return v

    def get_branch(self) -> str | None:
        """Get the feature branch from config or environment."""
        return _from_env("PREVIEWCTL_BRANCH", "FE_BRANCH") or self.branch


class ProfileConfig(BaseModel):
    """Profile configuration grouping all service settings."""

    vercel: VercelConfig = Field(default_factory=VercelConfig)
    preview: PreviewConfig = Field(default_factory=PreviewConfig)


class GlobalConfig(BaseModel):
    """Global settings."""

    output_format: OutputFormat = OutputFormat.TABLE
    color: str = "auto"  # auto, always, never
    verbosity: LogLevel = LogLevel.INFO
    dry_run: bool = False

    @field_validator("color")
    @classmethod
    def validate_color(cls, v: str) -> str:
        if v not in ("auto", "always", "never"):
            raise ValueError("color must be 'auto', 'always', or 'never'")
        return v


class PreviewCtlConfig(BaseModel):
    """Main configuration model."""

    model_config = {"populate_by_name": True}

    version: str = "1"
    global_settings: GlobalConfig = Field(default_factory=GlobalConfig, alias="global")
    profiles: dict[str, ProfileConfig] = Field(default_factory=lambda: {"default": ProfileConfig()})

    def get_profile(self, name: str | None = None) -> ProfileConfig:
        """Get a profile by name, defaulting to 'default'."""
        profile_name = name or "default"
        if profile_name not in self.profiles:
            raise ConfigError(f"Profile '{profile_name}' not found")
        return self.profiles[profile_name]


class ConfigLoader:
    """Loads and merges configuration from multiple sources."""

    CONFIG_FILENAMES = ["previewctl.yaml", "previewctl.yml", ".previewctl.yaml", ".previewctl.yml"]

    def __init__(self):
        self._config: PreviewCtlConfig | None = None

    def load(self, config_file: str | Path | None = None) -> PreviewCtlConfig:
        """Load configuration from files.

        Priority (highest to lowest):
        1. Explicitly specified config file
        2. Project config (./previewctl.yaml)
        3. User config (~/.previewctl/config.yaml)

        Environment variables are resolved later, by the ``get_*`` accessors.

        Args:
            config_file: Optional explicit config file path

        Returns:
            Merged configuration
        """
        configs: list[dict[str, Any]] = []

        user_config_path = Path.home() / ".previewctl" / "config.yaml"
        if user_config_path.exists():
            configs.append(self._load_yaml_file(user_config_path))

        project_config = self._find_project_config()
        if project_config:
            configs.append(self._load_yaml_file(project_config))

        if config_file:
            config_path = Path(config_file)
            if not config_path.exists():
                raise ConfigError(f"Config file not found: {config_file}")
            configs.append(self._load_yaml_file(config_path))

        merged = self._merge_configs(configs)

        try:
            self._config = PreviewCtlConfig(**merged)
        except ValueError as e:
            raise ConfigError(f"Invalid configuration: {e}")
        return self._config

    def _find_project_config(self) -> Path | None:
        """Find project config file in current or parent directories."""
        current = Path.cwd()

        while current != current.parent:
            for filename in self.CONFIG_FILENAMES:
                config_path = current / filename
                if config_path.exists():
                    return config_path
            current = current.parent

        return None

    def _load_yaml_file(self, path: Path) -> dict[str, Any]:
        """Load a YAML config file."""
        try:
            with open(path) as f:
                content = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}")
        except OSError as e:
            raise ConfigError(f"Cannot read {path}: {e}")

        if not isinstance(content, dict):
            raise ConfigError(f"Config file {path} must contain a mapping")
        return content

    def _merge_configs(self, configs: list[dict[str, Any]]) -> dict[str, Any]:
        """Deep merge multiple configuration dictionaries."""
        result: dict[str, Any] = {}
        for config in configs:
            result = self._deep_merge(result, config)
        return result

    def _deep_merge(
        self,
        base: dict[str, Any],
        override: dict[str, Any],
    ) -> dict[str, Any]:
        """Deep merge two dictionaries."""
        result = base.copy()
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value
        return result


def load_config(config_file: str | Path | None = None) -> PreviewCtlConfig:
    """Load previewctl configuration.

    Args:
        config_file: Optional explicit config file path

    Returns:
        Loaded configuration
    """
    return ConfigLoader().load(config_file)


def get_default_config() -> PreviewCtlConfig:
    """Get default configuration without loading from files."""
    return PreviewCtlConfig()
