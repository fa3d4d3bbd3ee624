"""Tests for configuration management."""

from pathlib import Path

import pytest
import yaml

from previewctl.config import (
    PreviewCtlConfig,
    ProfileConfig,
    VercelConfig,
    PreviewConfig,
    GlobalConfig,
    ConfigLoader,
    load_config,
    get_default_config,
)
from previewctl.core.exceptions import ConfigError
from previewctl.core.output import OutputFormat
from previewctl.deploy import ReconcileConfig


class TestVercelConfig:
    """Tests for VercelConfig."""

    def test_default_values(self):
        config = VercelConfig()
        assert config.token is None
        assert config.base_url == "https://api.vercel.com"
        assert config.timeout == 30

    def test_get_token_from_env(self, monkeypatch):
        monkeypatch.setenv("VERCEL_TOKEN", "env-token")
        config = VercelConfig(token="from_env")
        assert config.get_token() == "env-token"

    def test_prefixed_env_wins(self, monkeypatch):
        monkeypatch.setenv("VERCEL_TOKEN", "plain")
        monkeypatch.setenv("PREVIEWCTL_VERCEL_TOKEN", "prefixed")
        assert VercelConfig().get_token() == "prefixed"

    def test_file_token_used_when_set(self, monkeypatch):
        monkeypatch.setenv("VERCEL_TOKEN", "env-token")
        assert VercelConfig(token="file-token").get_token() == "file-token"

    def test_project_id_env_over_file(self, monkeypatch):
        monkeypatch.setenv("VERCEL_PROJECT_ID", "prj_env")
        assert VercelConfig(project_id="prj_file").get_project_id() == "prj_env"

    def test_invalid_timeout(self):
        with pytest.raises(ValueError):
            VercelConfig(timeout=0)


class TestPreviewConfig:
    """Tests for PreviewConfig."""

    def test_default_values(self):
        config = PreviewConfig()
        assert config.env_key == "VITE_API_URL"
        assert config.target == "preview"
        assert config.deployment_limit == 50

    def test_branch_from_env(self, monkeypatch):
        monkeypatch.setenv("FE_BRANCH", "feature-env")
        assert PreviewConfig(branch="feature-file").get_branch() == "feature-env"

    def test_empty_env_falls_back(self, monkeypatch):
        monkeypatch.setenv("FE_BRANCH", "")
        assert PreviewConfig(branch="feature-file").get_branch() == "feature-file"


class TestGlobalConfig:
    """Tests for GlobalConfig."""

    def test_default_values(self):
        config = GlobalConfig()
        assert config.output_format == OutputFormat.TABLE
        assert config.color == "auto"
        assert config.dry_run is False

    def test_invalid_color(self):
        with pytest.raises(ValueError):
            GlobalConfig(color="invalid")


class TestPreviewCtlConfig:
    """Tests for PreviewCtlConfig."""

    def test_default_profile(self):
        config = PreviewCtlConfig()
        assert isinstance(config.get_profile(), ProfileConfig)

    def test_get_profile_not_found(self):
        with pytest.raises(ConfigError):
            PreviewCtlConfig().get_profile("nonexistent")


class TestConfigLoader:
    """Tests for ConfigLoader."""

    def test_load_from_file(self, temp_config_file):
        config = ConfigLoader().load(temp_config_file)

        assert config.global_settings.output_format == OutputFormat.JSON
        assert config.profiles["default"].vercel.project_id == "prj_file"
        assert config.profiles["staging"].preview.domain == "example.dev"

    def test_project_config_merged_under_explicit(self, tmp_path: Path):
        (tmp_path / "previewctl.yaml").write_text(
            yaml.dump({"profiles": {"default": {"vercel": {"project_id": "prj_project", "org_id": "team"}}}})
        )
        explicit = tmp_path / "explicit.yaml"
        explicit.write_text(yaml.dump({"profiles": {"default": {"vercel": {"project_id": "prj_explicit"}}}}))

        config = ConfigLoader().load(str(explicit))
        vercel = config.profiles["default"].vercel
        assert vercel.project_id == "prj_explicit"
        assert vercel.org_id == "team"

    def test_load_invalid_yaml(self, tmp_path: Path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("invalid: yaml: content:")

        with pytest.raises(ConfigError):
            ConfigLoader().load(str(config_file))

    def test_load_invalid_values(self, tmp_path: Path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text(yaml.dump({"global": {"color": "sometimes"}}))

        with pytest.raises(ConfigError):
            ConfigLoader().load(str(config_file))

    def test_load_nonexistent_file(self):
        with pytest.raises(ConfigError):
            ConfigLoader().load("/nonexistent/config.yaml")

    def test_load_config_defaults(self):
        config = load_config()
        assert isinstance(config, PreviewCtlConfig)
        assert get_default_config().profiles.keys() == config.profiles.keys()


class TestReconcileConfig:
    """Tests for resolving run inputs."""

    def test_from_environment(self, deploy_env):
        config = ReconcileConfig.from_profile(ProfileConfig())
        assert config.token == "test-token"
        assert config.project_id == "prj_123"
        assert config.branch == "feature-x"
        assert config.target_url == "https://api.pr-feature-x.deploy-preview.mrdibre.com"
        assert config.deployment_name == "pr-feature-x"

    def test_branch_override(self, deploy_env):
        config = ReconcileConfig.from_profile(ProfileConfig(), branch="hotfix")
        assert config.branch == "hotfix"

    @pytest.mark.parametrize(
        "missing",
        ["VERCEL_TOKEN", "VERCEL_PROJECT_ID", "VERCEL_ORG_ID", "FE_BRANCH"],
    )
    def test_missing_input(self, deploy_env, monkeypatch, missing):
        monkeypatch.delenv(missing)
        with pytest.raises(ConfigError, match=f"Missing required environment variable: {missing}"):
            ReconcileConfig.from_profile(ProfileConfig())

    def test_frozen(self, run_config):
        with pytest.raises(ValueError):
            run_config.branch = "other"

    def test_redacted(self, run_config):
        data = run_config.redacted()
        assert data["token"] == "****"
        assert data["target_url"].startswith("https://api.pr-feature-x.")
