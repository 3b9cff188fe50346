"""Unit tests for config_loader.ConfigLoader."""

import pytest

from workspace_cache.config_loader import (
    DEFAULT_QUOTA_BYTES,
    ConfigLoader,
    WorkspaceConfig,
)
from workspace_cache.errors import ConfigError


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, mocker):
    """Keep the developer's environment and .env out of config tests."""
    for env_name in ConfigLoader.ENV_OVERRIDES:
        monkeypatch.delenv(env_name, raising=False)
    mocker.patch("workspace_cache.config_loader.load_dotenv")


class TestConfigLoaderLoad:
    """Test cases for ConfigLoader.load()."""

    def test_missing_file_gives_defaults(self, tmp_path):
        config = ConfigLoader.load(str(tmp_path / "missing.yaml"))

        assert config == WorkspaceConfig()
        assert config.storage_key == "gm-ai-workspace"
        assert config.quota_bytes == DEFAULT_QUOTA_BYTES
        assert config.autosave_delay == 1.0

    def test_empty_file_gives_defaults(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("")

        assert ConfigLoader.load(str(config_file)) == WorkspaceConfig()

    def test_valid_file(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text(
            "store_dir: ./data\n"
            "storage_key: personal\n"
            "quota_bytes: null\n"
            "autosave_delay: 2\n"
            "app_name: Daybook\n"
        )

        config = ConfigLoader.load(str(config_file))

        assert config.store_dir == "./data"
        assert config.storage_key == "personal"
        assert config.quota_bytes is None
        assert config.autosave_delay == 2.0
        assert config.app_name == "Daybook"

    def test_invalid_yaml(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("store_dir: [unclosed\n")

        with pytest.raises(ConfigError, match="Invalid YAML syntax"):
            ConfigLoader.load(str(config_file))

    def test_non_dict_yaml(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("- a\n- b\n")

        with pytest.raises(ConfigError, match="must be a YAML dictionary"):
            ConfigLoader.load(str(config_file))

    @pytest.mark.parametrize("content,field_name", [
        ("store_dir: ''\n", "store_dir"),
        ("storage_key: ../escape\n", "storage_key"),
        ("quota_bytes: -5\n", "quota_bytes"),
        ("quota_bytes: true\n", "quota_bytes"),
        ("autosave_delay: soon\n", "autosave_delay"),
        ("autosave_delay: -1\n", "autosave_delay"),
        ("app_name: '  '\n", "app_name"),
    ])
    def test_invalid_fields(self, tmp_path, content, field_name):
        config_file = tmp_path / "config.yaml"
        config_file.write_text(content)

        with pytest.raises(ConfigError) as exc_info:
            ConfigLoader.load(str(config_file))

        assert exc_info.value.config_field == field_name

    def test_unknown_field(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("store: ./data\n")

        with pytest.raises(ConfigError, match="Unknown configuration fields: store"):
            ConfigLoader.load(str(config_file))

    def test_environment_overrides(self, tmp_path, monkeypatch):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("store_dir: ./data\nquota_bytes: 100\n")
        monkeypatch.setenv("WORKSPACE_CACHE_DIR", "/var/cache/ws")
        monkeypatch.setenv("WORKSPACE_CACHE_QUOTA_BYTES", "2048")
        monkeypatch.setenv("WORKSPACE_CACHE_AUTOSAVE_DELAY", "0.5")

        config = ConfigLoader.load(str(config_file))

        assert config.store_dir == "/var/cache/ws"
        assert config.quota_bytes == 2048
        assert config.autosave_delay == 0.5

    def test_environment_ignored_without_use_env(self, tmp_path, monkeypatch):
        monkeypatch.setenv("WORKSPACE_CACHE_APP_NAME", "Daybook")

        config = ConfigLoader.load(str(tmp_path / "missing.yaml"), use_env=False)

        assert config.app_name == "Workspace"


class TestConfigLoaderSave:
    """Test cases for ConfigLoader.save()."""

    def test_save_then_load(self, tmp_path):
        config_path = str(tmp_path / "nested" / "config.yaml")
        config = WorkspaceConfig(store_dir="./data", quota_bytes=None, app_name="Daybook")

        ConfigLoader.save(config_path, config)

        assert ConfigLoader.load(config_path) == config
