"""YAML configuration loading and validation.

This module handles loading and saving workspace-cache configuration from
YAML files, with environment variable overrides loaded through
python-dotenv. A missing configuration file is not an error: the defaults
describe a usable local store.

Configuration file structure:
    store_dir: ".workspace-cache"
    storage_key: "gm-ai-workspace"
    quota_bytes: 5242880
    autosave_delay: 1.0
    app_name: "Workspace"
"""

import os
from dataclasses import dataclass
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv

from .errors import ConfigError
from .persistence.autosave import DEFAULT_AUTOSAVE_DELAY
from .persistence.backends import validate_key
from .persistence.store import DEFAULT_STORAGE_KEY
from .workspace.bootstrap import DEFAULT_APP_NAME

# Browser local storage allows roughly 5 MiB per origin
DEFAULT_QUOTA_BYTES = 5 * 1024 * 1024


@dataclass
class WorkspaceConfig:
    """Settings for the local workspace store.

    Attributes:
        store_dir: Directory holding the record files
        storage_key: Fixed key of the workspace record
        quota_bytes: Maximum encoded record size (None disables the check)
        autosave_delay: Debounce delay for note edits, in seconds
        app_name: Application name used in the welcome page title
    """
    store_dir: str = '.workspace-cache'
    storage_key: str = DEFAULT_STORAGE_KEY
    quota_bytes: Optional[int] = DEFAULT_QUOTA_BYTES
    autosave_delay: float = DEFAULT_AUTOSAVE_DELAY
    app_name: str = DEFAULT_APP_NAME


class ConfigLoader:
    """Handles configuration file loading, validation, and saving."""

    DEFAULT_CONFIG_FILE = '.workspace-cache/config.yaml'

    # Environment variable -> config field
    ENV_OVERRIDES = {
        'WORKSPACE_CACHE_DIR': 'store_dir',
        'WORKSPACE_CACHE_KEY': 'storage_key',
        'WORKSPACE_CACHE_QUOTA_BYTES': 'quota_bytes',
        'WORKSPACE_CACHE_AUTOSAVE_DELAY': 'autosave_delay',
        'WORKSPACE_CACHE_APP_NAME': 'app_name',
    }

    @classmethod
    def load(cls, config_path: Optional[str] = None, use_env: bool = True) -> WorkspaceConfig:
        """Load configuration from a YAML file and the environment.

        Args:
            config_path: Path to the YAML file (defaults to DEFAULT_CONFIG_FILE)
            use_env: Apply WORKSPACE_CACHE_* environment overrides

        Returns:
            Validated WorkspaceConfig

        Raises:
            ConfigError: If the file or an override is invalid
        """
        config_path = config_path or cls.DEFAULT_CONFIG_FILE

        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                content = f.read()
        except FileNotFoundError:
            content = ''
        except OSError as e:
            raise ConfigError(f"Cannot read {config_path}: {e}")

        try:
            config_dict = yaml.safe_load(content) if content.strip() else {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML syntax: {str(e)}")

        if config_dict is None:
            config_dict = {}

        if not isinstance(config_dict, dict):
            raise ConfigError(
                f"Configuration must be a YAML dictionary, got {type(config_dict).__name__}"
            )

        if use_env:
            load_dotenv()
            config_dict = {**config_dict, **cls._read_env_overrides()}

        return cls._parse_config(config_dict)

    @classmethod
    def save(cls, config_path: str, config: WorkspaceConfig) -> None:
        """Save configuration to a YAML file.

        Raises:
            ConfigError: If the file cannot be written
        """
        config_dict = {
            'store_dir': config.store_dir,
            'storage_key': config.storage_key,
            'quota_bytes': config.quota_bytes,
            'autosave_delay': config.autosave_delay,
            'app_name': config.app_name,
        }

        yaml_str = yaml.safe_dump(
            config_dict,
            default_flow_style=False,
            allow_unicode=True,
            sort_keys=False
        )

        try:
            config_dir = os.path.dirname(config_path)
            if config_dir:
                os.makedirs(config_dir, exist_ok=True)
            with open(config_path, 'w', encoding='utf-8') as f:
                f.write(yaml_str)
        except OSError as e:
            raise ConfigError(f"Cannot write {config_path}: {e}")

    @classmethod
    def _read_env_overrides(cls) -> Dict[str, Any]:
        overrides: Dict[str, Any] = {}
        for env_name, field_name in cls.ENV_OVERRIDES.items():
            value = os.getenv(env_name)
            if value is None or value == '':
                continue
            # YAML scalars give numbers and null the same typing as the file
            overrides[field_name] = yaml.safe_load(value) if field_name in (
                'quota_bytes', 'autosave_delay'
            ) else value
        return overrides

    @classmethod
    def _parse_config(cls, config_dict: Dict[str, Any]) -> WorkspaceConfig:
        """Validate a configuration dictionary and apply defaults.

        Raises:
            ConfigError: If a field has the wrong type or value
        """
        defaults = WorkspaceConfig()

        unknown = set(config_dict) - set(cls.ENV_OVERRIDES.values())
        if unknown:
            raise ConfigError(f"Unknown configuration fields: {', '.join(sorted(unknown))}")

        store_dir = config_dict.get('store_dir', defaults.store_dir)
        if not isinstance(store_dir, str) or not store_dir.strip():
            raise ConfigError("Must be a non-empty string", 'store_dir')

        storage_key = config_dict.get('storage_key', defaults.storage_key)
        if not isinstance(storage_key, str):
            raise ConfigError("Must be a string", 'storage_key')
        try:
            validate_key(storage_key)
        except ValueError as e:
            raise ConfigError(str(e), 'storage_key')

        quota_bytes = config_dict.get('quota_bytes', defaults.quota_bytes)
        if quota_bytes is not None:
            if isinstance(quota_bytes, bool) or not isinstance(quota_bytes, int):
                raise ConfigError(
                    f"Must be an integer or null, got {type(quota_bytes).__name__}",
                    'quota_bytes'
                )
            if quota_bytes <= 0:
                raise ConfigError("Must be positive", 'quota_bytes')

        autosave_delay = config_dict.get('autosave_delay', defaults.autosave_delay)
        if isinstance(autosave_delay, bool) or not isinstance(autosave_delay, (int, float)):
            raise ConfigError(
                f"Must be a number, got {type(autosave_delay).__name__}",
                'autosave_delay'
            )
        if autosave_delay < 0:
            raise ConfigError("Must not be negative", 'autosave_delay')

        app_name = config_dict.get('app_name', defaults.app_name)
        if not isinstance(app_name, str) or not app_name.strip():
            raise ConfigError("Must be a non-empty string", 'app_name')

        return WorkspaceConfig(
            store_dir=store_dir,
            storage_key=storage_key,
            quota_bytes=quota_bytes,
            autosave_delay=float(autosave_delay),
            app_name=app_name.strip(),
        )
