"""Simple YAML configuration loader for Vox."""

import copy
import os
import yaml
from pathlib import Path
from typing import Dict, Any, Optional
import logging

logger = logging.getLogger(__name__)

API_KEY_ENV = "OPENAI_API_KEY"
CONFIG_ENV = "VOX_CONFIG"


def vox_home() -> Path:
    """Directory holding history, logs and the default config file."""
    return Path.home() / ".vox"


def default_history_path() -> str:
    """Default history file: ~/.vox/history.jsonl."""
    return str(vox_home() / "history.jsonl")


DEFAULTS: Dict[str, Any] = {
    "openai": {
        "api_key": None,
        "model": "gpt-4o-mini-transcribe",
        "base_url": "https://api.openai.com/v1",
        "timeout_seconds": 300.0,
    },
    "recording": {
        "sample_rate": 16000,
        "channels": 1,
        "bit_depth": 16,
        "grace_seconds": 3.0,
        "bar_width": 30,
    },
    "history": {
        "path": None,
    },
    "logging": {
        "level": "INFO",
        "file_path": None,
        "console_output": False,
    },
}


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> None:
    for key, value in override.items():
        if value is None and isinstance(base.get(key), dict):
            continue
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            _merge(base[key], value)
        else:
            base[key] = value


class VoxConfig:
    """Vox configuration loader."""

    def __init__(self, config_path: Optional[str] = None):
        """Initialize configuration loader.

        Args:
            config_path: Path to YAML config file. If None, uses $VOX_CONFIG or
                        ~/.vox/config.yaml, falling back to built-in defaults
                        when that file does not exist.
        """
        explicit = config_path or os.environ.get(CONFIG_ENV)
        self.config_file = Path(explicit).expanduser() if explicit else vox_home() / "config.yaml"

        self.config = copy.deepcopy(DEFAULTS)
        if self.config_file.exists():
            logger.info(f"Loading configuration from: {self.config_file}")
            _merge(self.config, self._load_config())
        elif explicit:
            raise FileNotFoundError(f"Configuration file not found: {self.config_file}")
        else:
            logger.debug(f"No configuration file at {self.config_file}, using defaults")
            self._fill_default_paths(self.config)

    def _load_config(self) -> Dict[str, Any]:
        """Load and parse YAML configuration file."""
        try:
            with open(self.config_file, 'r', encoding='utf-8') as f:
                config = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in configuration file: {e}")
        except OSError as e:
            raise ValueError(f"Failed to load configuration: {e}")

        if not isinstance(config, dict):
            raise ValueError("Configuration file must contain a mapping")

        self._resolve_paths(config)
        self._fill_default_paths(config)
        logger.info("Configuration loaded successfully")
        return config

    def _resolve_paths(self, config: Dict[str, Any]) -> None:
        """Resolve relative paths in configuration relative to config file location."""
        config_dir = self.config_file.parent

        for section, key in (("history", "path"), ("logging", "file_path")):
            value = (config.get(section) or {}).get(key)
            if value and not os.path.isabs(os.path.expanduser(value)):
                config[section][key] = str(config_dir / value)

    def _fill_default_paths(self, config: Dict[str, Any]) -> None:
        history = config["history"] = config.get("history") or {}
        if not history.get("path"):
            history["path"] = default_history_path()
        log = config["logging"] = config.get("logging") or {}
        if not log.get("file_path"):
            log["file_path"] = str(vox_home() / "logs" / "vox.log")

    def get(self, key_path: str, default: Any = None) -> Any:
        """Get configuration value using dot notation (e.g., 'openai.model').

        Args:
            key_path: Dot-separated key path
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        keys = key_path.split('.')
        value = self.config

        for key in keys:
            if isinstance(value, dict) and key in value:
                value = value[key]
            else:
                return default

        if value is None:
            return default
        return value

    def set(self, key_path: str, value: Any) -> None:
        """Set configuration value using dot notation."""
        keys = key_path.split('.')
        config_dict = self.config

        for key in keys[:-1]:
            if key not in config_dict:
                config_dict[key] = {}
            config_dict = config_dict[key]

        config_dict[keys[-1]] = value
        logger.debug(f"Configuration key '{key_path}' set to: {value}")

    def get_api_key(self) -> Optional[str]:
        """API key from the environment, then from the config file."""
        return os.environ.get(API_KEY_ENV) or self.get('openai.api_key')

    def get_history_path(self) -> str:
        return str(Path(self.get('history.path')).expanduser())

    def get_log_file_path(self) -> str:
        return str(Path(self.get('logging.file_path')).expanduser())
