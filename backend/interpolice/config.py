"""
Configuration Management

Centralized configuration for the Interpolice service. Settings are read
from YAML and JSON files in the config directory, layered over built-in
defaults, with dot-notation access and reload support.
"""

import copy
import json
import logging
import os
from pathlib import Path
from typing import Dict, Any, Optional

import yaml


logger = logging.getLogger(__name__)


DEFAULT_CONFIG: Dict[str, Any] = {
    'interpolice': {
        'jurisdiction': {
            'defaultLocationId': 1,
            'autoRecordCrimeType': 'Accumulated minor citations',
            'manualRecordCrimeType': 'Minor offense',
        },
        'auth': {
            'algorithm': 'HS256',
            'tokenExpiryHours': 24,
            'bcryptRounds': 12,
        },
        'database': {
            'echo': False,
            'sqliteBusyTimeout': 30,
        },
        'pagination': {
            'defaultLimit': 50,
            'maxLimit': 500,
        },
    }
}


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge override into base (base is modified)"""
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            _merge(base[key], value)
        else:
            base[key] = value
    return base


class ConfigManager:
    """
    Manage application configuration from YAML and JSON files

    Provides:
    - Load all config files on startup
    - Dot notation access: config.get('interpolice.jurisdiction.defaultLocationId')
    - Hot reload capability
    - Default values for missing keys
    """

    def __init__(self, config_dir: str = None):
        """
        Initialize configuration manager

        Args:
            config_dir: Path to config directory
                (default: $INTERPOLICE_CONFIG_DIR or backend/config)
        """
        if config_dir:
            self.config_dir = Path(config_dir)
        elif os.getenv("INTERPOLICE_CONFIG_DIR"):
            self.config_dir = Path(os.environ["INTERPOLICE_CONFIG_DIR"])
        else:
            self.config_dir = Path(__file__).parent.parent / "config"

        self.configs: Dict[str, Any] = {}
        self._load_all_configs()

    def _load_all_configs(self):
        """Load defaults, then every configuration file in the config directory"""
        self.configs = copy.deepcopy(DEFAULT_CONFIG)

        if not self.config_dir.exists():
            logger.info("Config directory %s not found, using defaults", self.config_dir)
            return

        for yaml_file in sorted(self.config_dir.glob("*.yaml")):
            with open(yaml_file, 'r') as f:
                loaded = yaml.safe_load(f) or {}
            _merge(self.configs.setdefault(yaml_file.stem, {}), loaded)
            logger.debug("Loaded config: %s", yaml_file.name)

        for json_file in sorted(self.config_dir.glob("*.json")):
            with open(json_file, 'r') as f:
                loaded = json.load(f)
            _merge(self.configs.setdefault(json_file.stem, {}), loaded)
            logger.debug("Loaded config: %s", json_file.name)

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value by dot notation key

        Examples:
            config.get('interpolice.auth.tokenExpiryHours')
            config.get('interpolice.jurisdiction.defaultLocationId')

        Args:
            key: Dot-separated key path
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        value = self.configs

        for k in key.split('.'):
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default
        return value

    def get_jurisdiction_config(self) -> Dict[str, Any]:
        """Get jurisdiction configuration section"""
        return self.get('interpolice.jurisdiction', {})

    def get_auth_config(self) -> Dict[str, Any]:
        """Get auth configuration section"""
        return self.get('interpolice.auth', {})

    def get_database_config(self) -> Dict[str, Any]:
        """Get database configuration section"""
        return self.get('interpolice.database', {})

    def reload(self):
        """Reload all configuration files"""
        logger.info("Reloading configuration from %s", self.config_dir)
        self.configs.clear()
        self._load_all_configs()

    def set(self, key: str, value: Any):
        """
        Set a configuration value (runtime only, not persisted)

        Args:
            key: Dot-separated key path
            value: Value to set
        """
        keys = key.split('.')
        config = self.configs

        for k in keys[:-1]:
            if k not in config:
                config[k] = {}
            config = config[k]

        config[keys[-1]] = value


def configure_logging(level: Optional[str] = None):
    """Configure root logging from LOG_LEVEL (default INFO)"""
    logging.basicConfig(
        level=(level or os.getenv("LOG_LEVEL", "INFO")).upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


# Global configuration instance
_config: Optional[ConfigManager] = None


def get_config() -> ConfigManager:
    """Get the global configuration instance"""
    global _config
    if _config is None:
        _config = ConfigManager()
    return _config
