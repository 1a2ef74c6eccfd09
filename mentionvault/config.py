"""
Configuration management for mentionvault.

This module handles loading and accessing configuration values from config.yaml.
The entry point builds one ConfigManager and passes it to whatever needs it;
nothing in the package reads configuration from module-level state.
"""

import copy
import yaml
from pathlib import Path
from typing import Any, Dict, List
import logging


DEFAULT_CONFIG: Dict[str, Any] = {
    "vault": {
        "path": ".",
        "extension": ".md",
        "exclude_dirs": [".git", ".obsidian", ".trash"]
    },
    "database": {
        "filename": "mentionvault.db"
    },
    "mentions": {
        "auto_update": True,
        "default_form": "wikilink"
    },
    "git": {
        "auto_commit": False,
        "author_name": "mentionvault",
        "author_email": "mentionvault@localhost"
    },
    "logging": {
        "level": "INFO",
        "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    },
    "paths": {
        "log_file": "mentionvault.log"
    }
}


class ConfigManager:
    """
    Manages configuration loading and access for mentionvault.
    """

    def __init__(self, config_path: str = "config.yaml"):
        """
        Initialize the configuration manager.

        Args:
            config_path: Path to the configuration file
        """
        self.config_path = Path(config_path)
        self._config: Dict[str, Any] = {}
        self._load_config()

    def _load_config(self) -> None:
        """Load configuration from YAML file, layered over the defaults."""
        try:
            if not self.config_path.exists():
                raise FileNotFoundError(f"Configuration file not found: {self.config_path}")

            with open(self.config_path, 'r', encoding='utf-8') as f:
                loaded = yaml.safe_load(f) or {}

            if not isinstance(loaded, dict):
                raise ValueError(f"Configuration root must be a mapping, got {type(loaded).__name__}")

            self._config = self._merge(self._get_default_config(), loaded)
            logging.info(f"Configuration loaded from {self.config_path}")

        except (OSError, ValueError, yaml.YAMLError) as e:
            logging.warning(f"Failed to load configuration, using defaults: {e}")
            self._config = self._get_default_config()

    def _get_default_config(self) -> Dict[str, Any]:
        """Get default configuration values as fallback."""
        return copy.deepcopy(DEFAULT_CONFIG)

    @classmethod
    def _merge(cls, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        for key, value in override.items():
            if isinstance(value, dict) and isinstance(base.get(key), dict):
                base[key] = cls._merge(base[key], value)
            else:
                base[key] = value
        return base

    def get(self, key_path: str, default: Any = None) -> Any:
        """
        Get a configuration value using dot notation.

        Args:
            key_path: Dot-separated path to the configuration value (e.g., "vault.path")
            default: Default value if key is not found

        Returns:
            The configuration value

        Examples:
            config.get("mentions.auto_update")  # Returns True
            config.get("vault.extension")       # Returns ".md"
        """
        keys = key_path.split('.')
        value = self._config

        for key in keys:
            if isinstance(value, dict) and key in value:
                value = value[key]
            else:
                return default

        return value

    def get_section(self, section: str) -> Dict[str, Any]:
        """
        Get an entire configuration section.

        Args:
            section: Name of the configuration section

        Returns:
            Dictionary containing the section configuration
        """
        return self._config.get(section, {})

    def set(self, key_path: str, value: Any) -> None:
        """Override a value in memory (the file is not touched)."""
        keys = key_path.split('.')
        section = self._config
        for key in keys[:-1]:
            section = section.setdefault(key, {})
        section[keys[-1]] = value

    def reload(self) -> None:
        """Reload configuration from file."""
        self._load_config()

    # Convenience properties for commonly used values

    @property
    def vault_path(self) -> str:
        """Get vault root directory."""
        return self.get("vault.path", ".")

    @property
    def document_extension(self) -> str:
        """Get the file extension of vault documents."""
        return self.get("vault.extension", ".md")

    @property
    def exclude_dirs(self) -> List[str]:
        """Get directory names skipped while listing the vault."""
        return self.get("vault.exclude_dirs", [".git", ".obsidian", ".trash"])

    @property
    def database_filename(self) -> str:
        """Get database filename."""
        return self.get("database.filename", "mentionvault.db")

    @property
    def auto_update_mentions(self) -> bool:
        """Whether participant edits are propagated to vault mentions."""
        return bool(self.get("mentions.auto_update", True))

    @property
    def default_mention_form(self) -> str:
        """Get the mention form used when inserting new mentions."""
        return self.get("mentions.default_form", "wikilink")

    @property
    def auto_commit(self) -> bool:
        """Whether rewrite passes are committed to the vault's git repository."""
        return bool(self.get("git.auto_commit", False))

    @property
    def log_filename(self) -> str:
        """Get log file name."""
        return self.get("paths.log_file", "mentionvault.log")
