"""Centralized Configuration Manager for the Sahayak chat.

This module provides a singleton ConfigManager class to load and access
configuration from cfg/config.json with proper defaults and type hints.

Usage:
    from sahayak.config_manager import ConfigManager

    config = ConfigManager.load("cfg/config.json")
    temperature = ConfigManager.get("llm_settings", "temperature", default=0.7)
    policy = ConfigManager.get_policy_config()
"""

import json
import os
import logging
from typing import Any, Dict, Optional, List

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "cfg/config.json"


class ConfigManager:
    """Singleton configuration manager with hierarchical key access."""

    _instance: Optional['ConfigManager'] = None
    _config: Optional[Dict[str, Any]] = None
    _config_path: Optional[str] = None

    def __new__(cls) -> 'ConfigManager':
        """Implement singleton pattern."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    @classmethod
    def load(cls, config_path: str = DEFAULT_CONFIG_PATH) -> Dict[str, Any]:
        """Load configuration from JSON file.

        Args:
            config_path: Path to configuration file. Defaults to cfg/config.json.

        Returns:
            Dictionary containing the entire configuration.

        Raises:
            FileNotFoundError: If configuration file does not exist.
            json.JSONDecodeError: If configuration file is invalid JSON.
        """
        if cls._config is not None and cls._config_path == config_path:
            logger.debug(f"Using cached configuration from {config_path}")
            return cls._config

        if not os.path.exists(config_path):
            logger.error(f"Configuration file not found: {config_path}")
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                config = json.load(f)
        except json.JSONDecodeError as e:
            logger.error(f"Invalid JSON in configuration file: {e}")
            raise

        cls._config = config
        cls._config_path = config_path
        logger.info(f"✅ Configuration loaded from {config_path}")
        return cls._config

    @classmethod
    def get(cls, *keys: str, default: Any = None) -> Any:
        """Get a configuration value using hierarchical keys.

        Examples:
            >>> ConfigManager.get("llm_settings", "model_name")
            "gemini-1.5-pro"

            >>> ConfigManager.get("nonexistent", "key", default="fallback")
            "fallback"
        """
        if cls._config is None:
            cls.load()

        value = cls._config
        for key in keys:
            if isinstance(value, dict):
                value = value.get(key)
                if value is None:
                    logger.debug(f"Key path not found: {' -> '.join(keys)}. Using default: {default}")
                    return default
            else:
                logger.warning(f"Cannot traverse non-dict value at key: {key}")
                return default

        return value if value is not None else default

    @classmethod
    def get_section(cls, section: str) -> Dict[str, Any]:
        """Get an entire configuration section, or an empty dict."""
        if cls._config is None:
            cls.load()

        return cls._config.get(section, {})

    @classmethod
    def validate_required_keys(cls, required_keys: List[str]) -> bool:
        """Validate that all required configuration keys exist.

        Args:
            required_keys: List of dot-separated key paths to validate.
                Example: ["llm_settings.model_name", "request_policy.enabled"]

        Returns:
            True if all keys exist, False otherwise.
        """
        missing_keys = [path for path in required_keys if cls.get(*path.split('.')) is None]

        if missing_keys:
            logger.error(f"Missing required configuration keys: {missing_keys}")
            return False

        logger.debug("All required configuration keys are present")
        return True

    @classmethod
    def get_llm_config(cls) -> Dict[str, Any]:
        """Convenience method to get the model/endpoint settings."""
        return cls.get_section("llm_settings")

    @classmethod
    def get_policy_config(cls) -> Dict[str, Any]:
        """Convenience method to get the quota gate settings."""
        return cls.get_section("request_policy")

    @classmethod
    def get_ui_config(cls) -> Dict[str, Any]:
        """Convenience method to get UI labels."""
        return cls.get_section("ui")
