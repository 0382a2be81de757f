#!/usr/bin/env python3
"""
utils/config.py

Simple configuration management utilities.
Provides centralized configuration loading.
"""

import os
import yaml
from pathlib import Path
from typing import Dict, Any, List, Optional
from imagebuilder_ops.core.constants import (
    DEFAULT_AWS_REGION,
    DEFAULT_IMAGE_CREATE_TIMEOUT_MINUTES,
    DEFAULT_NOT_FOUND_CHECKS,
    DEFAULT_POLL_INTERVAL_SECONDS,
    DEFAULT_STATE_PATH,
    DEFAULT_WAITER_DELAY_SECONDS,
)
from imagebuilder_ops.utils.logger import setup_logger

logger = setup_logger(__name__, "config.log")

CONFIG_DIR_ENV_VAR = "IMAGEBUILDER_OPS_CONFIG_DIR"


class ConfigManager:
    """
    Simple configuration manager.

    Features:
    - YAML configuration loading
    - Environment variable override support
    """

    def __init__(self, config_dir: Optional[Path] = None):
        """
        Initialize ConfigManager.

        Args:
            config_dir: Custom config directory path (defaults to
                $IMAGEBUILDER_OPS_CONFIG_DIR, then PROJECT_ROOT/configs)
        """
        self.project_root = Path(__file__).parent.parent.parent.parent
        env_dir = os.environ.get(CONFIG_DIR_ENV_VAR)
        self.config_dir = Path(config_dir or env_dir or (self.project_root / "configs"))

        # Try both .yml and .yaml extensions
        yml_file = self.config_dir / "settings.yml"
        yaml_file = self.config_dir / "settings.yaml"

        if yml_file.exists():
            self.settings_file = yml_file
        elif yaml_file.exists():
            self.settings_file = yaml_file
        else:
            self.settings_file = yaml_file  # Default to .yaml for error messages

    def _load_yaml_file(self, file_path: Path) -> Dict[str, Any]:
        """
        Load a YAML file safely.
        """
        if not file_path.exists():
            logger.warning(f"Config file not found: {file_path}")
            return {}

        try:
            with open(file_path, "r", encoding="utf-8") as f:
                content = yaml.safe_load(f)
                return content or {}
        except yaml.YAMLError as e:
            logger.error(f"Error loading {file_path}: {e}")
            return {}

    def load_settings(self) -> Dict[str, Any]:
        """
        Load application settings.
        """
        return self._load_yaml_file(self.settings_file)

    def get_value(
        self, key_path: str, default: Any = None, env_var: Optional[str] = None
    ) -> Any:
        """
        Get configuration value with dot notation support and environment variable override.
        """
        # Check environment variable first
        if env_var and env_var in os.environ:
            return os.environ[env_var]

        # Navigate through nested dictionary
        current = self.config
        try:
            for key in key_path.split("."):
                current = current[key]
            return current
        except (KeyError, TypeError):
            return default

    def get_aws_config(self) -> Dict[str, Any]:
        """Get AWS-specific configuration section."""
        return self.get_value("aws", {})

    def get_aws_region(self) -> str:
        """Get AWS region with environment variable override support."""
        return self.get_value("aws.region", DEFAULT_AWS_REGION, env_var="AWS_REGION")

    def get_aws_profile(self) -> Optional[str]:
        return self.get_value("aws.profile", None, env_var="AWS_PROFILE")

    def get_account_id(self) -> str:
        return str(self.get_value("aws.account_id", "") or "")

    def get_provision_role(self) -> str:
        """Get provision role name."""
        return self.get_value("aws.roles.provision", "")

    def get_ignore_tags_config(self) -> Dict[str, List[str]]:
        """Get tag keys and key prefixes excluded from resource state."""
        return {
            "keys": list(self.get_value("ignore_tags.keys", []) or []),
            "key_prefixes": list(self.get_value("ignore_tags.key_prefixes", []) or []),
        }

    def get_image_create_timeout(self) -> int:
        """Get image create timeout in minutes."""
        return int(
            self.get_value(
                "timeouts.image_create_minutes", DEFAULT_IMAGE_CREATE_TIMEOUT_MINUTES
            )
        )

    def get_waiter_config(self) -> Dict[str, int]:
        """Get waiter polling configuration."""
        return {
            "poll_interval": int(
                self.get_value("waiter.poll_interval_seconds", DEFAULT_POLL_INTERVAL_SECONDS)
            ),
            "delay": int(self.get_value("waiter.delay_seconds", DEFAULT_WAITER_DELAY_SECONDS)),
            "not_found_checks": int(
                self.get_value("waiter.not_found_checks", DEFAULT_NOT_FOUND_CHECKS)
            ),
        }

    def get_state_path(self) -> str:
        """Get state file path."""
        return self.get_value("state.path", DEFAULT_STATE_PATH, env_var="IMAGEBUILDER_OPS_STATE")

    def get_logging_level(self) -> str:
        """Get logging level."""
        return self.get_value("logging.level", "INFO", env_var="LOG_LEVEL")

    def get_logging_path(self) -> str:
        """Get logging file path."""
        return self.get_value("logging.path", "logs", env_var="LOG_PATH")

    @property
    def config(self) -> Dict[str, Any]:
        """Get the full configuration as a cached property."""
        if not hasattr(self, "_cached_config"):
            self._cached_config = self.load_settings()
        return self._cached_config

    def reload_config(self) -> None:
        """Force reload of configuration from file."""
        if hasattr(self, "_cached_config"):
            delattr(self, "_cached_config")
