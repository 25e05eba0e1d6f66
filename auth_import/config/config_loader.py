"""
Configuration loader for the auth import engine.
Supports multiple environments and configuration validation.
"""

import json
import os
import logging
from pathlib import Path
from typing import Dict, Any, List, Optional
from dotenv import load_dotenv

logger = logging.getLogger(__name__)


class ConfigLoader:
    """Loads and validates configuration from JSON files."""

    REQUIRED_SECTIONS = ["environment", "import", "provider"]

    def __init__(self, config_file: str = "configs/config.json", environment: str = None, base_path: Optional[Path] = None):
        """
        Initialize config loader.

        Args:
            config_file: Path to configuration file, relative to base_path unless absolute
            environment: Environment name ("dev", "prod", ...), overridden by IMPORT_ENVIRONMENT
            base_path: Project root holding configs/ and envs/ (defaults to the current directory)
        """
        self.config_file = config_file
        self.config: Dict[str, Any] = {}
        self.environment = environment or "dev"
        self.base_path = Path(base_path) if base_path else Path.cwd()
        self._load_environment_config()
        self._load_config()
        self._validate_config()

    def _load_environment_config(self):
        """Load environment-specific .env overlays."""
        main_env_path = self.base_path / "envs" / ".env"
        if main_env_path.exists():
            load_dotenv(main_env_path, override=False)
            logger.debug("Loaded main env config from %s", main_env_path)

        env_from_file = os.getenv("IMPORT_ENVIRONMENT")
        if env_from_file:
            self.environment = env_from_file

        env_file_path = self.base_path / "envs" / f".env.{self.environment}"
        if env_file_path.exists():
            load_dotenv(env_file_path, override=True)
            logger.debug("Loaded %s specific config from %s", self.environment, env_file_path)

    def _load_config(self):
        """Load configuration from JSON file."""
        config_path = Path(self.config_file)
        if not config_path.is_absolute():
            config_path = self.base_path / config_path
        try:
            with open(config_path, "r", encoding="utf-8") as f:
                self.config = json.load(f)
        except FileNotFoundError:
            raise FileNotFoundError(f"Configuration file {config_path} not found")
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in configuration file {config_path}: {e}")
        logger.debug("Loaded configuration from %s", config_path)

    def _validate_config(self):
        """Validate required configuration sections."""
        for section in self.REQUIRED_SECTIONS:
            if section not in self.config:
                raise ValueError(f"Missing required configuration section: {section}")

    def get(self, key_path: str, default: Any = None) -> Any:
        """
        Get configuration value using dot notation.

        Args:
            key_path: Dot-separated path (e.g., "async_config.rate_limiting.burst_size")
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        value = self.config
        try:
            for key in key_path.split("."):
                value = value[key]
            return value
        except (KeyError, TypeError):
            return default

    def get_supported_versions(self) -> List[int]:
        return list(self.get("import.supported_versions", [1]))

    def get_resource_category(self) -> str:
        return self.get("import.resource_category", "auth")

    def get_provenance_key(self) -> str:
        return self.get("import.provenance_key", "serviceType")

    def get_imported_marker(self) -> str:
        return self.get("import.imported_marker", "imported")

    def get_provider_name(self) -> str:
        return self.get("provider.name", "http")

    def is_debug_mode(self) -> bool:
        return bool(self.get("environment.debug", False))

    def setup_logging(self):
        """Setup logging based on configuration."""
        log_level = self.get("environment.log_level", "INFO")
        level = getattr(logging, str(log_level).upper(), logging.INFO)
        format_str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s" if self.is_debug_mode() else "%(message)s"

        logging.basicConfig(level=level, format=format_str, handlers=[logging.StreamHandler()])
        if self.is_debug_mode():
            logger.debug("Debug mode enabled for environment %s", self.environment)
