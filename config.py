"""Configuration settings for invoice analysis."""

import json
import os
from pathlib import Path


class Config:
    """Application configuration settings."""

    # Directories
    OUTPUT_DIR = Path("output")

    # Parsing
    PARSE_CHUNK_SIZE = 1000  # rows delivered per chunk
    RECONCILE_BATCH_SIZE = 500  # invoices joined per batch
    MAX_ERRORS = 100
    SKIP_ERRORS = True

    # File handling
    MAX_FILE_SIZE = 50 * 1024 * 1024
    MAX_STORED_FILE_SIZE = 5 * 1024 * 1024  # originals kept for reprocessing

    # Chart cache
    CACHE_TTL_SECONDS = 5 * 60

    # Export
    DATE_FORMAT = "%Y-%m-%d"

    # Logging
    LOG_LEVEL = "INFO"
    LOG_FILE = "invoice_analysis.log"

    # Environment tracking
    CURRENT_ENVIRONMENT = None

    @classmethod
    def load_environment(
        cls, env_name: str = None, config_file: str = "environments.json"
    ):
        """
        Load configuration from environments.json file.

        Args:
            env_name: Name of the environment to load (e.g., 'laptop', 'nas').
                     If None, uses INVOICE_ENV or the default from the config file.
            config_file: Path to the environments configuration file.

        Returns:
            Name of the loaded environment

        Raises:
            FileNotFoundError: If the config file doesn't exist.
            ValueError: If specified environment doesn't exist in config.
        """
        config_path = Path(config_file)

        if not config_path.exists():
            raise FileNotFoundError(
                f"Environment configuration file not found: {config_file}\n"
                "Create environments.json with your machine-specific settings."
            )

        with open(config_path, encoding="utf-8") as f:
            env_config = json.load(f)

        # Priority: explicit argument, INVOICE_ENV, file default
        if env_name is None:
            env_name = os.getenv("INVOICE_ENV", env_config.get("default"))

        environments = env_config.get("environments", {})
        if env_name not in environments:
            available = ", ".join(environments.keys())
            raise ValueError(
                f"Environment '{env_name}' not found in {config_file}.\n"
                f"Available environments: {available}"
            )

        env_settings = environments[env_name]

        cls.OUTPUT_DIR = Path(env_settings.get("output_dir", cls.OUTPUT_DIR))
        cls.PARSE_CHUNK_SIZE = int(
            env_settings.get("parse_chunk_size", cls.PARSE_CHUNK_SIZE)
        )
        cls.RECONCILE_BATCH_SIZE = int(
            env_settings.get("reconcile_batch_size", cls.RECONCILE_BATCH_SIZE)
        )
        cls.MAX_ERRORS = int(env_settings.get("max_errors", cls.MAX_ERRORS))
        cls.SKIP_ERRORS = bool(env_settings.get("skip_errors", cls.SKIP_ERRORS))
        cls.CACHE_TTL_SECONDS = float(
            env_settings.get("cache_ttl_seconds", cls.CACHE_TTL_SECONDS)
        )
        cls.LOG_LEVEL = env_settings.get("log_level", cls.LOG_LEVEL)
        cls.CURRENT_ENVIRONMENT = env_name

        # Environment variables still win over the file
        cls._apply_env_overrides()

        return env_name

    @classmethod
    def _apply_env_overrides(cls):
        """Apply environment variable overrides after loading base config."""
        if os.getenv("OUTPUT_DIR"):
            cls.OUTPUT_DIR = Path(os.getenv("OUTPUT_DIR"))
        if os.getenv("LOG_LEVEL"):
            cls.LOG_LEVEL = os.getenv("LOG_LEVEL")
        if os.getenv("INVOICE_MAX_ERRORS"):
            cls.MAX_ERRORS = int(os.getenv("INVOICE_MAX_ERRORS"))
        if os.getenv("INVOICE_SKIP_ERRORS"):
            cls.SKIP_ERRORS = os.getenv("INVOICE_SKIP_ERRORS", "true").lower() == "true"
        if os.getenv("INVOICE_CHUNK_SIZE"):
            cls.PARSE_CHUNK_SIZE = int(os.getenv("INVOICE_CHUNK_SIZE"))
        if os.getenv("INVOICE_CACHE_TTL"):
            cls.CACHE_TTL_SECONDS = float(os.getenv("INVOICE_CACHE_TTL"))

    @classmethod
    def load_from_env(cls):
        """
        Load configuration from environment variables only.

        Useful for containers and CI where no environments.json is shipped.
        """
        cls._apply_env_overrides()

    @classmethod
    def list_environments(cls, config_file: str = "environments.json") -> dict:
        """
        List all available environments from config file.

        Args:
            config_file: Path to the environments configuration file.

        Returns:
            Dict mapping environment names to their descriptions and settings.
        """
        config_path = Path(config_file)

        if not config_path.exists():
            return {}

        with open(config_path, encoding="utf-8") as f:
            env_config = json.load(f)

        return {
            name: {
                "description": settings.get("description", "No description"),
                "output_dir": settings.get("output_dir", str(cls.OUTPUT_DIR)),
                "is_default": name == env_config.get("default"),
            }
            for name, settings in env_config.get("environments", {}).items()
        }

    @classmethod
    def ensure_directories(cls):
        """Create necessary directories if they don't exist."""
        cls.OUTPUT_DIR.mkdir(parents=True, exist_ok=True)
