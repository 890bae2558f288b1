"""
Strata Cache - Configuration Loader

Loads and validates configuration from environment variables and .env files.
Provides a lazily loaded configuration instance for the runtime.
"""

import logging
import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import ValidationError

from ..errors import ConfigurationError
from .schemas import StrataConfig

logger = logging.getLogger(__name__)

_config_instance: StrataConfig | None = None


def load_config(
    env_file: str | None = None,
    reload: bool = False,
) -> StrataConfig:
    """
    Load configuration from environment variables and .env file.

    Args:
        env_file: Path to .env file (default: .env in current directory)
        reload: Force reload even if config already loaded

    Returns:
        Validated StrataConfig instance

    Raises:
        ConfigurationError: If configuration is invalid
    """
    global _config_instance

    if _config_instance is not None and not reload:
        return _config_instance

    if env_file:
        env_path = Path(env_file)
    else:
        env_path = Path.cwd() / ".env"

    if env_path.exists():
        logger.info(f"Loading environment from {env_path}")
        try:
            load_dotenv(env_path, override=True)
        except Exception as e:
            logger.error(
                f"Failed to load .env file from {env_path}: {e}",
                extra={"path": str(env_path), "error": str(e)},
                exc_info=True,
            )
            raise ConfigurationError(
                f"Failed to load environment file: {e}",
                details={"path": str(env_path), "error": str(e)},
            ) from e
    else:
        logger.debug("No .env file found, using environment variables only")

    try:
        config_dict = {
            "environment": os.getenv("ENVIRONMENT", "development"),
            "log_level": os.getenv("LOG_LEVEL", "INFO").upper(),
            "log_format": os.getenv("LOG_FORMAT", "json").lower(),
            "cache": {
                "backend": os.getenv("CACHE_BACKEND", "memory"),
                "max_size": int(os.getenv("CACHE_MAX_SIZE", "1024")),
                "default_ttl_minutes": int(os.getenv("CACHE_DEFAULT_TTL_MINUTES", "60")),
                "watch_poll_interval_seconds": float(os.getenv("CACHE_WATCH_POLL_INTERVAL", "1.0")),
            },
        }
    except ValueError as e:
        raise ConfigurationError(
            f"Malformed numeric environment variable: {e}",
            details={"error": str(e)},
        ) from e

    try:
        _config_instance = StrataConfig(**config_dict)  # type: ignore[arg-type]
        logger.info(
            f"Configuration loaded successfully (environment: {_config_instance.environment})",
            extra={"environment": _config_instance.environment, "cache_backend": _config_instance.cache.backend},
        )
        return _config_instance
    except ValidationError as e:
        logger.error(
            f"Configuration validation failed: {e}",
            extra={"validation_errors": e.errors(), "config_dict_keys": list(config_dict.keys())},
        )
        raise ConfigurationError(
            "Configuration validation failed. Check your environment variables and configuration.",
            details={"validation_errors": e.errors()},
        ) from e


def get_config() -> StrataConfig:
    """
    Get the current configuration instance, loading it on first access.

    Returns:
        Current StrataConfig instance
    """
    if _config_instance is None:
        return load_config()

    return _config_instance


def reload_config(env_file: str | None = None) -> StrataConfig:
    """
    Force reload configuration.

    Args:
        env_file: Optional path to .env file

    Returns:
        Reloaded StrataConfig instance
    """
    return load_config(env_file=env_file, reload=True)
