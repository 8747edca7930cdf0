"""Environment variable loading from .env files with precedence support."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# Recognized environment variables (all optional; TOML and defaults apply when absent)
ENVIRONMENT_VARIABLES = {
    "METASHARE_CONFIG": "Custom configuration file path (defaults to metashare.toml)",
    "METASHARE_CATALOG": "Metadata catalog JSON file (overrides [paths].catalog)",
    "METASHARE_PACKAGES_DIR": "Directory for saved packages (overrides [paths].packages_dir)",
    "METASHARE_ADD_LOCAL_MAPPINGS": "Attach local concept mappings on export (overrides [export].add_local_mappings)",
    "METASHARE_CHUNK_SIZE": "Explicit items per subpackage (overrides [export].chunk_size)",
}

DEFAULT_CONFIG_PATH = "metashare.toml"


def load_environment_variables(dotenv_path: Path | str | None = None) -> None:
    """
    Load environment variables from .env file with automatic detection.

    Environment variables from system environment take precedence over .env file values.
    This function uses python-dotenv's load_dotenv() which respects existing environment
    variables by default (override=False).

    Args:
        dotenv_path: Optional path to .env file. If None, searches for .env file in:
                     - Current working directory
                     - Parent directories (up to 3 levels)
    """
    if dotenv_path is None:
        current = Path.cwd()
        search_paths = [
            current / ".env",
            current.parent / ".env",
            current.parent.parent / ".env",
            current.parent.parent.parent / ".env",
        ]

        for path in search_paths:
            if path.exists():
                dotenv_path = path
                logger.debug(f"Loading .env file from: {path}")
                break

        # If no .env found, dotenv will search automatically
        if dotenv_path is None:
            load_dotenv(override=False)
            return

    dotenv_path = Path(dotenv_path)
    if dotenv_path.exists():
        load_dotenv(dotenv_path, override=False)
        logger.debug(f"Loaded .env file from: {dotenv_path}")
    else:
        logger.debug(f".env file not found at: {dotenv_path}")


def get_env(key: str, default: str | None = None) -> str | None:
    """
    Get environment variable value.

    Args:
        key: Environment variable name
        default: Default value if not found

    Returns:
        Environment variable value or default
    """
    return os.getenv(key, default)


def get_env_bool(key: str, default: bool = False) -> bool:
    """
    Get boolean environment variable.

    Accepts: 'true', '1', 'yes', 'on' (case-insensitive) → True
            'false', '0', 'no', 'off' (case-insensitive) → False
    Unset, empty or unrecognized values return ``default``.

    Args:
        key: Environment variable name
        default: Default value if not found

    Returns:
        Boolean value
    """
    value = os.getenv(key, "").lower().strip()
    if value in ("true", "1", "yes", "on"):
        return True
    if value in ("false", "0", "no", "off"):
        return False
    return default


def get_env_int(key: str) -> int | None:
    """
    Get integer environment variable.

    Returns:
        Parsed integer, or None when unset

    Raises:
        ValueError: If the variable is set but not an integer
    """
    value = get_env(key)
    if value is None or not value.strip():
        return None
    try:
        return int(value)
    except ValueError:
        raise ValueError(
            f"Environment variable {key} must be an integer, got '{value}'.\n"
            f"  Description: {ENVIRONMENT_VARIABLES.get(key, key)}"
        ) from None


def get_config_path(default: str = DEFAULT_CONFIG_PATH) -> str:
    """Configuration file path, honoring METASHARE_CONFIG."""
    return get_env("METASHARE_CONFIG") or default


# Auto-load on import (common pattern for environment modules)
load_environment_variables()
