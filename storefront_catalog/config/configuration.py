"""Configuration module for the storefront catalog.

Loads settings from environment-specific config files:
- APP_ENV=dev  → config_dev.yaml (long cache window, verbose logging)
- APP_ENV=test → config_test.yaml (server-like settings)
- Default      → config.yaml

Remote store credentials are loaded from the .env file. Unlike the other
settings they are optional: without them the catalog serves the bundled
static snapshot.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import yaml
from dotenv import load_dotenv


# Freshness windows when the config file does not set one
SERVER_FRESHNESS_WINDOW_MS = 60_000
DEV_FRESHNESS_WINDOW_MS = 300_000


class ConfigurationError(Exception):
    """Raised when required configuration is missing or invalid."""
    pass


def _get_project_root() -> Path:
    """Get the project root directory (where config.yaml lives)."""
    # Navigate from storefront_catalog/config/ up to project root
    return Path(__file__).parent.parent.parent


def _get_config_filename() -> str:
    """Get config filename based on APP_ENV environment variable.

    Returns:
        Config filename:
        - APP_ENV=dev  → config_dev.yaml
        - APP_ENV=test → config_test.yaml
        - Default      → config.yaml
    """
    app_env = os.environ.get("APP_ENV", "").lower()

    if app_env == "dev":
        return "config_dev.yaml"
    elif app_env == "test":
        return "config_test.yaml"
    else:
        return "config.yaml"


def _load_yaml_config() -> dict:
    """Load configuration from environment-specific config file."""
    config_filename = _get_config_filename()
    config_path = _get_project_root() / config_filename

    if not config_path.exists():
        raise ConfigurationError(
            f"Configuration file not found: {config_path}. "
            f"Set APP_ENV to 'dev' or 'test', or create {config_filename}."
        )

    with open(config_path, "r") as f:
        try:
            return yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {config_path}: {e}") from e


def _get_optional_env(key: str, default: Optional[str] = None) -> Optional[str]:
    """Get optional environment variable with default."""
    return os.environ.get(key, default)


def _get_int(section: dict, key: str, default: int) -> int:
    """Read a non-negative integer setting or raise ConfigurationError."""
    value = section.get(key, default)
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"Setting '{key}' must be an integer, got {value!r}")
    if number < 0:
        raise ConfigurationError(f"Setting '{key}' must not be negative, got {number}")
    return number


def _get_bool(section: dict, key: str, default: bool) -> bool:
    """Read a boolean setting or raise ConfigurationError."""
    value = section.get(key, default)
    if not isinstance(value, bool):
        raise ConfigurationError(f"Setting '{key}' must be true or false, got {value!r}")
    return value


@dataclass(frozen=True)
class CosmosDBConfig:
    """Azure Cosmos DB configuration for the remote product store."""
    endpoint: str
    key: str
    database_name: str
    container_name: str
    partition_key_path: str


@dataclass(frozen=True)
class CatalogServiceConfig:
    """Catalog service behaviour."""
    freshness_window_ms: int
    verbose_logging: bool


@dataclass(frozen=True)
class StaticCatalogConfig:
    """Bundled static snapshot location. None means the packaged products.json."""
    path: Optional[str]


@dataclass(frozen=True)
class LoggingConfig:
    """Logging configuration."""
    level: str


@dataclass(frozen=True)
class AppConfig:
    """Main application configuration container."""
    catalog: CatalogServiceConfig
    static_catalog: StaticCatalogConfig
    logging: LoggingConfig
    cosmosdb: Optional[CosmosDBConfig]  # None when credentials are not set


def load_config() -> AppConfig:
    """
    Load and validate all application configuration.

    Loads from the environment's YAML file for non-sensitive settings and
    .env for remote store credentials.

    Returns:
        AppConfig: Validated application configuration.

    Raises:
        ConfigurationError: If the config file is missing or a value is invalid.
    """
    # Load environment variables from .env file
    load_dotenv()

    # Load YAML configuration
    yaml_config = _load_yaml_config()
    is_dev = get_environment() == "dev"

    # Build catalog service config
    catalog_section = yaml_config.get("catalog", {})
    default_window = DEV_FRESHNESS_WINDOW_MS if is_dev else SERVER_FRESHNESS_WINDOW_MS

    catalog_config = CatalogServiceConfig(
        freshness_window_ms=_get_int(catalog_section, "freshness_window_ms", default_window),
        verbose_logging=_get_bool(catalog_section, "verbose_logging", is_dev),
    )

    # Build static catalog config
    static_section = yaml_config.get("static_catalog", {})

    static_catalog_config = StaticCatalogConfig(
        path=static_section.get("path"),
    )

    # Build Logging config
    logging_section = yaml_config.get("logging", {})

    logging_config = LoggingConfig(
        level=logging_section.get("level", "DEBUG" if is_dev else "INFO"),
    )

    # Build CosmosDB config (only if both credentials are present)
    cosmosdb_config: Optional[CosmosDBConfig] = None
    endpoint = _get_optional_env("COSMOSDB_ENDPOINT")
    key = _get_optional_env("COSMOSDB_KEY")
    if endpoint and key:
        cosmosdb_section = yaml_config.get("cosmosdb", {})
        cosmosdb_config = CosmosDBConfig(
            endpoint=endpoint,
            key=key,
            database_name=cosmosdb_section.get("database_name", "storefront"),
            container_name=cosmosdb_section.get("container_name", "products"),
            partition_key_path=cosmosdb_section.get("partition_key_path", "/id"),
        )

    return AppConfig(
        catalog=catalog_config,
        static_catalog=static_catalog_config,
        logging=logging_config,
        cosmosdb=cosmosdb_config,
    )


# Module-level singleton for convenience
_config: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """
    Get the application configuration singleton.

    Lazy-loads configuration on first access.
    Config file is selected based on APP_ENV environment variable.

    Returns:
        AppConfig: Application configuration.

    Raises:
        ConfigurationError: If configuration is missing or invalid.
    """
    global _config
    if _config is None:
        _config = load_config()
    return _config


def get_environment() -> str:
    """Get current environment name.

    Returns:
        'dev', 'test', or 'default' based on APP_ENV.
    """
    app_env = os.environ.get("APP_ENV", "").lower()
    return app_env if app_env in ("dev", "test") else "default"


def reset_config() -> None:
    """Reset the config singleton. Useful for testing."""
    global _config
    _config = None
