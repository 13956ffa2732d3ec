"""Configuration module."""

from storefront_catalog.config.configuration import (
    AppConfig,
    CatalogServiceConfig,
    ConfigurationError,
    CosmosDBConfig,
    LoggingConfig,
    StaticCatalogConfig,
    get_config,
    get_environment,
    load_config,
    reset_config,
)

__all__ = [
    "AppConfig",
    "CatalogServiceConfig",
    "ConfigurationError",
    "CosmosDBConfig",
    "LoggingConfig",
    "StaticCatalogConfig",
    "get_config",
    "get_environment",
    "load_config",
    "reset_config",
]
