"""
Configuration Layer.

Pydantic models and the YAML loader for adapter settings.
"""

from timeseries_influxdb.config.loader import ConfigLoader, load_config
from timeseries_influxdb.config.models import (
    CatalogConfig,
    ConnectionConfig,
    QueryConfig,
    StorageConfig,
)

__all__ = [
    "CatalogConfig",
    "ConfigLoader",
    "ConnectionConfig",
    "QueryConfig",
    "StorageConfig",
    "load_config",
]
