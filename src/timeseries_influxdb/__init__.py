"""
Timeseries InfluxDB - Time Series Storage Adapter for InfluxDB 2.x.

Persists metrics (a key plus intrinsic and meta tags) and their numeric
samples in InfluxDB, and lists known metrics from a cached catalog.

Architecture:
    - Hexagonal Architecture (Ports & Adapters)
    - Dependency Injection for testability
    - Configuration-driven behavior via YAML

Main Components:
    - domain: Core entities (Metric, Tag, Sample, TimeSeriesFetchRequest)
    - codec: Lossless mapping of keys and tags to InfluxDB identifiers
    - query: Flux query and delete predicate construction
    - caching: TTL/LRU cache with single-flight loading
    - catalog: Cached metric catalog
    - adapters: InfluxDBStorage facade and the influxdb-client backend
    - config: Configuration models and loaders

Example:
    >>> from timeseries_influxdb import InfluxDBStorage, load_config
    >>> with InfluxDBStorage.from_config(load_config("storage.yaml")) as storage:
    ...     metrics = storage.list_metrics()
"""

import logging

from timeseries_influxdb.adapters.influxdb_storage import InfluxDBStorage
from timeseries_influxdb.config.loader import load_config
from timeseries_influxdb.domain.entities import (
    Metric,
    Sample,
    Tag,
    TagType,
    TimeSeriesFetchRequest,
)
from timeseries_influxdb.resilience.error_handler import ConfigurationError, StorageError

__version__ = "0.1.0"


def configure_logging(
    level: int = logging.INFO,
    format: str = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
) -> None:
    """
    Configure logging for the storage adapter.

    Call this at application startup to see log messages.
    By default, only WARNING and above are visible.

    Args:
        level: Logging level (default: INFO)
        format: Log message format

    Example:
        >>> import timeseries_influxdb
        >>> timeseries_influxdb.configure_logging(logging.DEBUG)
    """
    logging.basicConfig(
        level=level,
        format=format,
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    logging.getLogger("timeseries_influxdb").setLevel(level)


__all__ = [
    "ConfigurationError",
    "InfluxDBStorage",
    "Metric",
    "Sample",
    "StorageError",
    "Tag",
    "TagType",
    "TimeSeriesFetchRequest",
    "configure_logging",
    "load_config",
]
