"""
Adapters Package - Infrastructure Implementations.

This package contains concrete implementations of the abstract
interfaces defined in the interfaces package. Following the
Hexagonal Architecture (Ports & Adapters) pattern.

Storage:
    - InfluxDBStorage: TimeSeriesStorage on InfluxDB 2.x

Backends:
    - InfluxDBClientBackend: influxdb-client based TimeSeriesBackend

Metrics:
    - InMemoryMetricsCollector: Simple in-memory collection
"""

from timeseries_influxdb.adapters.influxdb_backend import InfluxDBClientBackend
from timeseries_influxdb.adapters.influxdb_storage import InfluxDBStorage, sample_to_point
from timeseries_influxdb.adapters.metrics_collector import InMemoryMetricsCollector

__all__ = [
    "InMemoryMetricsCollector",
    "InfluxDBClientBackend",
    "InfluxDBStorage",
    "sample_to_point",
]
