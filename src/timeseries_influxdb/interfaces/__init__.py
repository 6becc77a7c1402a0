"""
Interfaces Layer - Abstract Protocols for Dependencies.

Protocols:
    - TimeSeriesBackend: Outbound InfluxDB access
    - TimeSeriesStorage: Inbound storage contract
    - MetricsCollector: Operational metrics abstraction

Design Principles:
    - Use typing.Protocol (not ABC) for Pythonic interfaces
    - Interface Segregation: Small, focused interfaces
"""

from timeseries_influxdb.interfaces.backend import TimeSeriesBackend
from timeseries_influxdb.interfaces.metrics_collector import MetricsCollector
from timeseries_influxdb.interfaces.storage import TimeSeriesStorage

__all__ = [
    "MetricsCollector",
    "TimeSeriesBackend",
    "TimeSeriesStorage",
]
