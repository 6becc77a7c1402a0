"""
Catalog Layer.

MetricCatalog keeps a cached, filterable list of every stored metric.
"""

from timeseries_influxdb.catalog.metric_catalog import MetricCatalog, metric_from_values

__all__ = ["MetricCatalog", "metric_from_values"]
