"""
Domain Layer.

Contains the time-series model shared by all other packages:
    - Tag, TagType: classified key/value pairs
    - Metric: key plus intrinsic and meta tag sets
    - Sample: a metric value at a point in time
    - TimeSeriesFetchRequest: input for range reads
"""

from timeseries_influxdb.domain.entities import (
    Metric,
    Sample,
    Tag,
    TagType,
    TimeSeriesFetchRequest,
    ensure_utc,
)

__all__ = [
    "Metric",
    "Sample",
    "Tag",
    "TagType",
    "TimeSeriesFetchRequest",
    "ensure_utc",
]
