"""
Query Layer.

Builds Flux queries and delete predicates from encoded identifiers.
"""

from timeseries_influxdb.query.builder import (
    VALUE_FIELD,
    build_delete_predicate,
    build_range_query,
    build_scan_query,
    flux_duration,
    format_timestamp,
)

__all__ = [
    "VALUE_FIELD",
    "build_delete_predicate",
    "build_range_query",
    "build_scan_query",
    "flux_duration",
    "format_timestamp",
]
