"""
Query Builder - Flux Queries and Delete Predicates.

Builds the literal strings sent to InfluxDB. Measurement names are
interpolated directly, so only MeasurementName values produced by the
codec are accepted.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Optional

from timeseries_influxdb.codec.tag_codec import MeasurementName
from timeseries_influxdb.domain.entities import ensure_utc

VALUE_FIELD = "value"
DEFAULT_SCAN_LOOKBACK = "5y"
DEFAULT_AGGREGATE_FN = "mean"

# RFC3339 with millisecond precision, always UTC
TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S.{millis:03d}Z"


def format_timestamp(value: datetime) -> str:
    """Format a datetime as a Flux time literal in UTC."""
    utc = ensure_utc(value)
    return utc.strftime(TIMESTAMP_FORMAT).format(millis=utc.microsecond // 1000)


def flux_duration(value: timedelta) -> str:
    """
    Format a positive timedelta as a Flux duration literal.

    Whole seconds are written in seconds, anything else in milliseconds,
    with a floor of 1ms.
    """
    millis = max(value // timedelta(milliseconds=1), 1)
    if millis % 1000 == 0:
        return f"{millis // 1000}s"
    return f"{millis}ms"


def flux_string(value: str) -> str:
    """Quote a value as a Flux string literal."""
    escaped = value.replace("\\", "\\\\").replace('"', '\\"').replace("${", "\\${")
    return f'"{escaped}"'


def _require_measurement(measurement: object) -> MeasurementName:
    if not isinstance(measurement, MeasurementName):
        raise TypeError(
            f"Expected an encoded MeasurementName, got {type(measurement).__name__}"
        )
    return measurement


def build_scan_query(bucket: str, lookback: str = DEFAULT_SCAN_LOOKBACK) -> str:
    """
    Build the catalog discovery query.

    Lists the group keys (measurement and tag columns) of every series
    written within the lookback window.
    """
    return (
        f"from(bucket:{flux_string(bucket)})\n"
        f"  |> range(start:-{lookback})\n"
        "  |> keys()"
    )


def build_range_query(
    bucket: str,
    measurement: MeasurementName,
    start: datetime,
    end: datetime,
    step: Optional[timedelta] = None,
    aggregate_fn: str = DEFAULT_AGGREGATE_FN,
) -> str:
    """
    Build the query selecting the value field of one measurement in [start, end).

    Args:
        bucket: Bucket to read from
        measurement: Encoded metric key
        start: Inclusive start
        end: Exclusive end
        step: If given, aggregate into windows of this size
        aggregate_fn: Flux aggregate applied per window

    Returns:
        Flux query string
    """
    measurement = _require_measurement(measurement)
    query = (
        f"from(bucket:{flux_string(bucket)})\n"
        f" |> range(start:{format_timestamp(start)}, stop:{format_timestamp(end)})\n"
        f' |> filter(fn:(r) => r._measurement == "{measurement}")\n'
        f' |> filter(fn:(r) => r._field == "{VALUE_FIELD}")'
    )
    if step is not None:
        query += (
            f"\n |> aggregateWindow(every: {flux_duration(step)}, "
            f"fn: {aggregate_fn}, createEmpty: false)"
        )
    return query


def build_delete_predicate(measurement: MeasurementName) -> str:
    """Build the delete predicate matching every point of a measurement."""
    measurement = _require_measurement(measurement)
    return f'_measurement="{measurement}"'
