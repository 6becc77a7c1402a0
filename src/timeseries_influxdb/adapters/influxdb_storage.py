"""
InfluxDB Storage - Time Series Storage Backed by InfluxDB 2.x.

Design choices:
    - the _measurement column holds the encoded metric key
    - tag keys are prefixed with the tag type ('intrinsic' or 'meta')
    - the sample value is stored in a single field named "value"
    - fetched samples are bound to the requested metric, not rebuilt from
      row tags, because the range query is scoped to one measurement

Design Notes:
    - Writes are per sample; a failing store leaves earlier samples written
    - No locking: store, fetch and delete hold no shared state; only the
      metric catalog is cached
    - Owns the backend and closes it exactly once
"""

from __future__ import annotations

import logging
import threading
from datetime import datetime, timedelta, timezone
from typing import Iterable, List, Optional

from influxdb_client import Point, WritePrecision

from timeseries_influxdb.adapters.influxdb_backend import InfluxDBClientBackend
from timeseries_influxdb.caching.cache_manager import CacheManagerProtocol
from timeseries_influxdb.catalog.metric_catalog import MetricCatalog
from timeseries_influxdb.codec.tag_codec import (
    classify_tag_key,
    encode_metric_key,
    encode_tag_value,
)
from timeseries_influxdb.config.models import CatalogConfig, QueryConfig, StorageConfig
from timeseries_influxdb.domain.entities import (
    Metric,
    Sample,
    Tag,
    TagType,
    TimeSeriesFetchRequest,
    ensure_utc,
)
from timeseries_influxdb.interfaces.backend import TimeSeriesBackend
from timeseries_influxdb.interfaces.metrics_collector import MetricsCollector
from timeseries_influxdb.query.builder import (
    VALUE_FIELD,
    build_delete_predicate,
    build_range_query,
)
from timeseries_influxdb.resilience.error_handler import ConfigurationError, ErrorHandler
from timeseries_influxdb.validation.request_validator import FetchRequestValidator

logger = logging.getLogger(__name__)

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def to_epoch_millis(value: datetime) -> int:
    """Milliseconds since the epoch, without float rounding."""
    return (ensure_utc(value) - EPOCH) // timedelta(milliseconds=1)


def sample_to_point(sample: Sample) -> Point:
    """Convert a sample into an InfluxDB point with classified tags."""
    metric = sample.metric
    point = (
        Point(encode_metric_key(metric.key))
        .field(VALUE_FIELD, float(sample.value))
        .time(to_epoch_millis(sample.time), WritePrecision.MS)
    )
    for tag_type in TagType:
        for tag in metric.tags_of(tag_type):
            # InfluxDB has a problem with colons in tag values we filter on
            point.tag(classify_tag_key(tag_type, tag), encode_tag_value(tag.value))
    return point


class InfluxDBStorage:
    """
    TimeSeriesStorage implementation that uses InfluxDB.

    Usage:
        config = load_config("config/storage.yaml")
        with InfluxDBStorage.from_config(config) as storage:
            storage.store(samples)
            metrics = storage.list_metrics([Tag(key="resourceId", value="r1")])
    """

    def __init__(
        self,
        backend: TimeSeriesBackend,
        bucket: str = "opennms",
        org: str = "opennms",
        catalog_config: Optional[CatalogConfig] = None,
        query_config: Optional[QueryConfig] = None,
        cache_manager: Optional[CacheManagerProtocol] = None,
        metrics_collector: Optional[MetricsCollector] = None,
        error_handler: Optional[ErrorHandler] = None,
    ) -> None:
        """
        Initialize the storage.

        Args:
            backend: InfluxDB access, owned by this storage from now on
            bucket: Bucket all data is written to
            org: Organization owning the bucket
            catalog_config: Metric catalog settings
            query_config: Range query settings
            cache_manager: Cache for the metric catalog
            metrics_collector: Optional collector for catalog metrics
            error_handler: Translates backend failures into StorageError

        Raises:
            ConfigurationError: If bucket or org is missing
        """
        if not bucket:
            raise ConfigurationError("Parameter influxdb bucket cannot be empty")
        if not org:
            raise ConfigurationError("Parameter influxdb org cannot be empty")

        self.backend = backend
        self.bucket = bucket
        self.org = org
        self.catalog_config = catalog_config or CatalogConfig()
        self.query_config = query_config or QueryConfig()
        self.error_handler = error_handler or ErrorHandler()
        self.catalog = MetricCatalog(
            backend,
            bucket=bucket,
            org=org,
            config=self.catalog_config,
            cache_manager=cache_manager,
            metrics_collector=metrics_collector,
            error_handler=self.error_handler,
        )
        self.validator = FetchRequestValidator(
            apply_step_aggregation=self.query_config.apply_step_aggregation
        )
        self._closed = False
        self._close_lock = threading.Lock()

    @classmethod
    def from_config(
        cls,
        config: StorageConfig,
        metrics_collector: Optional[MetricsCollector] = None,
    ) -> "InfluxDBStorage":
        """Create a storage with a real InfluxDB client from configuration."""
        backend = InfluxDBClientBackend.from_config(config.connection)
        return cls(
            backend,
            bucket=config.connection.bucket,
            org=config.connection.org,
            catalog_config=config.catalog,
            query_config=config.query,
            metrics_collector=metrics_collector,
        )

    def store(self, samples: List[Sample]) -> None:
        """
        Write samples one point at a time.

        Raises:
            StorageError: On the first failed write; earlier samples stay written
        """
        self.error_handler.run_sequential(
            samples,
            self._write_sample,
            operation_name="store",
        )

    def list_metrics(self, tags: Iterable[Tag] = ()) -> List[Metric]:
        """
        List known metrics that carry all given tags.

        Raises:
            StorageError: If the catalog cannot be loaded
        """
        return self.catalog.list_metrics(tags)

    def get_timeseries(self, request: TimeSeriesFetchRequest) -> List[Sample]:
        """
        Fetch samples of request.metric within [start, end).

        Every returned sample references request.metric itself.

        Raises:
            StorageError: If the request is invalid or the query fails
        """
        self.validator.validate(request)

        step = request.step if self.query_config.apply_step_aggregation else None
        query = build_range_query(
            self.bucket,
            encode_metric_key(request.metric.key),
            request.start,
            request.end,
            step=step,
            aggregate_fn=self.query_config.aggregate_fn,
        )
        tables = self.error_handler.guard(
            lambda: self.backend.query(query, self.org),
            operation_name="get_timeseries",
        )

        samples: List[Sample] = []
        for table in tables:
            for record in table.records:
                value = record.get_value()
                # Empty aggregation windows yield null values
                if value is None:
                    continue
                samples.append(
                    Sample(metric=request.metric, time=record.get_time(), value=value)
                )
        return samples

    def delete(self, metric: Metric) -> None:
        """
        Delete all samples of a metric.

        Raises:
            StorageError: If the delete call fails
        """
        predicate = build_delete_predicate(encode_metric_key(metric.key))
        self.error_handler.guard(
            lambda: self.backend.delete(predicate, self.bucket, self.org),
            operation_name="delete",
        )
        if self.catalog_config.invalidate_on_delete:
            self.catalog.invalidate()

    def health_check(self) -> bool:
        """
        Check InfluxDB connectivity.

        Returns:
            True if InfluxDB is reachable
        """
        try:
            return bool(self.backend.ping())
        except Exception as e:
            logger.warning(f"InfluxDB health check failed: {e}")
            return False

    def close(self) -> None:
        """Release the backend connection; further calls are no-ops."""
        with self._close_lock:
            if self._closed:
                return
            self._closed = True
        self.backend.close()

    def __enter__(self) -> "InfluxDBStorage":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _write_sample(self, sample: Sample) -> None:
        self.backend.write(self.bucket, self.org, sample_to_point(sample))
