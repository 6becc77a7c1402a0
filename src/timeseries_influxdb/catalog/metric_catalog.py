"""
Metric Catalog - Cached View of All Known Metrics.

Loads every metric stored in the bucket by scanning the series keys and
decoding measurement and classified tag columns back into Metric objects.

Design Notes:
    - One cache entry holds the whole catalog
    - Expires ttl_seconds after a successful load
    - Concurrent callers on a cold or expired cache share one scan
    - A delete during a running scan keeps that scan out of the cache
    - A failed scan is surfaced to every waiting caller; a previous
      (expired) catalog is never served instead
    - A single undecodable tag is dropped, the metric is kept
"""

from __future__ import annotations

import logging
import time
from concurrent import futures
from typing import Any, Dict, Iterable, List, Mapping, Optional

from pydantic import ValidationError

from timeseries_influxdb.caching.cache_manager import (
    CacheConfig,
    CacheManager,
    CacheManagerProtocol,
)
from timeseries_influxdb.codec.tag_codec import (
    decode_metric_key,
    decode_tag_value,
    unclassify_tag_key,
)
from timeseries_influxdb.config.models import CatalogConfig
from timeseries_influxdb.domain.entities import Metric, Tag, TagType
from timeseries_influxdb.interfaces.backend import TimeSeriesBackend
from timeseries_influxdb.interfaces.metrics_collector import MetricsCollector
from timeseries_influxdb.query.builder import build_scan_query
from timeseries_influxdb.resilience.error_handler import ErrorHandler, StorageError

logger = logging.getLogger(__name__)

MEASUREMENT_COLUMN = "_measurement"


def metric_from_values(values: Mapping[str, Any]) -> Optional[Metric]:
    """
    Restore a metric from the columns of a scan record.

    Returns:
        The metric, or None if the record has no measurement
    """
    measurement = values.get(MEASUREMENT_COLUMN)
    if not measurement:
        return None

    tags: Dict[TagType, List[Tag]] = {TagType.INTRINSIC: [], TagType.META: []}
    for column, raw_value in values.items():
        classified = unclassify_tag_key(column)
        # Not one of ours, e.g. _start, _stop, _value, result, table
        if classified is None or raw_value is None:
            continue
        tag_type, key = classified
        try:
            tags[tag_type].append(Tag(key=key, value=decode_tag_value(str(raw_value))))
        except ValidationError as e:
            logger.debug(f"Dropping undecodable tag {column!r} of {measurement}: {e}")

    return Metric(
        key=decode_metric_key(str(measurement)),
        tags=frozenset(tags[TagType.INTRINSIC]),
        meta_tags=frozenset(tags[TagType.META]),
    )


class MetricCatalog:
    """
    Cached catalog of the metrics stored in one bucket.

    Usage:
        catalog = MetricCatalog(backend, bucket="opennms", org="opennms")
        cpu_metrics = catalog.list_metrics([Tag(key="name", value="cpu")])
    """

    CACHE_KEY = "allMetrics"

    def __init__(
        self,
        backend: TimeSeriesBackend,
        bucket: str,
        org: str,
        config: Optional[CatalogConfig] = None,
        cache_manager: Optional[CacheManagerProtocol] = None,
        metrics_collector: Optional[MetricsCollector] = None,
        error_handler: Optional[ErrorHandler] = None,
    ) -> None:
        """
        Initialize the catalog.

        Args:
            backend: Backend used for the scan query
            bucket: Bucket to scan
            org: Organization owning the bucket
            config: Catalog configuration
            cache_manager: Cache instance (creates one from config if None)
            metrics_collector: Optional collector for hit/miss and scan timing
            error_handler: Translates backend failures into StorageError
        """
        self.backend = backend
        self.bucket = bucket
        self.org = org
        self.config = config or CatalogConfig()
        self.cache: CacheManagerProtocol = cache_manager or CacheManager(
            CacheConfig(
                max_entries=self.config.max_entries,
                default_ttl_seconds=self.config.ttl_seconds,
            )
        )
        self.metrics = metrics_collector
        self.error_handler = error_handler or ErrorHandler()

    def list_metrics(
        self,
        tags: Iterable[Tag] = (),
        timeout: Optional[float] = None,
    ) -> List[Metric]:
        """
        List metrics carrying every given tag as intrinsic or meta tag.

        Args:
            tags: Required tags; empty returns the whole catalog
            timeout: Max seconds to wait for a scan started by another caller

        Returns:
            Matching metrics

        Raises:
            StorageError: If the catalog has to be loaded and the scan fails
        """
        required = list(tags)
        timeout = timeout if timeout is not None else self.config.load_timeout_seconds

        metrics = self.cache.get(self.CACHE_KEY)
        # Callers joining a scan started by someone else count as misses too
        self._record_access(hit=metrics is not None)
        if metrics is None:
            try:
                metrics = self.cache.load(
                    self.CACHE_KEY,
                    self.load_all_metrics,
                    ttl_seconds=self.config.ttl_seconds,
                    timeout=timeout,
                )
            except futures.TimeoutError as e:
                raise StorageError(
                    "Timed out waiting for the metric catalog", operation="list_metrics"
                ) from e

        return [m for m in metrics if m.contains_all(required)]

    def load_all_metrics(self) -> List[Metric]:
        """
        Scan the bucket and decode all metrics, bypassing the cache.

        Raises:
            StorageError: If the scan query fails
        """
        return self.error_handler.guard(self._scan, operation_name="load_all_metrics")

    def invalidate(self) -> None:
        """Drop the cached catalog and supersede a running scan; the next listing rescans."""
        self.cache.invalidate(self.CACHE_KEY)

    def _scan(self) -> List[Metric]:
        query = build_scan_query(self.bucket, self.config.lookback)
        started = time.perf_counter()
        tables = self.backend.query(query, self.org)

        # dict keeps first-seen order while removing duplicates
        metrics: Dict[Metric, None] = {}
        for table in tables:
            for record in table.records:
                if not self._is_candidate(record.values):
                    continue
                metric = metric_from_values(record.values)
                if metric is not None:
                    metrics.setdefault(metric, None)

        duration = time.perf_counter() - started
        logger.debug(f"Loaded {len(metrics)} metrics in {duration:.3f}s")
        if self.metrics:
            self.metrics.record_timing("catalog_scan_seconds", duration)
            self.metrics.record_gauge("catalog_size", len(metrics))
        return list(metrics)

    def _is_candidate(self, values: Mapping[str, Any]) -> bool:
        """Check that a record belongs to a measurement written by this adapter."""
        measurement = values.get(MEASUREMENT_COLUMN)
        if measurement is None:
            return False
        marker = self.config.identity_marker
        return not marker or marker in str(measurement)

    def _record_access(self, hit: bool) -> None:
        if self.metrics:
            name = "catalog_cache_hit" if hit else "catalog_cache_miss"
            self.metrics.record_count(name, 1)
