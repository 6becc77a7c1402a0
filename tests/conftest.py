"""
Pytest Configuration and Shared Fixtures.

This module contains fixtures available to all tests.
"""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import List
from unittest.mock import Mock

import pytest

from timeseries_influxdb.adapters.metrics_collector import InMemoryMetricsCollector
from timeseries_influxdb.caching.cache_manager import CacheConfig, CacheManager
from timeseries_influxdb.domain.entities import Metric
from tests.fixtures.fake_backend import FakeInfluxBackend


class FakeClock:
    """Manually advanced clock for cache expiry tests."""

    def __init__(self, start: float = 1_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def sample_config_path() -> Path:
    """Path to sample configuration file."""
    return Path(__file__).parent / "fixtures" / "sample_config.yaml"


@pytest.fixture
def fake_clock() -> FakeClock:
    """Clock starting at t=1000s."""
    return FakeClock()


@pytest.fixture
def cache_manager(fake_clock: FakeClock) -> CacheManager:
    """Cache with a 60s TTL driven by the fake clock."""
    return CacheManager(CacheConfig(default_ttl_seconds=60.0), clock=fake_clock)


@pytest.fixture
def mock_backend() -> Mock:
    """Backend mock returning no tables."""
    backend = Mock()
    backend.query.return_value = []
    backend.ping.return_value = True
    return backend


@pytest.fixture
def fake_backend() -> FakeInfluxBackend:
    """In-memory InfluxDB stand-in."""
    return FakeInfluxBackend()


@pytest.fixture
def metrics_collector() -> InMemoryMetricsCollector:
    """Create metrics collector for testing."""
    return InMemoryMetricsCollector()


@pytest.fixture
def cpu_metric() -> Metric:
    """Metric with an intrinsic resourceId and a meta tag."""
    return Metric.create(
        key="node1.cpu_resourceId=r1",
        tags={"resourceId": "r1", "name": "cpu"},
        meta_tags={"mtype": "gauge"},
    )


@pytest.fixture
def metrics() -> List[Metric]:
    """A small catalog of metrics."""
    return [
        Metric.create(
            key="name=cpu_resourceId=node1",
            tags={"name": "cpu", "resourceId": "node1"},
            meta_tags={"host": "alpha"},
        ),
        Metric.create(
            key="name=mem_resourceId=node1",
            tags={"name": "mem", "resourceId": "node1"},
            meta_tags={"host": "alpha"},
        ),
        Metric.create(
            key="name=cpu_resourceId=node2",
            tags={"name": "cpu", "resourceId": "node2"},
            meta_tags={"host": "beta"},
        ),
    ]


@pytest.fixture
def reference_time() -> datetime:
    """Standard sample time for testing."""
    return datetime(2024, 12, 15, 12, 30, 0, 250_000, tzinfo=timezone.utc)
