"""
InfluxDB Client Backend.

Implements TimeSeriesBackend on top of the official influxdb-client
library. One client is created per backend and shared by all callers;
the client handles its own connection pooling.

Design Notes:
    - Synchronous writes, so a failed write surfaces to its caller
    - Deletes span the whole time range InfluxDB can store
    - close() is idempotent
"""

from __future__ import annotations

import logging
import threading
from typing import List

from influxdb_client import InfluxDBClient, Point
from influxdb_client.client.flux_table import FluxTable
from influxdb_client.client.write_api import SYNCHRONOUS

from timeseries_influxdb.config.models import ConnectionConfig
from timeseries_influxdb.resilience.error_handler import ConfigurationError

logger = logging.getLogger(__name__)

DELETE_RANGE_START = "1970-01-01T00:00:00Z"
DELETE_RANGE_STOP = "2262-04-11T00:00:00Z"


class InfluxDBClientBackend:
    """
    TimeSeriesBackend backed by influxdb_client.InfluxDBClient.

    Usage:
        backend = InfluxDBClientBackend(
            url="http://localhost:8086",
            token="secret",
            org="opennms",
        )
        tables = backend.query('from(bucket:"opennms") |> range(start:-1h)', "opennms")
        backend.close()
    """

    def __init__(
        self,
        url: str,
        token: str,
        org: str,
        timeout_ms: int = 10_000,
    ) -> None:
        """
        Initialize the client and its APIs.

        Raises:
            ConfigurationError: If url, token or org is missing
        """
        for name, value in (("url", url), ("token", token), ("org", org)):
            if not value:
                raise ConfigurationError(f"Parameter influxdb {name} cannot be empty")

        self._client = InfluxDBClient(url=url, token=token, org=org, timeout=timeout_ms)
        # Fetch the APIs once, the write API must be closed on shutdown
        self._write_api = self._client.write_api(write_options=SYNCHRONOUS)
        self._query_api = self._client.query_api()
        self._delete_api = self._client.delete_api()
        self._closed = False
        self._close_lock = threading.Lock()

        logger.info(f"Successfully initialized InfluxDB client for {url}")

    @classmethod
    def from_config(cls, config: ConnectionConfig) -> "InfluxDBClientBackend":
        """Create a backend from validated connection settings."""
        return cls(
            url=config.url,
            token=config.token,
            org=config.org,
            timeout_ms=config.timeout_ms,
        )

    def write(self, bucket: str, org: str, point: Point) -> None:
        """Write a single point."""
        self._write_api.write(bucket=bucket, org=org, record=point)

    def query(self, query: str, org: str) -> List[FluxTable]:
        """Run a Flux query."""
        return self._query_api.query(query, org=org)

    def delete(self, predicate: str, bucket: str, org: str) -> None:
        """Delete all points matching the predicate."""
        self._delete_api.delete(
            start=DELETE_RANGE_START,
            stop=DELETE_RANGE_STOP,
            predicate=predicate,
            bucket=bucket,
            org=org,
        )

    def ping(self) -> bool:
        """Check that the server is reachable."""
        return self._client.ping()

    def close(self) -> None:
        """Close the write API and the client, once."""
        with self._close_lock:
            if self._closed:
                return
            self._closed = True
        try:
            self._write_api.close()
        finally:
            self._client.close()
        logger.info("InfluxDB client closed")
