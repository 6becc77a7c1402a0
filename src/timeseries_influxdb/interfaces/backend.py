"""
Time Series Backend Protocol.

Defines the outbound interface to InfluxDB. The storage adapter only
builds points, query strings and delete predicates; executing them is
the backend's job.

The backend is responsible for:
    - Writing single points
    - Running Flux queries and returning tables of records
    - Deleting by predicate
    - Releasing its connection on close

Design Notes:
    - Safe for concurrent use once constructed
    - Bucket and org are passed per call, as in the InfluxDB APIs
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from typing import List

    from influxdb_client import Point
    from influxdb_client.client.flux_table import FluxTable


@runtime_checkable
class TimeSeriesBackend(Protocol):
    """Abstract interface for InfluxDB access."""

    def write(self, bucket: str, org: str, point: Point) -> None:
        """Write a single point."""
        ...

    def query(self, query: str, org: str) -> List[FluxTable]:
        """
        Run a Flux query.

        Returns:
            Tables whose records expose .values, get_time() and get_value()
        """
        ...

    def delete(self, predicate: str, bucket: str, org: str) -> None:
        """Delete all points matching the predicate."""
        ...

    def ping(self) -> bool:
        """Check that the server is reachable."""
        ...

    def close(self) -> None:
        """Release the connection."""
        ...
