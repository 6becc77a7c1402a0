"""
Time Series Storage Protocol.

Defines the inbound interface offered to the host system.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from typing import Iterable, List

    from timeseries_influxdb.domain.entities import (
        Metric,
        Sample,
        Tag,
        TimeSeriesFetchRequest,
    )


@runtime_checkable
class TimeSeriesStorage(Protocol):
    """Abstract interface for time series persistence."""

    def store(self, samples: List[Sample]) -> None:
        """
        Persist samples.

        Samples are written one by one; on failure a prefix may already
        be stored.

        Raises:
            StorageError: If a write fails
        """
        ...

    def list_metrics(self, tags: Iterable[Tag] = ()) -> List[Metric]:
        """
        List known metrics carrying all of the given tags.

        Raises:
            StorageError: If the catalog cannot be loaded
        """
        ...

    def get_timeseries(self, request: TimeSeriesFetchRequest) -> List[Sample]:
        """
        Fetch the samples of request.metric within [start, end).

        Raises:
            StorageError: If the query fails or the request is invalid
        """
        ...

    def delete(self, metric: Metric) -> None:
        """
        Delete all samples of a metric.

        Raises:
            StorageError: If the delete fails
        """
        ...
