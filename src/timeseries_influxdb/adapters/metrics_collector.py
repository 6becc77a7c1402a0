"""
In-Memory Metrics Collector.

Keeps operational metrics of the adapter (catalog hits, scan times)
in memory for inspection and tests.
"""

from __future__ import annotations

from datetime import datetime, timezone
from threading import Lock
from typing import Any, Dict, List, Optional


class InMemoryMetricsCollector:
    """Simple in-memory metrics collector."""

    def __init__(self) -> None:
        self._metrics: Dict[str, List[Dict[str, Any]]] = {}
        self._lock = Lock()

    def record_timing(
        self,
        name: str,
        duration_seconds: float,
        tags: Optional[Dict[str, str]] = None,
    ) -> None:
        """Record a timing metric."""
        self._record(name, "timing", duration_seconds, tags)

    def record_count(
        self,
        name: str,
        value: int,
        tags: Optional[Dict[str, str]] = None,
    ) -> None:
        """Record a count metric."""
        self._record(name, "count", value, tags)

    def record_gauge(
        self,
        name: str,
        value: float,
        tags: Optional[Dict[str, str]] = None,
    ) -> None:
        """Record a gauge metric."""
        self._record(name, "gauge", value, tags)

    def total(self, name: str) -> float:
        """Sum of all values recorded under name (0 if none)."""
        with self._lock:
            return sum(e["value"] for e in self._metrics.get(name, []))

    def last(self, name: str) -> Optional[float]:
        """Most recent value recorded under name."""
        with self._lock:
            entries = self._metrics.get(name)
            return entries[-1]["value"] if entries else None

    def get_metrics(self) -> Dict[str, Any]:
        """Summary of collected metrics keyed by name."""
        with self._lock:
            return {
                name: {
                    "type": entries[-1]["type"],
                    "count": len(entries),
                    "total": sum(e["value"] for e in entries),
                    "last": entries[-1]["value"],
                }
                for name, entries in self._metrics.items()
                if entries
            }

    def clear(self) -> None:
        """Clear all metrics."""
        with self._lock:
            self._metrics.clear()

    def _record(
        self,
        name: str,
        metric_type: str,
        value: float,
        tags: Optional[Dict[str, str]],
    ) -> None:
        with self._lock:
            self._metrics.setdefault(name, []).append(
                {
                    "type": metric_type,
                    "value": value,
                    "tags": tags or {},
                    "timestamp": datetime.now(timezone.utc).isoformat(),
                }
            )
