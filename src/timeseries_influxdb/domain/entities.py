"""
Core Domain Entities.

This module defines the time-series model the storage adapter persists:
metrics identified by a key plus two classified tag sets, and numeric
samples of those metrics over time.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Dict, FrozenSet, Iterable, Optional

from pydantic import BaseModel, Field, field_validator


def ensure_utc(value: datetime) -> datetime:
    """Interpret naive datetimes as UTC and convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class TagType(str, Enum):
    """Classification of a tag within a metric."""

    INTRINSIC = "intrinsic"
    META = "meta"


class Tag(BaseModel):
    """A key/value pair describing a metric."""

    key: str = Field(..., min_length=1, description="Tag key")
    value: str = Field(..., description="Tag value")

    model_config = {"frozen": True}

    def __str__(self) -> str:
        return f"{self.key}={self.value}"


class Metric(BaseModel):
    """
    A named time series.

    Intrinsic tags describe the identity of the metric, meta tags carry
    auxiliary information. Tag keys are unique within each set.
    """

    key: str = Field(..., min_length=1, description="Opaque metric key")
    tags: FrozenSet[Tag] = Field(default_factory=frozenset)
    meta_tags: FrozenSet[Tag] = Field(default_factory=frozenset)

    model_config = {"frozen": True}

    @field_validator("tags", "meta_tags")
    @classmethod
    def _unique_keys(cls, tags: FrozenSet[Tag]) -> FrozenSet[Tag]:
        keys = [t.key for t in tags]
        if len(keys) != len(set(keys)):
            raise ValueError(f"duplicate tag keys in {sorted(keys)}")
        return tags

    @classmethod
    def create(
        cls,
        key: str,
        tags: Optional[Dict[str, str]] = None,
        meta_tags: Optional[Dict[str, str]] = None,
    ) -> "Metric":
        """Build a metric from plain dicts of intrinsic and meta tags."""
        return cls(
            key=key,
            tags=frozenset(Tag(key=k, value=v) for k, v in (tags or {}).items()),
            meta_tags=frozenset(
                Tag(key=k, value=v) for k, v in (meta_tags or {}).items()
            ),
        )

    def tags_of(self, tag_type: TagType) -> FrozenSet[Tag]:
        return self.tags if tag_type is TagType.INTRINSIC else self.meta_tags

    def contains_all(self, tags: Iterable[Tag]) -> bool:
        """True if every given tag is an intrinsic or a meta tag of this metric."""
        return all(t in self.tags or t in self.meta_tags for t in tags)


class Sample(BaseModel):
    """A single numeric value of a metric at a point in time."""

    metric: Metric
    time: datetime
    value: float

    model_config = {"frozen": True}

    @field_validator("time")
    @classmethod
    def _normalize_time(cls, value: datetime) -> datetime:
        return ensure_utc(value)


class TimeSeriesFetchRequest(BaseModel):
    """Input for fetching the samples of one metric over a time range."""

    metric: Metric
    start: datetime = Field(..., description="Inclusive start of the range")
    end: datetime = Field(..., description="Exclusive end of the range")
    step: Optional[timedelta] = Field(
        default=None, description="Requested resolution for aggregation"
    )

    model_config = {"frozen": True}

    @field_validator("start", "end")
    @classmethod
    def _normalize_bounds(cls, value: datetime) -> datetime:
        return ensure_utc(value)
