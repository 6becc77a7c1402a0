"""
Configuration Models - Pydantic Models for Type-Safe Config.

All configuration is validated at load time using Pydantic.
"""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, Field


class ConnectionConfig(BaseModel):
    """InfluxDB connection settings."""

    url: str = Field(default="http://localhost:9999", min_length=1)
    org: str = Field(default="opennms", min_length=1)
    bucket: str = Field(default="opennms", min_length=1)
    token: str = Field(..., min_length=1)
    timeout_ms: int = Field(default=10_000, ge=1)


class CatalogConfig(BaseModel):
    """Configuration for the metric catalog cache."""

    ttl_seconds: float = Field(default=60.0, gt=0)
    max_entries: int = Field(default=1000, ge=1)
    lookback: str = Field(default="5y", pattern=r"^\d+(ns|us|ms|s|m|h|d|w|mo|y)$")
    # Only measurements containing this marker are treated as metrics,
    # None disables the check
    identity_marker: Optional[str] = Field(default="resourceId")
    invalidate_on_delete: bool = True
    load_timeout_seconds: Optional[float] = Field(default=None, gt=0)


class QueryConfig(BaseModel):
    """Configuration for range queries."""

    apply_step_aggregation: bool = False
    aggregate_fn: Literal["mean", "max", "min", "sum", "last", "first", "median"] = "mean"


class StorageConfig(BaseModel):
    """Root configuration object."""

    version: str = "1.0"
    connection: ConnectionConfig
    catalog: CatalogConfig = Field(default_factory=CatalogConfig)
    query: QueryConfig = Field(default_factory=QueryConfig)
