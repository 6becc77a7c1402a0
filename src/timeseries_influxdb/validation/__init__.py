"""
Validation Layer.

Checks fetch requests before they reach the backend.
"""

from timeseries_influxdb.validation.request_validator import FetchRequestValidator

__all__ = ["FetchRequestValidator"]
