"""
Resilience Layer.

Error taxonomy and failure translation:
    - StorageError: storage-level failure wrapping the cause
    - InvalidRequestError: request rejected before the backend call
    - ConfigurationError: missing connection parameter
    - ErrorHandler: guarded calls and sequential batch processing
"""

from timeseries_influxdb.resilience.error_handler import (
    ConfigurationError,
    ErrorHandler,
    InvalidRequestError,
    PartialResult,
    StorageError,
)

__all__ = [
    "ConfigurationError",
    "ErrorHandler",
    "InvalidRequestError",
    "PartialResult",
    "StorageError",
]
