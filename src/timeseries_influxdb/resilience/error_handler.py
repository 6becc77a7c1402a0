"""
Error Handler - Failure Translation for Backend Calls.

Provides:
    - StorageError: the single storage-level failure type
    - Guarded execution that wraps backend failures into StorageError
    - Sequential processing that reports how far a batch got

Design Notes:
    - No retries: a failed call is surfaced to the caller immediately
    - The original exception is kept as __cause__
    - Sequential writes are not rolled back on failure
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Generic, Iterable, List, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ConfigurationError(ValueError):
    """Raised when a required connection parameter is missing or invalid."""


@dataclass
class PartialResult(Generic[T]):
    """Outcome of processing a batch item by item."""

    successful: List[T] = field(default_factory=list)
    failed: Optional[tuple[Any, Exception]] = None
    skipped: int = 0

    @property
    def has_failures(self) -> bool:
        """Check if processing stopped on a failure."""
        return self.failed is not None


class StorageError(Exception):
    """
    Raised when the storage backend fails.

    Attributes:
        operation: Name of the failed operation
        partial: For batch writes, the items written before the failure
    """

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        partial: Optional[PartialResult] = None,
    ) -> None:
        super().__init__(message)
        self.operation = operation
        self.partial = partial


class InvalidRequestError(StorageError):
    """Raised when a request is rejected before reaching the backend."""

    def __init__(self, message: str, field: Optional[str] = None) -> None:
        super().__init__(message, operation="validate")
        self.field = field


class ErrorHandler:
    """
    Translates backend failures into StorageError.

    Features:
        - Guarded single calls
        - Sequential batch processing, stopping at the first failure
    """

    def guard(
        self,
        func: Callable[[], T],
        operation_name: str = "operation",
    ) -> T:
        """
        Execute func, re-raising any failure as StorageError.

        Args:
            func: Function to execute
            operation_name: Name for logging and the raised error

        Returns:
            Result of func

        Raises:
            StorageError: When func fails
        """
        try:
            return func()
        except StorageError:
            raise
        except Exception as e:
            logger.error(f"{operation_name} failed: {e}")
            raise StorageError(
                f"{operation_name} failed: {e}", operation=operation_name
            ) from e

    def run_sequential(
        self,
        items: Iterable[Any],
        processor: Callable[[Any], T],
        operation_name: str = "batch operation",
    ) -> PartialResult[T]:
        """
        Process items in order, stopping at the first failure.

        Items processed before the failure stay processed.

        Args:
            items: Items to process
            processor: Function to process each item
            operation_name: Name for logging

        Returns:
            PartialResult with all items successful

        Raises:
            StorageError: On the first failure, carrying the PartialResult
        """
        pending = list(items)
        result: PartialResult[T] = PartialResult()

        for index, item in enumerate(pending):
            try:
                result.successful.append(processor(item))
            except Exception as e:
                result.failed = (item, e)
                result.skipped = len(pending) - index - 1
                logger.warning(
                    f"{operation_name} failed after {len(result.successful)} of "
                    f"{len(pending)} items: {e}"
                )
                raise StorageError(
                    f"{operation_name} failed: {e}",
                    operation=operation_name,
                    partial=result,
                ) from e

        return result
