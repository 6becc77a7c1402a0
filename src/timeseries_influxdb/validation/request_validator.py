"""
Request Validator - Validate Fetch Requests.

Validates requests before a query is sent:
    - Range is not empty (start < end)
    - Step, if given, is positive
    - Step aggregation is only requested when it can be honored

Design Notes:
    - Fail-fast principle
    - All problems are reported in one error
"""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import List

from timeseries_influxdb.domain.entities import TimeSeriesFetchRequest
from timeseries_influxdb.resilience.error_handler import InvalidRequestError

logger = logging.getLogger(__name__)


class FetchRequestValidator:
    """
    Validates fetch requests before processing.

    Validates:
        - start is before end
        - step is positive and not shorter than one second when
          aggregation is applied
    """

    MIN_AGGREGATION_STEP = timedelta(seconds=1)

    def __init__(self, apply_step_aggregation: bool = False) -> None:
        """
        Initialize request validator.

        Args:
            apply_step_aggregation: Whether steps are turned into
                                    server-side aggregation windows
        """
        self.apply_step_aggregation = apply_step_aggregation

    def validate(self, request: TimeSeriesFetchRequest) -> None:
        """
        Validate a fetch request.

        Raises:
            InvalidRequestError: If validation fails
        """
        errors: List[str] = []
        field = None

        if request.start >= request.end:
            errors.append(
                f"start ({request.start.isoformat()}) must be before "
                f"end ({request.end.isoformat()})"
            )
            field = "start"

        if request.step is not None:
            if request.step <= timedelta(0):
                errors.append(f"step must be positive, got {request.step}")
                field = field or "step"
            elif (
                self.apply_step_aggregation
                and request.step < self.MIN_AGGREGATION_STEP
            ):
                errors.append(
                    f"step must be at least {self.MIN_AGGREGATION_STEP} "
                    f"for aggregation, got {request.step}"
                )
                field = field or "step"

        if errors:
            message = "; ".join(errors)
            logger.warning(f"Rejected fetch request for {request.metric.key}: {message}")
            raise InvalidRequestError(message, field=field)
