"""
Resilience Infrastructure for Multi-Wind

Error taxonomy for one acquisition cycle plus the retry bookkeeping used by
the scheduler.

Features:
- Typed AcquisitionError hierarchy (timeout, transport, http status,
  malformed body, schema mismatch)
- Error categorization for logging (categorize_error)
- RetryConfig / RetryState for the bounded fixed-delay retry policy
"""

import json
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

import httpx

from multi_wind.models import Provider

logger = logging.getLogger(__name__)


class ErrorType(Enum):
    """Categories of acquisition failures."""
    TIMEOUT = "timeout"
    TRANSPORT_FAILURE = "transport_failure"
    HTTP_STATUS = "http_status"
    MALFORMED_BODY = "malformed_body"
    SCHEMA_MISMATCH = "schema_mismatch"
    UNKNOWN = "unknown"


class AcquisitionError(Exception):
    """Base class for every failure of a single acquisition cycle."""

    error_type = ErrorType.UNKNOWN


class FetchTimeout(AcquisitionError):
    """The request did not complete before its deadline."""

    error_type = ErrorType.TIMEOUT


class TransportFailure(AcquisitionError):
    """DNS, connection, TLS or protocol level failure."""

    error_type = ErrorType.TRANSPORT_FAILURE


class HttpStatusError(AcquisitionError):
    """The provider answered with a status other than 200."""

    error_type = ErrorType.HTTP_STATUS

    def __init__(self, status_code: int):
        super().__init__(f"HTTP {status_code}")
        self.status_code = status_code


class MalformedBody(AcquisitionError):
    """The response body is not a JSON document."""

    error_type = ErrorType.MALFORMED_BODY


class SchemaMismatch(AcquisitionError):
    """
    The JSON document does not have the shape the provider promises.

    Attributes:
        provider: Provider whose schema was violated
        field: Path of the offending field, e.g. "timeSeries[0].parameters[wd]"
        reason: "missing" or a short description of the wrong type
    """

    error_type = ErrorType.SCHEMA_MISMATCH

    def __init__(self, provider: Provider, field: str, reason: str = "missing"):
        super().__init__(f"{provider.value}: {field} {reason}")
        self.provider = provider
        self.field = field
        self.reason = reason


def categorize_error(exception: BaseException) -> Tuple[ErrorType, str]:
    """
    Categorize an exception for logging purposes.

    Acquisition errors carry their own type. Raw httpx and json exceptions
    that escape a caller are mapped onto the same taxonomy.

    Returns:
        Tuple of (ErrorType, error_message)
    """
    error_msg = str(exception)[:200]

    if isinstance(exception, AcquisitionError):
        return (exception.error_type, error_msg)

    elif isinstance(exception, httpx.TimeoutException):
        return (ErrorType.TIMEOUT, f"Timeout: {error_msg}")

    elif isinstance(exception, httpx.HTTPStatusError):
        status = exception.response.status_code
        return (ErrorType.HTTP_STATUS, f"HTTP {status}")

    elif isinstance(exception, httpx.RequestError):
        return (ErrorType.TRANSPORT_FAILURE, f"Request error: {error_msg}")

    elif isinstance(exception, (json.JSONDecodeError, UnicodeDecodeError)):
        return (ErrorType.MALFORMED_BODY, f"Parse error: {error_msg}")

    else:
        return (ErrorType.UNKNOWN, error_msg)


@dataclass
class RetryConfig:
    """Fixed-delay retry policy."""
    max_retries: int = 3
    retry_delay_seconds: float = 2.0


@dataclass
class RetryState:
    """
    Retry bookkeeping for one scheduling period.

    attempt_count never exceeds max_retries. It resets on success and at
    the start of every periodic refresh.
    """
    max_retries: int = 3
    retry_delay_seconds: float = 2.0
    attempt_count: int = 0

    @classmethod
    def from_config(cls, config: RetryConfig) -> "RetryState":
        return cls(
            max_retries=config.max_retries,
            retry_delay_seconds=config.retry_delay_seconds,
        )

    @property
    def exhausted(self) -> bool:
        return self.attempt_count >= self.max_retries

    def record_failure(self) -> bool:
        """
        Count a failed acquisition.

        Returns:
            True if another retry should be armed, False once the budget
            for this scheduling period is used up.
        """
        self.attempt_count = min(self.attempt_count + 1, self.max_retries)
        return not self.exhausted

    def reset(self) -> None:
        self.attempt_count = 0
