"""
Exception handling utilities for the Lightspeed Retail client.

This module provides the client's exception hierarchy, the Result type
returned by every public client operation, and the decorator that turns
raised errors into failed results.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Generic, Optional, TypeVar, ParamSpec, Awaitable
from functools import wraps

from lightspeed_retail.src.logger import log
from lightspeed_retail.src.metrics import record_failure


class ErrorKind(Enum):
    """Kinds of failure a client operation can report."""

    AUTHENTICATION = "authentication"
    HTTP_STATUS = "http_status"
    TRANSPORT = "transport"
    MALFORMED_RESPONSE = "malformed_response"
    INVALID_OPTIONS = "invalid_options"
    INTERNAL = "internal"


class LightspeedError(Exception):
    """Base exception for Lightspeed client errors."""

    kind: ErrorKind = ErrorKind.INTERNAL

    def __init__(self, message: str, kind: Optional[ErrorKind] = None) -> None:
        super().__init__(message)
        if kind is not None:
            self.kind = kind


class LightspeedAuthError(LightspeedError):
    """The refresh-token exchange was rejected, unreachable or malformed."""

    kind = ErrorKind.AUTHENTICATION


class LightspeedAPIError(LightspeedError):
    """A resource request answered with a non-2xx status."""

    kind = ErrorKind.HTTP_STATUS

    def __init__(self, message: str, status_code: int) -> None:
        super().__init__(message)
        self.status_code = status_code


class LightspeedTransportError(LightspeedError):
    """The request never produced a response (timeout, DNS, connection reset)."""

    kind = ErrorKind.TRANSPORT


class LightspeedResponseError(LightspeedError):
    """The response body is not JSON or lacks the expected envelope key."""

    kind = ErrorKind.MALFORMED_RESPONSE


class LightspeedAccountError(LightspeedError):
    """The account identifier could not be resolved.

    Keeps the kind of the failure that prevented resolution.
    """


class LightspeedQueryError(LightspeedError):
    """Caller-supplied query options could not be turned into a query string."""

    kind = ErrorKind.INVALID_OPTIONS


T = TypeVar("T")


@dataclass(frozen=True)
class Result(Generic[T]):
    """Outcome of a client operation: either a value or the error that prevented it."""

    value: Optional[T] = None
    error: Optional[LightspeedError] = None

    @classmethod
    def success(cls, value: T) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: LightspeedError) -> "Result[T]":
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def kind(self) -> Optional[ErrorKind]:
        """Error kind of a failed result, None on success."""
        return self.error.kind if self.error is not None else None

    def unwrap(self) -> T:
        """Return the value or raise the carried error."""
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]

    def value_or(self, default: T) -> T:
        return default if self.error is not None else self.value  # type: ignore[return-value]

    def __bool__(self) -> bool:
        return self.ok


# Type variables for the decorator
P = ParamSpec("P")


def returns_result(
    func: Callable[P, Awaitable[T]],
) -> Callable[P, Awaitable[Result[T]]]:
    """
    Decorate a client coroutine so that it never raises.

    The operation name for logging is automatically derived from the function name.
    Client errors become failed results carrying their kind; anything else is
    logged and reported as an internal error.

    Returns:
        Decorated function returning a Result
    """

    @wraps(func)
    async def wrapper(*args: P.args, **kwargs: P.kwargs) -> Result[T]:
        operation_name = func.__name__
        try:
            return Result.success(await func(*args, **kwargs))
        except LightspeedError as e:
            log.error("Error during %s (%s): %s", operation_name, e.kind.value, e)
            record_failure(operation_name, e.kind.value)
            return Result.failure(e)
        except Exception as e:  # pylint: disable=broad-exception-caught
            log.error("Unexpected error during %s: %s", operation_name, str(e))
            record_failure(operation_name, ErrorKind.INTERNAL.value)
            error = LightspeedError("An internal error occurred")
            error.__cause__ = e
            return Result.failure(error)

    return wrapper
