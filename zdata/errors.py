"""Error taxonomy for the zdata client.

Provides:
- A closed set of failure kinds (ErrorKind)
- A single tagged exception type (ApiError) carried across every layer
- Classification of raw transport/validation failures
- The retryability predicate used by the retry policy
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Optional

import httpx
import jsonschema

# Statuses worth re-sending: timeouts, throttling and gateway failures
RETRYABLE_STATUS_CODES = frozenset({408, 429, 502, 503, 504})

HTTP_UNAUTHORIZED = 401


class ErrorKind(str, Enum):
    """Failure categories surfaced to callers."""

    UNAUTHENTICATED = "UNAUTHENTICATED"
    VALIDATION = "VALIDATION"
    TRANSPORT = "TRANSPORT"
    UNKNOWN = "UNKNOWN"


@dataclass(frozen=True)
class ValidationFailureDetail:
    """One violated constraint."""

    code: str
    path: tuple[str, ...]
    message: str


class ApiError(Exception):
    """The only failure type that leaves the resilience layer.

    The ``kind`` tag decides how callers (and the retry policy) treat the
    error; branch on it rather than on the message text.
    """

    def __init__(
        self,
        kind: ErrorKind,
        message: str = "",
        status_code: Optional[int] = None,
        details: Iterable[ValidationFailureDetail] = (),
        response: Any = None,
    ):
        details = tuple(details)
        if kind == ErrorKind.VALIDATION and not details:
            raise ValueError("Validation errors require at least one failure detail")

        super().__init__(message or kind.value.lower())
        self.kind = kind
        self.message = message or kind.value.lower()
        self.status_code = status_code
        self.details = details
        self.response = response

    def __repr__(self) -> str:
        return (
            f"ApiError(kind={self.kind.value}, status_code={self.status_code}, "
            f"message={self.message!r}, details={len(self.details)})"
        )

    @classmethod
    def unauthenticated(cls, message: str = "Invalid credentials", response: Any = None) -> "ApiError":
        return cls(ErrorKind.UNAUTHENTICATED, message, HTTP_UNAUTHORIZED, response=response)

    @classmethod
    def validation(
        cls,
        details: Iterable[ValidationFailureDetail],
        message: str = "Validation failed",
    ) -> "ApiError":
        return cls(ErrorKind.VALIDATION, message, details=details)

    @classmethod
    def transport(
        cls,
        message: str = "Request failed",
        status_code: Optional[int] = None,
        response: Any = None,
    ) -> "ApiError":
        return cls(ErrorKind.TRANSPORT, message, status_code, response=response)

    @classmethod
    def unknown(cls, message: str = "Unknown error occurred") -> "ApiError":
        return cls(ErrorKind.UNKNOWN, message)

    @property
    def retryable(self) -> bool:
        """Whether re-sending the request could change the outcome."""
        return is_retryable(self.kind, self.status_code)

    @property
    def is_unauthenticated(self) -> bool:
        return self.kind == ErrorKind.UNAUTHENTICATED

    @property
    def is_validation(self) -> bool:
        return self.kind == ErrorKind.VALIDATION

    @property
    def is_transport(self) -> bool:
        return self.kind == ErrorKind.TRANSPORT

    @property
    def is_network_error(self) -> bool:
        """Transport failure with no response at all."""
        return self.kind == ErrorKind.TRANSPORT and self.status_code is None

    @property
    def is_client_error(self) -> bool:
        return self.status_code is not None and 400 <= self.status_code < 500

    @property
    def is_server_error(self) -> bool:
        return self.status_code is not None and self.status_code >= 500


def classify(error: BaseException) -> ErrorKind:
    """Assign a failure kind to a raw error.

    Args:
        error: Exception raised by a transport, the schema validator or
            caller code

    Returns:
        The ErrorKind for the error
    """
    if isinstance(error, ApiError):
        return error.kind
    if isinstance(error, httpx.HTTPStatusError):
        if error.response.status_code == HTTP_UNAUTHORIZED:
            return ErrorKind.UNAUTHENTICATED
        return ErrorKind.TRANSPORT
    if isinstance(error, jsonschema.ValidationError):
        return ErrorKind.VALIDATION
    # Connectivity failures with no response, from httpx or any other transport
    if isinstance(error, (httpx.TransportError, ConnectionError, TimeoutError)):
        return ErrorKind.TRANSPORT
    return ErrorKind.UNKNOWN


def detail_from_schema_error(error: jsonschema.ValidationError) -> ValidationFailureDetail:
    """Convert a jsonschema violation into a failure detail."""
    return ValidationFailureDetail(
        code=str(error.validator),
        path=tuple(str(p) for p in error.absolute_path),
        message=error.message,
    )


def response_body(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


def to_api_error(error: BaseException, message: Optional[str] = None) -> ApiError:
    """Normalize any failure into an ApiError.

    An ApiError is returned as-is; everything else is classified and
    rebuilt with the status code, response body and validation details
    that can be recovered from it.

    Args:
        error: Raw exception
        message: Message override (e.g. the server's own error message)

    Returns:
        ApiError carrying the classified kind
    """
    if isinstance(error, ApiError):
        return error

    kind = classify(error)
    message = message or str(error) or type(error).__name__

    if isinstance(error, httpx.HTTPStatusError):
        status = error.response.status_code
        body = response_body(error.response)
        if kind == ErrorKind.UNAUTHENTICATED:
            return ApiError.unauthenticated(message, response=body)
        return ApiError.transport(message, status, response=body)

    if kind == ErrorKind.VALIDATION:
        return ApiError.validation([detail_from_schema_error(error)])

    if kind == ErrorKind.TRANSPORT:
        return ApiError.transport(message)

    return ApiError.unknown(message)


def is_retryable(kind: ErrorKind, status_code: Optional[int] = None) -> bool:
    """Decide whether a failure of the given kind may be retried.

    Credential and shape problems need caller action, and unknown failures
    must not be silently repeated. Transport failures are retried when no
    response arrived or the status is transient.

    Args:
        kind: Classified failure kind
        status_code: HTTP status, None when no response was received

    Returns:
        True if the operation should be attempted again
    """
    if kind != ErrorKind.TRANSPORT:
        return False
    if status_code is None:
        return True
    return status_code in RETRYABLE_STATUS_CODES
