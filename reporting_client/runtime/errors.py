"""
Error model for the reporting client.

Every failure raised by the client is a ReportingError subclass so callers can
catch a single type. The subclass tells them which stage of the run failed
and whether the remote service, the transport or their own input was at fault.
"""

from __future__ import annotations

import uuid
from typing import Any


class ReportingError(Exception):
    """Base error raised by the reporting client.

    Attributes:
        code: Machine-readable error code (see ErrorCode).
        message_safe: Human-readable message safe for logs and users.
        message_debug: Optional detailed message for debugging.
        status: Optional numeric status reported by the remote service.
        cause: Optional underlying exception.
        debug_id: Short identifier for correlating log lines.
    """

    def __init__(
        self,
        code: str,
        message_safe: str,
        message_debug: str | None = None,
        status: int | None = None,
        cause: Exception | None = None,
        debug_id: str | None = None,
    ):
        """Initialize a ReportingError.

        Args:
            code: Machine-readable error code.
            message_safe: Human-readable message safe for logs.
            message_debug: Optional detailed debug message.
            status: Optional HTTP-like status code reported by the service.
            cause: Optional underlying exception.
            debug_id: Optional correlation ID (auto-generated if None).
        """
        super().__init__(message_safe)
        self.code = code
        self.message_safe = message_safe
        self.message_debug = message_debug
        self.status = status
        self.cause = cause
        self.debug_id = debug_id or str(uuid.uuid4())[:8]

    def __str__(self) -> str:
        """Return the message in the service's response-error format."""
        if isinstance(self.status, int):
            return f'Error code: {self.status}. Response error: "{self.message_safe}"'
        return f'Response error: "{self.message_safe}"'

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(code={self.code!r}, "
            f"message_safe={self.message_safe!r}, "
            f"status={self.status!r}, "
            f"debug_id={self.debug_id!r})"
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to a dictionary for JSON output.

        Returns:
            Dictionary with error details (excludes debug info).
        """
        data: dict[str, Any] = {
            "code": self.code,
            "message": self.message_safe,
            "debug_id": self.debug_id,
        }
        if self.status is not None:
            data["status"] = self.status
        return data


class InvalidInputError(ReportingError):
    """A required argument is missing, or the item/URL is not usable."""

    def __init__(self, message_safe: str, code: str = "INVALID_INPUT", **kwargs: Any):
        super().__init__(code=code, message_safe=message_safe, **kwargs)

    def __str__(self) -> str:
        return self.message_safe


class NetworkError(ReportingError):
    """Transport-level failure: DNS, refused connection, transport timeout."""

    def __init__(self, message_safe: str, code: str = "CONNECTION_ERROR", **kwargs: Any):
        super().__init__(code=code, message_safe=message_safe, **kwargs)

    def __str__(self) -> str:
        return self.message_safe


class RemoteError(ReportingError):
    """Non-success HTTP status, or an error object embedded in a response."""

    def __init__(
        self,
        message_safe: str,
        status: int | None = None,
        code: str = "REMOTE_ERROR",
        **kwargs: Any,
    ):
        super().__init__(code=code, message_safe=message_safe, status=status, **kwargs)


class ProtocolError(ReportingError):
    """A successful response is missing a field the client requires."""

    def __init__(self, message_safe: str, code: str = "PROTOCOL_ERROR", **kwargs: Any):
        super().__init__(code=code, message_safe=message_safe, **kwargs)


class JobFailedError(ReportingError):
    """The remote job engine reported that the job quit or errored."""

    def __init__(
        self,
        message_safe: str,
        status: int | None = None,
        code: str = "JOB_FAILED",
        **kwargs: Any,
    ):
        super().__init__(code=code, message_safe=message_safe, status=status, **kwargs)


class ErrorCode:
    """Standard error codes for common failure scenarios."""

    # Input
    INVALID_INPUT = "INVALID_INPUT"
    INVALID_ITEM_URL = "INVALID_ITEM_URL"
    INVALID_ITEM_TYPE = "INVALID_ITEM_TYPE"
    MISSING_SERVICE_URL = "MISSING_SERVICE_URL"

    # Network/connectivity
    TIMEOUT = "TIMEOUT"
    CONNECTION_ERROR = "CONNECTION_ERROR"

    # Remote service
    REMOTE_ERROR = "REMOTE_ERROR"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"

    # Protocol
    PROTOCOL_ERROR = "PROTOCOL_ERROR"
    INVALID_RESPONSE = "INVALID_RESPONSE"
    MISSING_TICKET = "MISSING_TICKET"
    MISSING_TAG = "MISSING_TAG"
    MISSING_METADATA = "MISSING_METADATA"

    # Job engine
    JOB_FAILED = "JOB_FAILED"
    JOB_QUIT = "JOB_QUIT"
