"""
Runtime layer for the reporting client.

This package provides the shared infrastructure used by every stage:
- ReportingError and its subclasses: the client's error taxonomy
- ServiceHttpClient: async HTTP client with structured error conversion
"""

from .errors import (
    ErrorCode,
    InvalidInputError,
    JobFailedError,
    NetworkError,
    ProtocolError,
    RemoteError,
    ReportingError,
)
from .http_client import ServiceHttpClient

__all__ = [
    "ErrorCode",
    "ReportingError",
    "InvalidInputError",
    "NetworkError",
    "RemoteError",
    "ProtocolError",
    "JobFailedError",
    "ServiceHttpClient",
]
