"""
Client for VertiGIS Studio Reporting and Printing.

Starts a report or print job for a portal template item, waits for it to
finish and returns the download URL of the result:

    from reporting_client import run

    url = await run("25c278bd96aa49949f8a89564c6347ce", {"token": token, "format": "pdf"})
"""

from .client import ReportingClient, get_item_metadata, run, run_sync
from .domain.models import ControlProperties, MapValue, PrintMetadata, RunOptions
from .runtime.errors import (
    ErrorCode,
    InvalidInputError,
    JobFailedError,
    NetworkError,
    ProtocolError,
    RemoteError,
    ReportingError,
)
from .services.item_resolver import parse_item_url
from .services.metadata import MM_PER_INCH

__all__ = [
    "ReportingClient",
    "run",
    "run_sync",
    "get_item_metadata",
    "parse_item_url",
    "RunOptions",
    "MapValue",
    "PrintMetadata",
    "ControlProperties",
    "MM_PER_INCH",
    "ErrorCode",
    "ReportingError",
    "InvalidInputError",
    "NetworkError",
    "RemoteError",
    "ProtocolError",
    "JobFailedError",
]
