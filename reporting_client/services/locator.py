"""Download URL assembly for completed jobs."""

from __future__ import annotations


def build_result_url(service_url: str, ticket: str, tag: str) -> str:
    """Build the download URL of a job artifact.

    Args:
        service_url: The reporting service URL (trailing slash optional).
        ticket: The job ticket.
        tag: The result tag reported for the job.
    """
    return f"{service_url.rstrip('/')}/service/job/result?ticket={ticket}&tag={tag}"
