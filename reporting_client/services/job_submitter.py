"""
Job submission.

Serializes a JobRequest into the body expected by the job-run endpoint and
starts the job, returning its ticket.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from loguru import logger

from reporting_client.domain.models import JobRequest, MapValue
from reporting_client.runtime.errors import ErrorCode, ProtocolError
from reporting_client.runtime.http_client import ServiceHttpClient

TYPE_DISCRIMINATOR = "$type"


def marshal_parameter(name: str, value: Any) -> dict[str, Any]:
    """Convert one named value into a job parameter.

    The variant is chosen in this order: a list or tuple is multi-valued,
    a value with a `$type` discriminator is structured, anything else is a
    single value.
    """
    if isinstance(value, (list, tuple)):
        return {"name": name, "containsMultipleValues": True, "values": list(value)}
    if isinstance(value, MapValue):
        return {**value.to_payload(), "name": name}
    if isinstance(value, Mapping) and value.get(TYPE_DISCRIMINATOR):
        return {**value, "name": name}
    return {"name": name, "value": value}


def marshal_parameters(parameters: Mapping[str, Any] | None) -> list[dict[str, Any]]:
    """Convert a mapping of values into job parameters, preserving order."""
    if not parameters:
        return []
    return [marshal_parameter(name, value) for name, value in parameters.items()]


def build_job_body(request: JobRequest) -> dict[str, Any]:
    """Build the job-run request body.

    Optional fields that are not set are left out of the body.
    """
    template: dict[str, Any] = {
        "itemId": request.item_id,
        "portalUrl": request.portal_url,
    }
    if request.title is not None:
        template["title"] = request.title

    body: dict[str, Any] = {
        "template": template,
        "parameters": marshal_parameters(request.parameters),
    }
    for key in ("culture", "dpi", "format"):
        value = getattr(request, key)
        if value is not None:
            body[key] = value
    return body


def auth_headers(run_token: str | None) -> dict[str, str]:
    """Authorization header for a run token; empty when there is none."""
    if not run_token:
        return {}
    return {"Authorization": f"Bearer {run_token}"}


class JobSubmitter:
    """Starts report jobs on the reporting service."""

    def __init__(self, http: ServiceHttpClient):
        """Initialize the submitter.

        Args:
            http: HTTP client bound to the reporting service API
                (`<service url>/service`).
        """
        self._http = http

    async def start_job(self, request: JobRequest) -> str:
        """Submit a job.

        Args:
            request: The job to run.

        Returns:
            The job ticket.

        Raises:
            NetworkError: The service could not be reached.
            RemoteError: The service answered with an error status.
            ProtocolError: The response did not contain a ticket.
        """
        body = build_job_body(request)
        logger.info(
            f"[{request.item_id}] Starting job with {len(body['parameters'])} parameter(s)"
        )

        data = await self._http.post_json(
            "/job/run",
            body,
            headers=auth_headers(request.run_token),
            network_message="A network error occurred attempting to run a job.",
        )

        response = data.get("response")
        ticket = response.get("ticket") if isinstance(response, Mapping) else None
        if not ticket or not isinstance(ticket, str):
            raise ProtocolError(
                "The service did not provide a ticket.",
                code=ErrorCode.MISSING_TICKET,
            )

        logger.debug(f"[{request.item_id}] Job started with ticket {ticket}")
        return ticket
