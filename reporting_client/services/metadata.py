"""
Print template metadata.

The metadata endpoint describes the parameters a template accepts and the
controls (maps, images) it lays out. Control sizes are reported in the
template's own units and converted to millimeters here.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from loguru import logger

from reporting_client.domain.models import ControlProperties, PrintMetadata
from reporting_client.runtime.errors import ErrorCode, ProtocolError
from reporting_client.runtime.http_client import ServiceHttpClient

from .job_submitter import auth_headers

MM_PER_INCH = 25.4


def convert_to_millimeters(value: float | None, units: str | None) -> float | None:
    """Convert a control dimension to millimeters."""
    if value is None:
        return None
    if units == "HundredsOfAnInch":
        return (value / 100) * MM_PER_INCH
    if units == "TenthsOfAMillimeter":
        return value / 10
    return value


def marshal_control_properties(controls: Iterable[Mapping[str, Any]] | None) -> list[ControlProperties]:
    if not isinstance(controls, (list, tuple)):
        return []

    return [
        ControlProperties(
            control_type=control.get("controlType"),
            purpose=control.get("purpose"),
            height=convert_to_millimeters(control.get("height"), control.get("units")),
            width=convert_to_millimeters(control.get("width"), control.get("units")),
        )
        for control in controls
        if isinstance(control, Mapping)
    ]


class MetadataClient:
    """Fetches template metadata from the reporting service."""

    def __init__(self, http: ServiceHttpClient):
        self._http = http

    async def get_metadata(self, item_id: str, portal_url: str, run_token: str = "") -> PrintMetadata:
        """Fetch the metadata of a print template.

        Raises:
            NetworkError: The service could not be reached.
            RemoteError: The service answered with an error status.
            ProtocolError: The response did not contain any parameters.
        """
        data = await self._http.post_json(
            "/job/metadata",
            {"template": {"itemId": item_id, "portalUrl": portal_url}},
            headers=auth_headers(run_token),
            network_message="A network error occurred fetching the template metadata.",
        )

        response = data.get("response")
        if not isinstance(response, Mapping) or response.get("parameters") is None:
            raise ProtocolError(
                "The print service did not provide any metadata.",
                code=ErrorCode.MISSING_METADATA,
            )

        controls = marshal_control_properties(response.get("controls"))
        logger.debug(f"[{item_id}] Template metadata has {len(controls)} control(s)")
        return PrintMetadata(parameters=response["parameters"], controls=controls)
