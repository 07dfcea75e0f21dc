"""
Domain models for the reporting client.

These pydantic models describe what the caller passes in (RunOptions,
MapValue), what flows between stages (JobRequest, ItemReference) and how the
job status is interpreted (JobOutcome). Wire payloads use camelCase keys, so
most models accept both spellings.
"""

from __future__ import annotations

from typing import Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ItemReference(BaseModel):
    """A portal item identified by its ID and the portal that hosts it."""

    item_id: str
    portal_url: str

    model_config = ConfigDict(frozen=True)


class MapItem(BaseModel):
    """The map item embedded in a structured map parameter."""

    type: str
    extent: tuple[tuple[float, float], tuple[float, float]]

    model_config = ConfigDict(frozen=True, extra="allow")


class MapValue(BaseModel):
    """A structured parameter value carrying a `$type` discriminator.

    Callers may pass either this model or a plain mapping with a `$type` key.
    """

    type_: str = Field(alias="$type")
    item: MapItem | None = None
    item_data: Any = Field(default=None, alias="itemData")

    model_config = ConfigDict(frozen=True, extra="allow", populate_by_name=True)

    def to_payload(self) -> dict[str, Any]:
        """Return the wire representation of the value."""
        return self.model_dump(by_alias=True, exclude_none=True)


class RunOptions(BaseModel):
    """Options that define the report to run and how to run it.

    Attributes:
        culture: Culture used for localization, e.g. "en-US".
        dpi: DPI used when rendering a map print.
        format: Output file format. The service default is "pdf".
        parameters: Report parameters keyed by name, in submission order.
        portal_url: The portal hosting the item. Defaults to ArcGIS Online.
        result_file_name: Name assigned to the output file.
        token: Portal access token, required for secured items.
        use_polling: Poll for the job status instead of listening on a socket.
        run_token: Pre-exchanged service credential; skips the token exchange.
        service_url: Reporting service URL; skips the portal item lookup.
    """

    culture: str | None = None
    dpi: int | None = None
    format: str | None = None
    parameters: dict[str, Any] | None = None
    portal_url: str | None = None
    result_file_name: str | None = None
    token: str | None = None
    use_polling: bool | None = None
    run_token: str | None = None
    service_url: str | None = None

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )


class JobRequest(BaseModel):
    """Everything needed to submit a job to the reporting service."""

    item_id: str
    portal_url: str
    service_url: str
    run_token: str = ""
    parameters: dict[str, Any] = Field(default_factory=dict)
    culture: str | None = None
    dpi: int | None = None
    format: str | None = None
    title: str | None = None

    model_config = ConfigDict(frozen=True)


class PortalError(BaseModel):
    message: str = ""
    code: int | None = None


class PortalItem(BaseModel):
    """The subset of the portal item JSON the client reads."""

    type_keywords: list[str] | None = Field(default=None, alias="typeKeywords")
    url: str | None = None
    error: PortalError | None = None

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class ControlProperties(BaseModel):
    """Control metadata of a print template, with sizes in millimeters."""

    control_type: str | None = None
    purpose: str | None = None
    height: float | None = None
    width: float | None = None

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class PrintMetadata(BaseModel):
    """The parameters and control metadata of a print template."""

    parameters: Any
    controls: list[ControlProperties] = Field(default_factory=list)


# Job outcomes


class Pending(BaseModel):
    kind: Literal["pending"] = "pending"

    model_config = ConfigDict(frozen=True)


class Completed(BaseModel):
    kind: Literal["completed"] = "completed"
    tag: str

    model_config = ConfigDict(frozen=True)


class Aborted(BaseModel):
    """The job quit without reporting an error record."""

    kind: Literal["aborted"] = "aborted"
    message: str
    code: int | None = None

    model_config = ConfigDict(frozen=True)


class Failed(BaseModel):
    """The job reported an error, or the status payload was empty."""

    kind: Literal["failed"] = "failed"
    message: str
    code: int | None = None

    model_config = ConfigDict(frozen=True)


JobOutcome = Union[Pending, Completed, Aborted, Failed]
