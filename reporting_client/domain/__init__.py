from .models import (
    Aborted,
    Completed,
    ControlProperties,
    Failed,
    ItemReference,
    JobOutcome,
    JobRequest,
    MapItem,
    MapValue,
    Pending,
    PortalItem,
    PrintMetadata,
    RunOptions,
)

__all__ = [
    "Aborted",
    "Completed",
    "ControlProperties",
    "Failed",
    "ItemReference",
    "JobOutcome",
    "JobRequest",
    "MapItem",
    "MapValue",
    "Pending",
    "PortalItem",
    "PrintMetadata",
    "RunOptions",
]
