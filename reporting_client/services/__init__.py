"""
Stages of a report run.

Each stage wraps one endpoint of the portal or reporting service:
ItemResolver (portal item lookup), Authenticator (token exchange),
JobSubmitter (job start), JobWatcher (status socket and polling) and
MetadataClient (template metadata).
"""

from .auth import Authenticator
from .item_resolver import ItemResolver, is_valid_item_type, parse_item_url
from .job_status import check_status, interpret_status
from .job_submitter import JobSubmitter, build_job_body, marshal_parameters
from .job_watcher import JobWatcher
from .locator import build_result_url
from .metadata import MM_PER_INCH, MetadataClient, convert_to_millimeters

__all__ = [
    "Authenticator",
    "ItemResolver",
    "JobSubmitter",
    "JobWatcher",
    "MetadataClient",
    "MM_PER_INCH",
    "build_job_body",
    "build_result_url",
    "check_status",
    "convert_to_millimeters",
    "interpret_status",
    "is_valid_item_type",
    "marshal_parameters",
    "parse_item_url",
]
