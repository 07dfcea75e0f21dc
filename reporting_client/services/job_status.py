"""
Interpretation of job status payloads.

The artifacts endpoint (polled or streamed) answers with a payload of the form
``{"results": [{"$type": ..., "tag"?, "message"?, "code"?}], "error"?: {...}}``.
interpret_status() turns it into a JobOutcome; check_status() is the form the
watcher uses, returning a tag, None while pending, or raising.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from reporting_client.domain.models import Aborted, Completed, Failed, JobOutcome, Pending
from reporting_client.runtime.errors import ErrorCode, JobFailedError, ProtocolError, RemoteError

GENERIC_ERROR_MESSAGE = "The request could not be completed."

JOB_RESULT = "JobResult"
JOB_QUIT = "JobQuit"


def _record_type(record: Any) -> str:
    record_type = record.get("$type") if isinstance(record, Mapping) else None
    return record_type if isinstance(record_type, str) else ""


def interpret_status(payload: Mapping[str, Any]) -> JobOutcome:
    """Interpret a status payload.

    Precedence:
    1. A top-level ``error`` raises RemoteError, whatever ``results`` holds.
    2. The first ``JobResult`` record completes the job with its tag.
    3. A ``JobQuit`` record ends the job: Failed with the message and code of
       the first record whose type ends in "error", else Aborted.
    4. Any other ``results`` list (including an empty one) is pending.
    5. A payload with neither field is Failed.

    Raises:
        RemoteError: The payload carries a top-level error.
        ProtocolError: The payload is not an object, its results are not a
            list, or a JobResult record has no tag.
    """
    if not isinstance(payload, Mapping):
        raise ProtocolError("The service returned an invalid job status.", code=ErrorCode.INVALID_RESPONSE)

    error = payload.get("error")
    results = payload.get("results")

    # An error is present even when it is empty
    if error is not None:
        if isinstance(error, Mapping):
            status = error.get("status")
            raise RemoteError(
                str(error.get("message") or GENERIC_ERROR_MESSAGE),
                status=status if isinstance(status, int) else None,
            )
        raise RemoteError(str(error) or GENERIC_ERROR_MESSAGE)

    if results is None:
        return Failed(message=GENERIC_ERROR_MESSAGE)
    if not isinstance(results, list):
        raise ProtocolError("The service returned an invalid job status.", code=ErrorCode.INVALID_RESPONSE)

    result = next((r for r in results if _record_type(r) == JOB_RESULT), None)
    if result is not None:
        tag = result.get("tag")
        if not tag or not isinstance(tag, str):
            raise ProtocolError("The service did not provide a tag.", code=ErrorCode.MISSING_TAG)
        return Completed(tag=tag)

    quit_record = next((r for r in results if _record_type(r) == JOB_QUIT), None)
    if quit_record is not None:
        error_record = next((r for r in results if _record_type(r).endswith("error")), None)
        if error_record is None:
            return Aborted(message=GENERIC_ERROR_MESSAGE)
        code = error_record.get("code")
        return Failed(
            message=str(error_record.get("message") or GENERIC_ERROR_MESSAGE),
            code=code if isinstance(code, int) else None,
        )

    return Pending()


def check_status(payload: Mapping[str, Any]) -> str | None:
    """Return the tag of a completed job, or None while the job is pending.

    Raises:
        RemoteError: The payload carries a top-level error.
        ProtocolError: A JobResult record has no tag.
        JobFailedError: The job quit, errored, or the payload was empty.
    """
    outcome = interpret_status(payload)

    if isinstance(outcome, Completed):
        return outcome.tag
    if isinstance(outcome, Pending):
        return None

    code = ErrorCode.JOB_QUIT if isinstance(outcome, Aborted) else ErrorCode.JOB_FAILED
    raise JobFailedError(outcome.message, status=outcome.code, code=code)
