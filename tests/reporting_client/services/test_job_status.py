"""Unit tests for status payload interpretation."""

import pytest

from reporting_client.domain.models import Aborted, Completed, Failed, Pending
from reporting_client.runtime.errors import ErrorCode, JobFailedError, ProtocolError, RemoteError
from reporting_client.services.job_status import (
    GENERIC_ERROR_MESSAGE,
    check_status,
    interpret_status,
)


class TestInterpretStatus:
    """Tests for the precedence of status evaluation."""

    def test_error_takes_priority_over_results(self):
        """Should raise from the error even when a result is present."""
        payload = {
            "error": {"message": "Ticket expired", "status": 410},
            "results": [{"$type": "JobResult", "tag": "TAG"}],
        }

        with pytest.raises(RemoteError) as exc_info:
            interpret_status(payload)

        assert exc_info.value.status == 410
        assert exc_info.value.message_safe == "Ticket expired"

    def test_job_result_completes(self):
        payload = {"results": [{"$type": "JobProgress"}, {"$type": "JobResult", "tag": "TAG"}]}

        assert interpret_status(payload) == Completed(tag="TAG")

    def test_first_job_result_wins(self):
        payload = {"results": [{"$type": "JobResult", "tag": "A"}, {"$type": "JobResult", "tag": "B"}]}

        assert interpret_status(payload) == Completed(tag="A")

    def test_job_result_beats_job_quit(self):
        payload = {"results": [{"$type": "JobQuit"}, {"$type": "JobResult", "tag": "TAG"}]}

        assert interpret_status(payload) == Completed(tag="TAG")

    def test_job_result_without_tag_raises(self):
        with pytest.raises(ProtocolError) as exc_info:
            interpret_status({"results": [{"$type": "JobResult"}]})

        assert exc_info.value.code == ErrorCode.MISSING_TAG

    def test_quit_with_error_record_fails(self):
        payload = {
            "results": [
                {"$type": "JobQuit"},
                {"$type": "Xerror", "message": "Parameter 'Region' is required.", "code": 400},
            ]
        }

        assert interpret_status(payload) == Failed(message="Parameter 'Region' is required.", code=400)

    def test_quit_with_error_record_without_message(self):
        payload = {"results": [{"$type": "JobQuit"}, {"$type": "Rendererror"}]}

        outcome = interpret_status(payload)

        assert isinstance(outcome, Failed)
        assert outcome.message == GENERIC_ERROR_MESSAGE
        assert outcome.code is None

    def test_error_suffix_is_case_sensitive(self):
        """A record type ending in "Error" is not an error record."""
        payload = {"results": [{"$type": "JobQuit"}, {"$type": "JobError", "message": "ignored"}]}

        assert interpret_status(payload) == Aborted(message=GENERIC_ERROR_MESSAGE)

    def test_quit_without_error_record_aborts(self):
        assert interpret_status({"results": [{"$type": "JobQuit"}]}) == Aborted(message=GENERIC_ERROR_MESSAGE)

    def test_empty_results_is_pending(self):
        assert interpret_status({"results": []}) == Pending()

    def test_non_terminal_results_are_pending(self):
        assert interpret_status({"results": [{"$type": "JobProgress", "message": "50%"}]}) == Pending()

    def test_neither_field_fails(self):
        assert interpret_status({}) == Failed(message=GENERIC_ERROR_MESSAGE)

    def test_empty_error_takes_priority_over_results(self):
        """An empty error object still counts as an error."""
        payload = {"error": {}, "results": [{"$type": "JobResult", "tag": "TAG"}]}

        with pytest.raises(RemoteError) as exc_info:
            interpret_status(payload)

        assert exc_info.value.message_safe == GENERIC_ERROR_MESSAGE
        assert exc_info.value.status is None

    def test_null_error_is_absent(self):
        payload = {"error": None, "results": [{"$type": "JobResult", "tag": "TAG"}]}

        assert interpret_status(payload) == Completed(tag="TAG")

    def test_non_numeric_error_status_is_dropped(self):
        with pytest.raises(RemoteError) as exc_info:
            interpret_status({"error": {"message": "Gone", "status": "410"}})

        assert exc_info.value.status is None
        assert str(exc_info.value) == 'Response error: "Gone"'

    @pytest.mark.parametrize("payload", [[], "pending", None])
    def test_non_object_payload_raises(self, payload):
        with pytest.raises(ProtocolError) as exc_info:
            interpret_status(payload)

        assert exc_info.value.code == ErrorCode.INVALID_RESPONSE

    def test_results_must_be_a_list(self):
        with pytest.raises(ProtocolError):
            interpret_status({"results": 5})

    def test_records_with_odd_types_are_ignored(self):
        payload = {"results": ["text", {"$type": 3}, {"$type": "JobProgress"}]}

        assert interpret_status(payload) == Pending()


class TestCheckStatus:
    """Tests for check_status."""

    def test_returns_tag(self):
        assert check_status({"results": [{"$type": "JobResult", "tag": "TAG"}]}) == "TAG"

    def test_returns_none_while_pending(self):
        assert check_status({"results": []}) is None

    def test_failed_raises_job_failed_with_code(self):
        payload = {"results": [{"$type": "JobQuit"}, {"$type": "Xerror", "message": "Boom", "code": 500}]}

        with pytest.raises(JobFailedError) as exc_info:
            check_status(payload)

        assert exc_info.value.message_safe == "Boom"
        assert exc_info.value.status == 500
        assert exc_info.value.code == ErrorCode.JOB_FAILED
        assert str(exc_info.value) == 'Error code: 500. Response error: "Boom"'

    def test_aborted_raises_job_failed_with_generic_message(self):
        with pytest.raises(JobFailedError) as exc_info:
            check_status({"results": [{"$type": "JobQuit"}]})

        assert exc_info.value.message_safe == GENERIC_ERROR_MESSAGE
        assert exc_info.value.code == ErrorCode.JOB_QUIT

    def test_empty_payload_raises(self):
        with pytest.raises(JobFailedError):
            check_status({})
