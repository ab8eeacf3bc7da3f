from fastapi import status


class SubmissionServiceError(Exception):
    """Base class for errors surfaced to API callers with a fixed status."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "server_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidInput(SubmissionServiceError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "invalid_input"


class DuplicateSubmission(SubmissionServiceError):
    """Raised when a submission falls into an already used dedupe window."""
    status_code = status.HTTP_429_TOO_MANY_REQUESTS
    code = "duplicate_submission"


class StorageFailure(SubmissionServiceError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "storage_failure"


class NotReady(SubmissionServiceError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    code = "not_ready"
