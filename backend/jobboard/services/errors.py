from __future__ import annotations


class ServiceError(Exception):
    """
    Base error for applicant-facing service operations.

    Carries the HTTP status and error code the boundary should report, so routes
    never translate individual exception types by hand.
    """

    status_code = 500
    error_code = "INTERNAL_ERROR"
    default_message = "Internal Server Error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(ServiceError):
    """Required identifying fields missing or malformed. Never retried."""

    status_code = 400
    error_code = "VALIDATION_ERROR"
    default_message = "Invalid request"


class UploadTooLargeError(ValidationError):
    status_code = 413
    error_code = "PAYLOAD_TOO_LARGE"
    default_message = "File too large"


class NotFoundError(ServiceError):
    status_code = 404
    error_code = "NOT_FOUND"
    default_message = "Not found"


class AlreadyAppliedError(ServiceError):
    """Business-rule rejection: the user already has an application for this job."""

    status_code = 409
    error_code = "ALREADY_APPLIED"
    default_message = "Already Applied"


class IdentityConflictError(ServiceError):
    """The email is already held by a different external identity."""

    status_code = 409
    error_code = "CONFLICT"
    default_message = "A user with this email already exists. Please contact support to link your accounts."


class InternalError(ServiceError):
    """Durable-store or blob-storage failure."""
