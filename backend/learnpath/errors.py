"""Typed errors raised by services and translated to HTTP envelopes.

Every error carries the status code it maps to and a message that is safe
to return to the client.
"""


class LearnPathError(Exception):
    """Base class for domain errors."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(LearnPathError):
    """Malformed request or missing required field."""

    status_code = 400
    default_message = "Invalid request"


class OutOfRange(ValidationError):
    """Item index outside the current sequence."""

    default_message = "Index out of range"


class Unauthenticated(LearnPathError):
    """No identity, or the credential could not be validated."""

    status_code = 401
    default_message = "Not authorized to access this route"


class Forbidden(LearnPathError):
    """Identity present but without rights on the resource."""

    status_code = 403
    default_message = "User not authorized"


class NotFound(LearnPathError):
    status_code = 404
    default_message = "Resource not found"


class Conflict(LearnPathError):
    """Request conflicts with existing state (duplicate email, membership)."""

    status_code = 400
    default_message = "Resource already exists"


class StaleWrite(Conflict):
    """A concurrent write changed the record between read and write."""

    status_code = 409
    default_message = "Resource was modified concurrently, reload and try again"


class InternalError(LearnPathError):
    """Persistence failure or unexpected error."""
