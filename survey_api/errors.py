"""Domain error taxonomy.

Services raise these exceptions; the handlers registered in ``main`` turn
them into JSON error responses with the matching HTTP status.
"""


class SurveyAPIError(Exception):
    """Base class for errors that map to a client-facing response."""

    status_code = 500
    error = "Internal server error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(SurveyAPIError):
    """Missing or malformed input."""

    status_code = 400
    error = "Validation error"


class AuthenticationError(SurveyAPIError):
    """Credential absent, malformed, expired or otherwise invalid."""

    status_code = 401
    error = "Authentication failed"


class AuthorizationError(SurveyAPIError):
    """Valid credential whose role is not allowed to perform the operation."""

    status_code = 403
    error = "Forbidden"


class NotFoundError(SurveyAPIError):
    """Resource absent or not visible to the caller.

    Both cases share this error so callers cannot probe for the existence of
    another tenant's resources.
    """

    status_code = 404
    error = "Not found"


class ConflictError(SurveyAPIError):
    """Request conflicts with current state (duplicate key, publish-lock)."""

    status_code = 400
    error = "Conflict"
