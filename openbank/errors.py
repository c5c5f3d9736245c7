"""Error taxonomy for the open banking mock API.

Every error the API reports on purpose derives from ``ApiError`` and carries
the HTTP status and the client-safe message. The exception handler in
``openbank.main`` renders them as ``{"error": message}``.
"""
from typing import Optional

# Clients see the same body no matter why authentication failed.
UNAUTHORIZED_MESSAGE = "unauthorized"


class ApiError(Exception):
    """Base class for errors converted into JSON error responses."""

    status_code: int = 500
    message: str = "internal error"

    def __init__(self, message: Optional[str] = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class RequestValidationFailed(ApiError):
    """Client input is missing or malformed."""

    status_code = 400
    message = "bad request"


class UnknownPersonaError(RequestValidationFailed):
    """The requested persona does not exist in the fixture store.

    Reported as a validation error rather than "not found" so persona
    existence is not revealed through a distinct status code.
    """

    message = "invalid persona"


class AuthenticationError(ApiError):
    """The request lacks a usable access token."""

    status_code = 401
    reason = "unknown"

    def __init__(self, reason: Optional[str] = None):
        super().__init__(UNAUTHORIZED_MESSAGE)
        if reason is not None:
            self.reason = reason


class MissingCredentialError(AuthenticationError):
    """No ``Authorization: Bearer <token>`` header was supplied."""

    reason = "missing"


class InvalidCredentialError(AuthenticationError):
    """The token is malformed, forged or expired.

    ``detail`` records which one for logs; it is never sent to the client.
    """

    reason = "invalid"

    def __init__(self, detail: str = "invalid"):
        super().__init__()
        self.detail = detail


class InternalError(ApiError):
    """An invariant was violated; not expected in normal operation."""

    status_code = 500
    message = "internal error"
