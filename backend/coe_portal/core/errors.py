# coe_portal/core/errors.py
"""
Domain error taxonomy.

Services raise these; `main.py` converts them into JSON responses of the
form {"detail": <code>, "message": <text>} with the matching status code.
Authentication failures are raised as HTTPException directly by the
dependencies in `api/v1/deps.py`.
"""


class PortalError(Exception):
    """Base class for request-terminal domain errors."""
    status_code = 400

    def __init__(self, code: str, message: str | None = None):
        super().__init__(message or code)
        self.code = code
        self.message = message or code


class ValidationFailed(PortalError):
    """Malformed or inconsistent input (bad parent comment, empty field...)."""
    status_code = 400


class Forbidden(PortalError):
    """Authenticated, but role/approval/ownership is insufficient."""
    status_code = 403


class NotFound(PortalError):
    """Referenced post/comment/staff/user does not exist (or is not visible)."""
    status_code = 404


class Conflict(PortalError):
    """Uniqueness rule violated (username taken, second active profile)."""
    status_code = 409


class UpstreamFailed(PortalError):
    """Media storage or AI generation provider failed; never retried."""
    status_code = 502
