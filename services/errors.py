"""
errors.py — Domain exceptions mapped to HTTP responses by the error handler.
"""


class FantasyError(Exception):
    """Base class; status_code is the HTTP status the handler answers with."""
    status_code = 400
    error = "Bad Request"

    def __init__(self, message):
        super().__init__(message)
        self.message = message


class NotFoundError(FantasyError):
    status_code = 404
    error = "Not Found"


class ConflictError(FantasyError):
    status_code = 409
    error = "Conflict"


class TeamRuleError(FantasyError):
    """A team change that breaks a game rule (size, budget, membership)."""


class AuthError(FantasyError):
    status_code = 401
    error = "Unauthorized"


class ForbiddenError(FantasyError):
    status_code = 403
    error = "Forbidden"


class InvalidRequestError(FantasyError):
    """Malformed request that schema validation cannot express."""
