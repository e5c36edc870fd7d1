"""Domain errors raised by the access-control core and the record store.

The app module maps each category onto one HTTP status; nothing below the
routers knows about HTTP.
"""


class DocshareError(Exception):
    """Base class for all domain errors."""


class InvalidTokenError(DocshareError):
    """Bearer token missing, malformed, expired, or badly signed.

    The reason is kept on the exception for logging but never shown to the caller.
    """

    def __init__(self, reason: str = "invalid token"):
        super().__init__(reason)
        self.reason = reason


class InvalidCredentialsError(DocshareError):
    """Login failed. Unknown user, wrong password and disabled account all look alike."""


class ForbiddenError(DocshareError):
    """Role or ownership check failed."""


class NotFoundError(DocshareError):
    """A user or document does not exist."""


class ConflictError(DocshareError):
    """A unique field (username, email, shareable link) is already taken."""


class ValidationFailedError(DocshareError):
    """Input payload was rejected (bad file, bad role name, ...)."""
