"""Domain exceptions raised by the service layer.

HTTP status mapping lives in ``splajompy_api.main``; services raise these and
never build HTTP responses themselves.
"""


class SplajompyError(Exception):
    """Base class for expected, user-facing failures."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(SplajompyError):
    """Referenced post, user, comment or poll does not exist.

    Also raised when a block hides the resource from the viewer, so the
    blocked party cannot tell a block apart from a missing record.
    """


class ForbiddenError(SplajompyError):
    """The caller may not modify the referenced resource."""


class InvalidInputError(SplajompyError):
    """Request data failed a domain rule (e.g. poll option out of range)."""
