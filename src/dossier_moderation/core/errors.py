"""Error taxonomy shared by the moderation services and the HTTP layer.

Every error carries the HTTP status the API should answer with and a message
that is safe to show to the caller.
"""

from __future__ import annotations

HTTP_BAD_REQUEST = 400
HTTP_UNAUTHORIZED = 401
HTTP_FORBIDDEN = 403
HTTP_NOT_FOUND = 404
HTTP_CONFLICT = 409
HTTP_UNPROCESSABLE_ENTITY = 422


class ModerationError(RuntimeError):
    """Base exception raised for moderation failures."""

    status_code: int = HTTP_BAD_REQUEST
    default_message: str = "Moderation request failed"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)

    @property
    def public_message(self) -> str:
        return str(self)


class AuthenticationRequiredError(ModerationError):
    """Raised when an operation needs a signed-in caller and got a guest."""

    status_code = HTTP_UNAUTHORIZED
    default_message = "Authentication required"


class UnauthorizedError(ModerationError):
    """Raised when the caller lacks admin rights for an admin-only operation.

    The detailed message is kept for logs; callers only ever see a generic
    permission-denied message.
    """

    status_code = HTTP_FORBIDDEN
    default_message = "Admin privileges required"

    @property
    def public_message(self) -> str:
        return "Permission denied"


class ForbiddenError(ModerationError):
    """Raised when the caller does not own the resource they act on."""

    status_code = HTTP_FORBIDDEN
    default_message = "You can only act on your own content"


class UserBannedError(ModerationError):
    """Raised when a banned user attempts to create content."""

    status_code = HTTP_FORBIDDEN
    default_message = "Your account has been banned"


class ContentRejectedError(ModerationError):
    """Raised when the content-safety check rejects guest content."""

    status_code = HTTP_BAD_REQUEST
    default_message = "Content did not meet community standards"

    def __init__(self, reason: str | None = None) -> None:
        self.reason = reason
        super().__init__(reason)

    @property
    def public_message(self) -> str:
        if self.reason:
            return f"Content not allowed: {self.reason}"
        return self.default_message


class DuplicateFlagError(ModerationError):
    """Raised when a user flags the same content item twice."""

    status_code = HTTP_CONFLICT
    default_message = "You have already flagged this content"


class NotFoundError(ModerationError):
    """Raised when a referenced queue item, keyword, profile or comment is missing."""

    status_code = HTTP_NOT_FOUND
    default_message = "Not found"


class ValidationError(ModerationError):
    """Raised when a field-level constraint is violated before persistence."""

    status_code = HTTP_UNPROCESSABLE_ENTITY
    default_message = "Invalid input"
