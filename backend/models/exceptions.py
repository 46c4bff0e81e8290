"""
Custom domain exceptions for the application.

These exceptions are raised by the service layer and converted to HTTP responses
by centralized exception handlers in main.py, keeping services HTTP-agnostic.

The authentication module (auth.py) raises the same domain exceptions so that
the access rules can be reused outside a request (CLI tools, tests).

Every exception carries a correlation ID for Sentry and user error reports.
"""

from datetime import datetime

from core.correlation import generate_correlation_id, get_correlation_id


class DomainException(Exception):
    """
    Base class for all domain exceptions.

    Attributes:
        message: Human-readable error message.
        correlation_id: Unique ID for error tracking (auto-generated if not provided).
    """

    def __init__(self, message: str, correlation_id: str | None = None):
        self.message = message
        # Use request correlation ID if available, otherwise generate new one
        self.correlation_id = (
            correlation_id or get_correlation_id() or generate_correlation_id()
        )
        super().__init__(self.message)


class NotFoundException(DomainException):
    """Raised when a requested resource is not found."""

    pass


class PermissionDeniedException(DomainException):
    """Raised when an authenticated user lacks required permissions."""

    pass


class AccessDeniedException(DomainException):
    """
    Raised when an entry exists but may not be read by the requester.

    Covers a wrong or missing special-post token and non-approved entries
    requested by someone other than their owner or a moderator.
    """

    def __init__(self, message: str = "Entry not found or access denied"):
        super().__init__(message)


class ValidationException(DomainException):
    """Raised when input validation fails."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        value: object | None = None,
    ):
        super().__init__(message)
        self.field = field
        self.value = value


class ConflictException(DomainException):
    """Raised when operation conflicts with existing data."""

    pass


class AuthenticationException(DomainException):
    """Raised when authentication fails."""

    pass


class BusinessRuleException(DomainException):
    """Raised when a business rule is violated."""

    pass


# Specific exceptions for domain entities


class UserNotFoundException(NotFoundException):
    """User not found."""

    def __init__(self, user_id: str):
        super().__init__(f"User {user_id} not found")
        self.user_id = user_id


class EntryNotFoundException(NotFoundException):
    """Wiki entry not found."""

    def __init__(self, entry_id: str):
        super().__init__(f"Entry {entry_id} not found")
        self.entry_id = entry_id


class ImageNotFoundException(NotFoundException):
    """Gallery image not found."""

    def __init__(self, image_id: str):
        super().__init__(f"Image {image_id} not found")
        self.image_id = image_id


class ReportNotFoundException(NotFoundException):
    """Content report not found."""

    def __init__(self, report_id: str):
        super().__init__(f"Report {report_id} not found")
        self.report_id = report_id


class CommentNotFoundException(NotFoundException):
    """Comment not found."""

    def __init__(self, comment_id: str):
        super().__init__(f"Comment {comment_id} not found")
        self.comment_id = comment_id


class InsufficientPermissionsException(PermissionDeniedException):
    """User doesn't have the capability required for an action."""

    pass


class NotOwnerException(PermissionDeniedException):
    """Raised when a user acts on content owned by someone else."""

    def __init__(self, message: str = "You can only modify your own content"):
        super().__init__(message)


class InvalidChoiceException(ValidationException):
    """Raised when a value is outside an enumerated set."""

    def __init__(self, field: str, value: object, allowed: list[str]):
        super().__init__(
            f"Invalid {field} {value!r}; expected one of: {', '.join(allowed)}",
            field=field,
            value=value,
        )
        self.allowed = allowed


class DuplicateLikeException(ConflictException):
    """User has already liked this entry."""

    def __init__(self, message: str = "You have already liked this entry"):
        super().__init__(message)


class SelfModerationException(BusinessRuleException):
    """Raised when an admin tries to ban, demote or delete their own account."""

    def __init__(self, action: str):
        super().__init__(f"You cannot {action} your own account")
        self.action = action


class SessionExpiredException(AuthenticationException):
    """Bearer token is past its expiry."""

    def __init__(self, message: str = "Session expired. Please log in again."):
        super().__init__(message)


class UserBannedException(DomainException):
    """Raised when a banned user tries to perform an authenticated action."""

    def __init__(self, reason: str | None = None, expires_at: datetime | None = None):
        if expires_at:
            message = (
                f"Your account is temporarily banned until {expires_at.isoformat()}"
            )
        else:
            message = "Your account has been permanently banned"
        super().__init__(message)
        self.reason = reason
        self.expires_at = expires_at
