"""
Custom domain exceptions for the application.

These exceptions are raised by the service layer and converted to HTTP responses
by centralized exception handlers in main.py, keeping services HTTP-agnostic.

The authentication module (auth.py) also uses these domain exceptions so the
identity gate can be reused outside of request handling (CLI tools, init_db).

Every exception carries a correlation ID for Sentry integration and user error
reporting, and a short ``error_type`` code returned to clients as ``type``.
"""

from core.correlation import generate_correlation_id, get_correlation_id


class DomainException(Exception):
    """
    Base class for all domain exceptions.

    Attributes:
        message: Human-readable error message.
        correlation_id: Unique ID for error tracking (auto-generated if not provided).
    """

    error_type = "domain_error"

    def __init__(self, message: str, correlation_id: str | None = None):
        self.message = message
        # Use request correlation ID if available, otherwise generate new one
        self.correlation_id = (
            correlation_id or get_correlation_id() or generate_correlation_id()
        )
        super().__init__(self.message)


class NotFoundException(DomainException):
    """Raised when a requested resource is not found."""

    error_type = "not_found"


class PermissionDeniedException(DomainException):
    """Raised when user lacks required permissions."""

    error_type = "forbidden"


class ValidationException(DomainException):
    """Raised when input validation fails."""

    error_type = "invalid_payload"


class ConflictException(DomainException):
    """Raised when operation conflicts with existing data."""

    error_type = "conflict"


class AuthenticationException(DomainException):
    """Raised when authentication fails."""

    error_type = "unauthorized"


class SessionExpiredException(AuthenticationException):
    """Access token was valid but has expired."""

    error_type = "session_expired"

    def __init__(self) -> None:
        super().__init__("Session expired. Please sign in again.")


# Not found


class ProfileNotFoundException(NotFoundException):
    """Profile not found."""

    def __init__(self) -> None:
        super().__init__("User not found")


class PostNotFoundException(NotFoundException):
    """Post not found, soft-deleted or hidden from the caller."""

    def __init__(self) -> None:
        super().__init__("Post not found")


class CommentNotFoundException(NotFoundException):
    """Comment not found or soft-deleted."""

    def __init__(self) -> None:
        super().__init__("Comment not found")


class TagNotFoundException(NotFoundException):
    """Tag not found."""

    def __init__(self) -> None:
        super().__init__("Tag not found")


class ReportNotFoundException(NotFoundException):
    """Report not found."""

    def __init__(self) -> None:
        super().__init__("Report not found")


class VerificationRequestNotFoundException(NotFoundException):
    """Verification request not found."""

    def __init__(self) -> None:
        super().__init__("Verification request not found")


# Permissions


class InsufficientPermissionsException(PermissionDeniedException):
    """User doesn't have the role required for the operation."""

    pass


class AdminRoleRequiredException(PermissionDeniedException):
    """Raised when a moderator attempts an admin-only change."""

    def __init__(self) -> None:
        super().__init__("Only admins can change roles")


class NotOwnerException(PermissionDeniedException):
    """Raised when a user mutates content they did not author."""

    def __init__(self, what: str = "content") -> None:
        super().__init__(f"You can only modify your own {what}")


class ActorMismatchException(PermissionDeniedException):
    """Raised when the userId in a body does not match the session."""

    def __init__(self) -> None:
        super().__init__("User mismatch")


# Validation


class MissingActionException(ValidationException):
    """Moderation action was not supplied."""

    error_type = "missing_action"

    def __init__(self) -> None:
        super().__init__("Missing action")


class InvalidActionException(ValidationException):
    """Moderation action is not one of the known actions."""

    error_type = "invalid_action"

    def __init__(self, action: str | None = None) -> None:
        super().__init__(f"Invalid action: {action}" if action else "Invalid action")


class InvalidStatusException(ValidationException):
    """Status is outside the allowed set."""

    error_type = "invalid_status"

    def __init__(self, status: str | None = None) -> None:
        super().__init__(f"Invalid status: {status}" if status else "Invalid status")


class InvalidRoleException(ValidationException):
    """Role is outside the allowed set."""

    error_type = "invalid_role"

    def __init__(self) -> None:
        super().__init__("Invalid role")


class SelfReportException(ValidationException):
    """Raised when a user reports themselves."""

    error_type = "self_report"

    def __init__(self) -> None:
        super().__init__("You can't report yourself")


class NothingToUpdateException(ValidationException):
    """Raised when a partial update carries no fields."""

    error_type = "nothing_to_update"

    def __init__(self) -> None:
        super().__init__("Nothing to update")


class ProofTooShortException(ValidationException):
    """Verification proof message is shorter than the minimum."""

    error_type = "proof_too_short"

    def __init__(self) -> None:
        super().__init__("Proof message is too short")


# Conflicts


class DuplicateSlugException(ConflictException):
    """Another tag already uses the slug."""

    def __init__(self) -> None:
        super().__init__("Slug already exists")


class TagInUseException(ConflictException):
    """Raised when deleting a tag still linked to posts."""

    def __init__(self, post_count: int) -> None:
        super().__init__(
            f"Tag is used by {post_count} post(s). Remove it from posts first."
        )
        self.post_count = post_count


class VerificationPendingException(ConflictException):
    """User already has a pending verification request."""

    def __init__(self) -> None:
        super().__init__("You already have a pending verification request.")


class AlreadyVerifiedException(ConflictException):
    """Latest verification request of the user is approved."""

    def __init__(self) -> None:
        super().__init__("You are already approved.")


class VerificationAlreadyReviewedException(ConflictException):
    """Verification request was already approved or rejected."""

    def __init__(self) -> None:
        super().__init__("Verification request was already reviewed")
