class DomainError(Exception):
    """Base class for errors a front-end should show to the user."""


class ValidationError(DomainError):
    """Bad input, or a request the attendance rules refuse."""


class NotFoundError(ValidationError):
    """A user, class, subject or attendance record id that does not exist."""


class AuthenticationError(DomainError):
    """Login failed (unknown email, wrong password, inactive account)."""


class AuthorizationError(DomainError):
    """The acting role or teacher assignment does not permit the action."""
