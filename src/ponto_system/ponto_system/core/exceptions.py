class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class UserNotFoundError(DomainError):
    """Raised when a user id does not resolve in the credential store."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class InvalidCredentialsError(AuthenticationError):
    """Supplied password does not match the stored hash."""


class OutOfSequenceError(DomainError):
    """Raised when a clock event type breaks the ENTRADA/SAIDA alternation."""


class StoreUnavailableError(DomainError):
    """Wraps any failure of the external database."""
