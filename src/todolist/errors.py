from abc import ABC


class UserError(ABC, Exception):
    """Base class for user-related errors.

    All errors that inherit from UserError will have their messages
    displayed to the user. These errors should not contain any
    sensitive information.
    """

    error_type = "bad_request"


class NotFoundError(UserError):
    """Raised when a requested resource is not found."""

    error_type = "not_found"

    def __init__(self, message: str = "Document not found") -> None:
        super().__init__(message)


class AuthenticationError(UserError):
    """Raised when authentication fails."""

    error_type = "authentication_error"

    def __init__(self, message: str = "Authentication failed") -> None:
        super().__init__(message)


class MissingCredentialError(AuthenticationError):
    """Raised when a protected request carries no Authorization header."""

    error_type = "missing_credential"

    def __init__(self, message: str = "Authorization header is missing") -> None:
        super().__init__(message)


class InvalidFormatError(AuthenticationError):
    """Raised when the Authorization header is not `Bearer <token>`."""

    error_type = "invalid_format"

    def __init__(self, message: str = "Invalid Authorization header format. Expected 'Bearer <token>'") -> None:
        super().__init__(message)


class InvalidTokenError(AuthenticationError):
    """Raised when a token does not belong to any session or fails signature checks."""

    error_type = "invalid_token"

    def __init__(self, message: str = "Invalid token") -> None:
        super().__init__(message)


class TokenExpiredError(AuthenticationError):
    """Raised when a token belongs to a session past its expiry."""

    error_type = "token_expired"

    def __init__(self, message: str = "Token has expired. Please login again.") -> None:
        super().__init__(message)


class InvalidCredentialsError(AuthenticationError):
    """Raised when login fails, whether the email is unknown or the password is wrong."""

    error_type = "invalid_credentials"

    def __init__(self, message: str = "Invalid credentials") -> None:
        super().__init__(message)


class ConflictError(UserError):
    """Raised when a resource with the same unique key already exists."""

    error_type = "conflict"


class ValidationError(UserError):
    """Raised when user input fails validation."""

    error_type = "validation_error"


class InfrastructureError(Exception):
    """Base class for server-side faults.

    Messages of these errors are logged, never returned to the client.
    """


class StoreError(InfrastructureError):
    """Raised when a database operation fails or times out."""

    def __init__(self, operation: str) -> None:
        super().__init__(f"Store operation '{operation}' failed")
        self.operation = operation


class DataConsistencyError(InfrastructureError):
    """Raised when stored data contradicts itself, e.g. a live session without its user."""


class HashingError(InfrastructureError):
    """Raised when a password cannot be hashed."""


class SigningError(InfrastructureError):
    """Raised when a token cannot be signed."""
