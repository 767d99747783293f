"""Custom domain exceptions for the application."""

# Stable, machine-readable error codes for API consumers.
VALIDATION_ERROR = "VALIDATION_ERROR"
NOT_FOUND = "NOT_FOUND"
FORBIDDEN = "FORBIDDEN"
CONFLICT = "CONFLICT"
UNAUTHORIZED = "UNAUTHORIZED"
INTERNAL_ERROR = "INTERNAL_ERROR"
STORE_ERROR = "STORE_ERROR"

INTERNAL_MESSAGE = "internal server error"


class DomainError(Exception):
    """Base exception for domain/business logic errors.

    Every subclass carries a machine-readable ``kind`` and the HTTP status code
    the transport layer should answer with.
    """

    kind: str = INTERNAL_ERROR
    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class DomainValidationError(DomainError):
    """Raised when a required field is missing or a value is not allowed."""

    kind = VALIDATION_ERROR
    status_code = 400


class NotFoundError(DomainError):
    """Raised when a requested resource does not exist."""

    kind = NOT_FOUND
    status_code = 404


class ForbiddenError(DomainError):
    """Raised when the actor's role or ownership does not allow the action."""

    kind = FORBIDDEN
    status_code = 403


class DuplicateResourceError(DomainError):
    """Raised when a write would violate a uniqueness constraint."""

    kind = CONFLICT
    status_code = 409


class UnauthorizedError(DomainError):
    """Raised when credentials are wrong."""

    kind = UNAUTHORIZED
    status_code = 401


class InternalError(DomainError):
    """Raised when hashing a password or issuing a token fails."""

    kind = INTERNAL_ERROR
    status_code = 500

    def __init__(self, message: str = INTERNAL_MESSAGE):
        super().__init__(message)


class StoreError(DomainError):
    """Raised when a persistence collaborator fails."""

    kind = STORE_ERROR
    status_code = 500

    def __init__(self, message: str = INTERNAL_MESSAGE):
        super().__init__(message)
