class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class DuplicateControlNumberError(ValidationError):
    """Raised when a student with the same control number already exists in the tenant."""

    def __init__(self, control_number: str):
        super().__init__("El número de control ya está registrado")
        self.control_number = control_number


class MalformedPayloadError(ValidationError):
    """Raised when a QR token is missing, is not URL-encoded JSON or lacks a field."""


class IdentityFailure(DomainError):
    """Raised when the session identity cannot be established."""


class StorageFailure(DomainError):
    """Raised when any create/query/listen operation against the store fails."""
