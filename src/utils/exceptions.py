"""Custom exception classes."""
from typing import Iterable, Optional


class RegistrationError(Exception):
    """Base class for registration workflow errors."""
    pass


class ValidationError(RegistrationError):
    """Raised when submitted form data fails validation."""

    def __init__(self, failures: Iterable[str], first_invalid: Optional[str] = None):
        self.failures = set(failures)
        self.first_invalid = first_invalid
        super().__init__(f"Invalid fields: {', '.join(sorted(self.failures))}")


class StorageError(RegistrationError):
    """Raised when the record store cannot read, write or serialize data."""
    pass


class RecordNotFoundError(RegistrationError):
    """Raised when a registration ID doesn't exist."""

    def __init__(self, record_id: int):
        self.record_id = record_id
        super().__init__(f"Registration not found: {record_id}")


class NavigationPreconditionError(RegistrationError):
    """Raised when a page is opened without the data it needs."""
    pass
