"""Error taxonomy for credential management."""

from __future__ import annotations

from typing import Optional


class CredentialError(Exception):
    """Base class for every classified credential-management failure."""

    code = "CREDENTIAL_ERROR"
    default_message = "Credential operation failed"

    def __init__(self, message: Optional[str] = None) -> None:
        super().__init__(message or self.default_message)
        self.message = message or self.default_message


class PasswordMismatch(CredentialError):
    """Raised when a password and its confirmation differ."""

    code = "PASSWORD_MISMATCH"
    default_message = "Password and Confirm Password do not match"


class EmailAlreadyTaken(CredentialError):
    """Raised when an email is already used by another user."""

    code = "EMAIL_ALREADY_TAKEN"
    default_message = "Email already taken"


class UserNotFound(CredentialError):
    """Raised when an operation targets an id with no user behind it."""

    code = "USER_NOT_FOUND"
    default_message = "Unknown user"

    def __init__(self, user_id: Optional[int] = None, message: Optional[str] = None) -> None:
        super().__init__(message or (f"User {user_id} not found" if user_id is not None else None))
        self.user_id = user_id


class InvalidOldPassword(CredentialError):
    code = "INVALID_PASSWORD"
    default_message = "Old password is incorrect"


class PasswordTooLong(CredentialError):
    """Raised when a password exceeds what the hasher can digest without truncation."""

    code = "PASSWORD_TOO_LONG"
    default_message = "Password must be at most 72 bytes long"


class PersistenceFailure(CredentialError):
    """The directory rejected a write. The underlying cause is chained, not interpreted."""

    code = "PERSISTENCE_FAILURE"
    default_message = "Failed to persist user"


class StorageError(Exception):
    """Raised by user directory implementations when the backing store fails."""


__all__ = [
    "CredentialError",
    "EmailAlreadyTaken",
    "InvalidOldPassword",
    "PasswordMismatch",
    "PasswordTooLong",
    "PersistenceFailure",
    "StorageError",
    "UserNotFound",
]
