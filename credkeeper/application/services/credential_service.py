from __future__ import annotations

import logging
from typing import Any, Callable, List, Optional, TypeVar

import anyio.to_thread

from ...domain.errors import (
    EmailAlreadyTaken,
    InvalidOldPassword,
    PasswordMismatch,
    PersistenceFailure,
    StorageError,
    UserNotFound,
)
from ...domain.models import NewUser, User, UserProfile
from ...domain.ports.persistence import UserDirectory
from ...domain.ports.security import PasswordHasher

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CredentialService:
    """Account lifecycle over a user directory and a password hasher.

    The service keeps no state of its own: every call goes to the directory,
    nothing is cached, and no locks are held between steps. Validation always
    runs before any I/O and each mutating operation performs at most one write.
    """

    def __init__(self, directory: UserDirectory, hasher: PasswordHasher) -> None:
        self._directory = directory
        self._hasher = hasher

    # Queries ----------------------------------------------------------------
    async def list_users(self) -> List[UserProfile]:
        users = await self._call(self._directory.list_all)
        return [UserProfile.from_user(user) for user in users]

    async def get_user(self, user_id: int) -> Optional[UserProfile]:
        """Return the user's public profile, or ``None`` when no such user exists."""
        user = await self._call(self._directory.get_by_id, user_id)
        if user is None:
            return None
        return UserProfile.from_user(user)

    async def email_exists(self, email: str) -> bool:
        return await self._call(self._directory.exists_by_email, self.normalize_email(email))

    # Mutations --------------------------------------------------------------
    async def create_user(
        self,
        name: str,
        email: str,
        password: str,
        confirm_password: str,
    ) -> NewUser:
        """
        Register a new user.

        Args:
            name: Display name
            email: Email address, must not be used by another user
            password: Plain text password
            confirm_password: Must equal ``password``

        Returns:
            The created user's name and normalised email

        Raises:
            PasswordMismatch: If the confirmation differs from the password
            EmailAlreadyTaken: If the email is already registered
            PasswordTooLong: If the password cannot be hashed without truncation
            PersistenceFailure: If the directory rejects the insert
        """
        if password != confirm_password:
            raise PasswordMismatch()

        email_clean = self.normalize_email(email)
        if await self.email_exists(email_clean):
            logger.info("Rejected registration for %s: email already taken", email_clean)
            raise EmailAlreadyTaken()

        password_hash = await self._call(self._hasher.hash, password)

        # The directory's unique constraint may still reject a concurrent duplicate.
        try:
            user = await self._call(self._directory.insert, name, email_clean, password_hash)
        except StorageError as exc:
            logger.warning("Failed to create user %s: %s", email_clean, exc)
            raise PersistenceFailure("Failed to create user") from exc

        logger.info("Created user %s <%s>", user.id, user.email)
        return NewUser(name=user.name, email=user.email)

    async def update_user(self, user_id: int, name: str, email: str) -> int:
        """Replace a user's name and email. The password hash is left untouched."""
        await self._require_user(user_id)

        email_clean = self.normalize_email(email)
        try:
            await self._call(self._directory.update_fields, user_id, name, email_clean)
        except StorageError as exc:
            logger.warning("Failed to update user %s: %s", user_id, exc)
            raise PersistenceFailure("Failed to update user") from exc

        logger.info("Updated user %s", user_id)
        return user_id

    async def delete_user(self, user_id: int) -> int:
        await self._require_user(user_id)

        try:
            await self._call(self._directory.delete, user_id)
        except StorageError as exc:
            logger.warning("Failed to delete user %s: %s", user_id, exc)
            raise PersistenceFailure("Failed to delete user") from exc

        logger.info("Deleted user %s", user_id)
        return user_id

    async def change_password(
        self,
        user_id: int,
        old_password: str,
        new_password: str,
        confirm_password: str,
    ) -> int:
        """
        Replace a user's password after verifying the current one.

        Steps run in order and stop at the first rejection: confirmation check,
        user lookup, old password verification, hashing, persistence.

        Returns:
            The id of the user whose password was changed

        Raises:
            PasswordMismatch: If the new password and its confirmation differ
            UserNotFound: If no user has the given id
            InvalidOldPassword: If ``old_password`` does not verify against the stored hash
            PasswordTooLong: If the new password cannot be hashed without truncation
            PersistenceFailure: If the directory rejects the write
        """
        if new_password != confirm_password:
            raise PasswordMismatch("New Password and Confirm Password do not match")

        user = await self._require_user(user_id)

        verified = await self._call(self._hasher.verify, old_password, user.password_hash)
        if not verified:
            logger.info("Rejected password change for user %s: old password is incorrect", user_id)
            raise InvalidOldPassword()

        password_hash = await self._call(self._hasher.hash, new_password)
        try:
            await self._call(self._directory.update_password_hash, user_id, password_hash)
        except StorageError as exc:
            logger.warning("Failed to change password for user %s: %s", user_id, exc)
            raise PersistenceFailure("Failed to change password") from exc

        logger.info("Changed password for user %s", user_id)
        return user_id

    # Helpers ----------------------------------------------------------------
    @staticmethod
    def normalize_email(email: str) -> str:
        return email.strip().lower()

    async def _require_user(self, user_id: int) -> User:
        user = await self._call(self._directory.get_by_id, user_id)
        if user is None:
            raise UserNotFound(user_id)
        return user

    @staticmethod
    async def _call(func: Callable[..., T], *args: Any) -> T:
        # Directory and hasher calls block; keep them off the event loop.
        return await anyio.to_thread.run_sync(func, *args)
