from __future__ import annotations

import logging

from passlib.context import CryptContext

from ...domain.errors import PasswordTooLong
from ...domain.ports.security import PasswordHasher

logger = logging.getLogger(__name__)

# bcrypt only reads this many bytes of the secret.
BCRYPT_MAX_BYTES = 72


class BcryptPasswordHasher(PasswordHasher):
    """passlib-backed bcrypt hasher.

    Secrets longer than ``BCRYPT_MAX_BYTES`` once UTF-8 encoded are refused
    instead of being silently truncated.
    """

    def __init__(self, rounds: int = 12) -> None:
        self._pwd = CryptContext(
            schemes=["bcrypt"],
            deprecated="auto",
            bcrypt__rounds=rounds,
            bcrypt__truncate_error=True,
        )

    def hash(self, plaintext: str) -> str:
        if self._too_long(plaintext):
            raise PasswordTooLong()
        return self._pwd.hash(plaintext)

    def verify(self, plaintext: str, digest: str) -> bool:
        if self._too_long(plaintext):
            return False
        try:
            return self._pwd.verify(plaintext, digest)
        except (ValueError, TypeError):
            # Malformed or foreign digests never match.
            logger.debug("Stored digest could not be identified by the bcrypt context")
            return False

    @staticmethod
    def _too_long(plaintext: str) -> bool:
        return len(plaintext.encode("utf-8")) > BCRYPT_MAX_BYTES
