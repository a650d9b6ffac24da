from __future__ import annotations

from typing import Protocol


class PasswordHasher(Protocol):
    """One-way password hashing with constant-time verification."""

    def hash(self, plaintext: str) -> str:
        ...

    def verify(self, plaintext: str, digest: str) -> bool:
        ...
