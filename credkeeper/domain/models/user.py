"""User domain model and the projections handed out by the credential service."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict


@dataclass(slots=True)
class User:
    """
    Identity record as stored by the user directory.

    Attributes:
        id: Identifier assigned by the directory on insert
        name: Display name (not unique)
        email: Normalised email address (unique across live users)
        password_hash: Digest produced by the password hasher
        created_at: Creation timestamp (UTC)
        updated_at: Last update timestamp (UTC)
    """

    id: int
    name: str
    email: str
    password_hash: str
    created_at: datetime
    updated_at: datetime

    def __repr__(self) -> str:
        return f"<User id={self.id} email={self.email}>"


@dataclass(frozen=True, slots=True)
class UserProfile:
    """Public view of a user; never carries the password hash."""

    id: int
    name: str
    email: str

    @classmethod
    def from_user(cls, user: User) -> "UserProfile":
        return cls(id=user.id, name=user.name, email=user.email)

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name, "email": self.email}


@dataclass(frozen=True, slots=True)
class NewUser:
    """Result of a successful registration."""

    name: str
    email: str

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "email": self.email}
