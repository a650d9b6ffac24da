from __future__ import annotations

from typing import List, Optional, Protocol

from ..models import User


class UserDirectory(Protocol):
    """Authoritative storage for user records.

    Writes raise ``EmailAlreadyTaken`` when the email unique constraint is
    violated and ``StorageError`` for any other failure of the backing store.
    """

    def list_all(self) -> List[User]:
        ...

    def get_by_id(self, user_id: int) -> Optional[User]:
        ...

    def exists_by_email(self, email: str) -> bool:
        ...

    def insert(self, name: str, email: str, password_hash: str) -> User:
        ...

    def update_fields(self, user_id: int, name: str, email: str) -> None:
        ...

    def update_password_hash(self, user_id: int, password_hash: str) -> None:
        ...

    def delete(self, user_id: int) -> None:
        ...
