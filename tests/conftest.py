from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Tuple

import pytest

from credkeeper.application.services.credential_service import CredentialService
from credkeeper.domain.errors import StorageError
from credkeeper.domain.models import User
from credkeeper.infrastructure.persistence.sqlite import SQLiteUserDirectory
from credkeeper.infrastructure.security.password_hasher import BcryptPasswordHasher

# Lowest cost bcrypt accepts.
TEST_ROUNDS = 4


class RecordingDirectory:
    """Wraps a real directory and records every write it forwards."""

    def __init__(self, inner: SQLiteUserDirectory) -> None:
        self.inner = inner
        self.writes: List[Tuple[str, tuple]] = []

    def list_all(self) -> List[User]:
        return self.inner.list_all()

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self.inner.get_by_id(user_id)

    def exists_by_email(self, email: str) -> bool:
        return self.inner.exists_by_email(email)

    def insert(self, name: str, email: str, password_hash: str) -> User:
        self.writes.append(("insert", (name, email)))
        return self.inner.insert(name, email, password_hash)

    def update_fields(self, user_id: int, name: str, email: str) -> None:
        self.writes.append(("update_fields", (user_id, name, email)))
        self.inner.update_fields(user_id, name, email)

    def update_password_hash(self, user_id: int, password_hash: str) -> None:
        self.writes.append(("update_password_hash", (user_id,)))
        self.inner.update_password_hash(user_id, password_hash)

    def delete(self, user_id: int) -> None:
        self.writes.append(("delete", (user_id,)))
        self.inner.delete(user_id)


class BrokenWritesDirectory(RecordingDirectory):
    """Reads succeed, every write fails like a read-only store."""

    def insert(self, name: str, email: str, password_hash: str) -> User:
        self.writes.append(("insert", (name, email)))
        raise StorageError("attempt to write a readonly database")

    def update_fields(self, user_id: int, name: str, email: str) -> None:
        self.writes.append(("update_fields", (user_id, name, email)))
        raise StorageError("attempt to write a readonly database")

    def update_password_hash(self, user_id: int, password_hash: str) -> None:
        self.writes.append(("update_password_hash", (user_id,)))
        raise StorageError("attempt to write a readonly database")

    def delete(self, user_id: int) -> None:
        self.writes.append(("delete", (user_id,)))
        raise StorageError("attempt to write a readonly database")


@pytest.fixture()
def sqlite_directory(tmp_path: Path):
    directory = SQLiteUserDirectory(tmp_path / "users.db")
    yield directory
    directory.close()


@pytest.fixture()
def directory(sqlite_directory: SQLiteUserDirectory) -> RecordingDirectory:
    return RecordingDirectory(sqlite_directory)


@pytest.fixture()
def hasher() -> BcryptPasswordHasher:
    return BcryptPasswordHasher(rounds=TEST_ROUNDS)


@pytest.fixture()
def service(directory: RecordingDirectory, hasher: BcryptPasswordHasher) -> CredentialService:
    return CredentialService(directory, hasher)


@pytest.fixture()
def broken_directory(sqlite_directory: SQLiteUserDirectory) -> BrokenWritesDirectory:
    return BrokenWritesDirectory(sqlite_directory)


class VanishingDirectory(RecordingDirectory):
    """Returns the user, then loses the row before the caller can write to it."""

    def get_by_id(self, user_id: int) -> Optional[User]:
        user = self.inner.get_by_id(user_id)
        if user is not None:
            self.inner.delete(user_id)
        return user


@pytest.fixture()
def vanishing_directory(sqlite_directory: SQLiteUserDirectory) -> VanishingDirectory:
    return VanishingDirectory(sqlite_directory)
