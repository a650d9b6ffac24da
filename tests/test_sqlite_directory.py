from __future__ import annotations

from datetime import timezone
from pathlib import Path

import pytest

from credkeeper.domain.errors import EmailAlreadyTaken, StorageError
from credkeeper.infrastructure.persistence.sqlite import SQLiteUserDirectory


def test_insert_assigns_id_and_timestamps(sqlite_directory: SQLiteUserDirectory) -> None:
    user = sqlite_directory.insert("Alice", "alice@example.com", "digest-a")

    assert user.id > 0
    assert user.name == "Alice"
    assert user.password_hash == "digest-a"
    assert user.created_at.tzinfo == timezone.utc
    assert sqlite_directory.get_by_id(user.id) == user


def test_list_all_is_ordered_by_id(sqlite_directory: SQLiteUserDirectory) -> None:
    first = sqlite_directory.insert("Alice", "alice@example.com", "a")
    second = sqlite_directory.insert("Bob", "bob@example.com", "b")

    assert [user.id for user in sqlite_directory.list_all()] == [first.id, second.id]


def test_exists_by_email(sqlite_directory: SQLiteUserDirectory) -> None:
    sqlite_directory.insert("Alice", "alice@example.com", "a")

    assert sqlite_directory.exists_by_email("alice@example.com")
    assert not sqlite_directory.exists_by_email("bob@example.com")


def test_insert_duplicate_email_is_rejected_atomically(sqlite_directory: SQLiteUserDirectory) -> None:
    sqlite_directory.insert("Alice", "alice@example.com", "a")

    with pytest.raises(EmailAlreadyTaken):
        sqlite_directory.insert("Impostor", "alice@example.com", "b")

    assert len(sqlite_directory.list_all()) == 1


def test_update_fields_to_taken_email_is_rejected(sqlite_directory: SQLiteUserDirectory) -> None:
    sqlite_directory.insert("Alice", "alice@example.com", "a")
    bob = sqlite_directory.insert("Bob", "bob@example.com", "b")

    with pytest.raises(EmailAlreadyTaken):
        sqlite_directory.update_fields(bob.id, "Bob", "alice@example.com")

    assert sqlite_directory.get_by_id(bob.id).email == "bob@example.com"


def test_update_fields_keeps_password_hash(sqlite_directory: SQLiteUserDirectory) -> None:
    user = sqlite_directory.insert("Alice", "alice@example.com", "digest-a")

    sqlite_directory.update_fields(user.id, "Alice B.", "alice.b@example.com")

    stored = sqlite_directory.get_by_id(user.id)
    assert stored.name == "Alice B."
    assert stored.email == "alice.b@example.com"
    assert stored.password_hash == "digest-a"


def test_update_password_hash_and_delete(sqlite_directory: SQLiteUserDirectory) -> None:
    user = sqlite_directory.insert("Alice", "alice@example.com", "digest-a")

    sqlite_directory.update_password_hash(user.id, "digest-b")
    assert sqlite_directory.get_by_id(user.id).password_hash == "digest-b"

    sqlite_directory.delete(user.id)
    assert sqlite_directory.get_by_id(user.id) is None


def test_writes_on_closed_connection_raise_storage_error(tmp_path: Path) -> None:
    directory = SQLiteUserDirectory(tmp_path / "nested" / "users.db")
    assert (tmp_path / "nested" / "users.db").exists()
    directory.close()

    with pytest.raises(StorageError):
        directory.insert("Alice", "alice@example.com", "a")
    with pytest.raises(StorageError):
        directory.delete(1)


def test_data_survives_reopen(tmp_path: Path) -> None:
    path = tmp_path / "users.db"
    directory = SQLiteUserDirectory(path)
    user = directory.insert("Alice", "alice@example.com", "a")
    directory.close()

    reopened = SQLiteUserDirectory(path)
    try:
        assert reopened.get_by_id(user.id).email == "alice@example.com"
    finally:
        reopened.close()


def test_writes_to_missing_rows_raise_storage_error(sqlite_directory: SQLiteUserDirectory) -> None:
    with pytest.raises(StorageError):
        sqlite_directory.update_fields(42, "Ghost", "ghost@example.com")
    with pytest.raises(StorageError):
        sqlite_directory.update_password_hash(42, "digest")
    with pytest.raises(StorageError):
        sqlite_directory.delete(42)


def test_update_fields_with_unchanged_values_counts_as_written(sqlite_directory: SQLiteUserDirectory) -> None:
    user = sqlite_directory.insert("Alice", "alice@example.com", "a")

    sqlite_directory.update_fields(user.id, "Alice", "alice@example.com")

    assert sqlite_directory.get_by_id(user.id).name == "Alice"
