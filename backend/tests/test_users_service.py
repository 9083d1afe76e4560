from __future__ import annotations

import asyncio

import pytest

from tracker.errors import AuthError, ConflictError, NotFoundError, ValidationError
from tracker.services import users_service


def _run(coro):
    return asyncio.run(coro)


def test_register_returns_public_profile(storage) -> None:
    profile = _run(users_service.register_user(storage, "alice", "secret123", full_name="Alice A"))

    assert profile == {"id": 1, "username": "alice", "full_name": "Alice A", "email": ""}

    stored = _run(storage.users.load_all())[0]
    assert stored["password_hash"] != "secret123"
    assert len(stored["salt"]) == 32


def test_register_duplicate_username_conflicts(storage) -> None:
    _run(users_service.register_user(storage, "alice", "secret123"))

    with pytest.raises(ConflictError):
        _run(users_service.register_user(storage, "alice", "other"))

    assert len(_run(storage.users.load_all())) == 1


def test_usernames_are_case_sensitive(storage) -> None:
    _run(users_service.register_user(storage, "alice", "pw"))
    profile = _run(users_service.register_user(storage, "Alice", "pw"))
    assert profile["id"] == 2


@pytest.mark.parametrize(
    "username,password",
    [("", "pw"), ("   ", "pw"), ("bob", ""), (None, "pw"), ("bob", None), (5, "pw")],
)
def test_register_requires_username_and_password(storage, username, password) -> None:
    with pytest.raises(ValidationError):
        _run(users_service.register_user(storage, username, password))


def test_each_user_gets_a_distinct_salt(storage) -> None:
    _run(users_service.register_user(storage, "alice", "same"))
    _run(users_service.register_user(storage, "bob", "same"))

    alice, bob = _run(storage.users.load_all())
    assert alice["salt"] != bob["salt"]
    assert alice["password_hash"] != bob["password_hash"]


def test_login_issues_token_for_valid_credentials(storage, codec) -> None:
    _run(users_service.register_user(storage, "alice", "secret123"))

    token = _run(users_service.login(storage, codec, "alice", "secret123"))

    assert codec.verify(token).user_id == 1


@pytest.mark.parametrize("username,password", [("alice", "wrong"), ("nobody", "secret123"), (None, None)])
def test_login_rejects_bad_credentials_uniformly(storage, codec, username, password) -> None:
    _run(users_service.register_user(storage, "alice", "secret123"))

    with pytest.raises(AuthError) as exc_info:
        _run(users_service.login(storage, codec, username, password))

    assert str(exc_info.value) == users_service.INVALID_CREDENTIALS


def test_get_profile_missing_user(storage) -> None:
    with pytest.raises(NotFoundError):
        _run(users_service.get_profile(storage, 42))


def test_update_profile_fields_and_password_resalts(storage, codec) -> None:
    _run(users_service.register_user(storage, "alice", "secret123"))
    old_salt = _run(storage.users.load_all())[0]["salt"]

    profile = _run(
        users_service.update_profile(
            storage, 1, {"full_name": "Alice Liddell", "email": "a@example.com", "password": "newpass"}
        )
    )

    assert profile == {"id": 1, "username": "alice", "full_name": "Alice Liddell", "email": "a@example.com"}
    assert _run(storage.users.load_all())[0]["salt"] != old_salt
    assert codec.verify(_run(users_service.login(storage, codec, "alice", "newpass"))) is not None
    with pytest.raises(AuthError):
        _run(users_service.login(storage, codec, "alice", "secret123"))


def test_update_profile_blank_password_is_ignored(storage, codec) -> None:
    _run(users_service.register_user(storage, "alice", "secret123"))
    before = _run(storage.users.load_all())[0]

    _run(users_service.update_profile(storage, 1, {"password": "   "}))

    assert _run(storage.users.load_all())[0] == before


def test_update_profile_rejects_unknown_fields(storage) -> None:
    _run(users_service.register_user(storage, "alice", "secret123"))

    with pytest.raises(ValidationError):
        _run(users_service.update_profile(storage, 1, {"salt": "chosen"}))


def test_update_profile_missing_user(storage) -> None:
    with pytest.raises(NotFoundError):
        _run(users_service.update_profile(storage, 9, {"full_name": "Ghost"}))


def test_padded_username_registers_and_logs_in(storage, codec) -> None:
    profile = _run(users_service.register_user(storage, " alice ", "secret123"))
    assert profile["username"] == "alice"

    padded = _run(users_service.login(storage, codec, " alice ", "secret123"))
    plain = _run(users_service.login(storage, codec, "alice", "secret123"))

    assert codec.verify(padded).user_id == codec.verify(plain).user_id == profile["id"]

    with pytest.raises(ConflictError):
        _run(users_service.register_user(storage, "alice  ", "other"))
