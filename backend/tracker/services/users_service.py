"""Service layer for user registration, login and profile management."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from ..errors import AuthError, ConflictError, NotFoundError, ValidationError
from ..security.passwords import derive_salt, hash_password, verify_password

if TYPE_CHECKING:
    from ..database import Storage
    from ..security.tokens import TokenCodec

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid username or password"
PROFILE_FIELDS = ("full_name", "email", "password")


def public_profile(user: dict[str, Any]) -> dict[str, Any]:
    """Externally visible view of a user record; never includes salt or digest."""
    return {
        "id": user["id"],
        "username": user["username"],
        "full_name": user.get("full_name") or "",
        "email": user.get("email") or "",
    }


def _credentials(password: str) -> dict[str, str]:
    salt = derive_salt()
    return {"salt": salt, "password_hash": hash_password(password, salt)}


def _optional_text(value: Any, field: str) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValidationError(f"{field} must be a string")
    return value.strip()


async def register_user(
    storage: Storage,
    username: Any,
    password: Any,
    full_name: Any = None,
    email: Any = None,
) -> dict[str, Any]:
    """Create a user with a fresh salt. Usernames are unique and case-sensitive."""
    if not isinstance(username, str) or not username.strip():
        raise ValidationError("Username and password are required")
    if not isinstance(password, str) or not password:
        raise ValidationError("Username and password are required")

    username = username.strip()

    def ensure_unique(users: list[dict[str, Any]]) -> None:
        if any(user.get("username") == username for user in users):
            raise ConflictError("Username already exists")

    user = await storage.users.insert(
        {
            "username": username,
            **_credentials(password),
            "full_name": _optional_text(full_name, "full_name"),
            "email": _optional_text(email, "email"),
        },
        guard=ensure_unique,
    )
    logger.info("Registered user %s (id=%s)", username, user["id"])
    return public_profile(user)


async def authenticate_user(storage: Storage, username: Any, password: Any) -> dict[str, Any]:
    """Return the stored user for valid credentials, otherwise raise AuthError."""
    if not isinstance(username, str) or not isinstance(password, str):
        raise AuthError(INVALID_CREDENTIALS)

    # Stored usernames are stripped at registration.
    username = username.strip()
    user = await storage.users.find_first(lambda record: record.get("username") == username)
    if user is None or not verify_password(password, user.get("salt"), user.get("password_hash")):
        logger.info("Failed login for username %r", username)
        raise AuthError(INVALID_CREDENTIALS)

    return user


async def login(storage: Storage, codec: TokenCodec, username: Any, password: Any) -> str:
    user = await authenticate_user(storage, username, password)
    return codec.issue(user["id"])


async def get_profile(storage: Storage, user_id: int) -> dict[str, Any]:
    user = await storage.users.find_by_id(user_id)
    if user is None:
        raise NotFoundError("User not found")
    return public_profile(user)


async def update_profile(storage: Storage, user_id: int, patch: dict[str, Any]) -> dict[str, Any]:
    """
    Update name, email and/or password.

    A non-blank password re-derives both salt and digest; a blank one is
    ignored, matching how the profile form submits untouched fields.
    """
    unknown = set(patch) - set(PROFILE_FIELDS)
    if unknown:
        raise ValidationError(f"Unknown fields: {', '.join(sorted(unknown))}")

    changes: dict[str, Any] = {}
    if patch.get("full_name") is not None:
        changes["full_name"] = _optional_text(patch["full_name"], "full_name")
    if patch.get("email") is not None:
        changes["email"] = _optional_text(patch["email"], "email")

    password = patch.get("password")
    if password is not None:
        if not isinstance(password, str):
            raise ValidationError("password must be a string")
        if password.strip():
            changes.update(_credentials(password.strip()))

    if not changes:
        return await get_profile(storage, user_id)

    user = await storage.users.update_by_id(user_id, changes)
    if user is None:
        raise NotFoundError("User not found")
    return public_profile(user)
