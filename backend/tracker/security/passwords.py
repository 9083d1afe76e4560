"""Salted SHA-256 password digests."""

import hashlib
import hmac
import secrets

SALT_BYTES = 16


def derive_salt() -> str:
    """Fresh per-user salt, hex encoded. Never reuse across users or resets."""
    return secrets.token_hex(SALT_BYTES)


def hash_password(password: str, salt: str) -> str:
    return hashlib.sha256((password + salt).encode("utf-8")).hexdigest()


def verify_password(password: str, salt: str, expected_hash: str) -> bool:
    if not isinstance(password, str) or not isinstance(salt, str) or not isinstance(expected_hash, str):
        return False

    try:
        computed = hash_password(password, salt).encode("ascii")
        stored = expected_hash.encode("utf-8")
    except UnicodeEncodeError:
        return False

    return hmac.compare_digest(computed, stored)
