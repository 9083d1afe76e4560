from __future__ import annotations

from tracker.security.passwords import derive_salt, hash_password, verify_password


def test_hash_is_deterministic_hex_sha256() -> None:
    digest = hash_password("secret123", "abc")
    assert digest == hash_password("secret123", "abc")
    assert len(digest) == 64
    int(digest, 16)


def test_verify_accepts_same_password_and_salt() -> None:
    salt = derive_salt()
    digest = hash_password("secret123", salt)
    assert verify_password("secret123", salt, digest) is True


def test_verify_rejects_other_salt_or_altered_password() -> None:
    salt = derive_salt()
    digest = hash_password("secret123", salt)

    assert verify_password("secret123", derive_salt(), digest) is False
    assert verify_password("secret124", salt, digest) is False
    assert verify_password("Secret123", salt, digest) is False
    assert verify_password("", salt, digest) is False


def test_verify_never_raises_on_bad_input() -> None:
    assert verify_password(None, "salt", "digest") is False
    assert verify_password("pw", None, "digest") is False
    assert verify_password("pw", "salt", None) is False


def test_salts_are_fresh_and_at_least_16_bytes() -> None:
    salts = {derive_salt() for _ in range(50)}
    assert len(salts) == 50
    assert all(len(salt) == 32 for salt in salts)


def test_verify_never_raises_on_non_ascii_or_unencodable_text() -> None:
    salt = derive_salt()

    assert verify_password("secret123", salt, "é" * 64) is False
    assert verify_password("\ud800", salt, hash_password("x", salt)) is False
    assert verify_password("pässwörd", salt, hash_password("pässwörd", salt)) is True
