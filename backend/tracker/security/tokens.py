"""Stateless signed session tokens.

Wire format is ``<base64 payload>.<hex signature>`` where the payload is the
JSON object ``{"user_id": int, "exp": epoch_millis}`` and the signature is
HMAC-SHA256 over the payload segment. There is no server-side session table,
so a token stays valid until it expires.
"""

from __future__ import annotations

import base64
import binascii
import hashlib
import hmac
import json
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

TOKEN_DELIMITER = "."
DEFAULT_TOKEN_TTL = timedelta(hours=24)


@dataclass(frozen=True)
class TokenPayload:
    user_id: int
    expires_at: datetime


def _now() -> datetime:
    """Wrapper for deterministic tests."""
    return datetime.now(timezone.utc)


def _to_millis(value: datetime) -> int:
    return int(value.timestamp() * 1000)


class TokenCodec:
    """Issues and verifies bearer tokens signed with one process-wide secret."""

    def __init__(self, secret_key: str, ttl: timedelta = DEFAULT_TOKEN_TTL) -> None:
        if not secret_key:
            raise ValueError("token secret key must not be empty")
        self._secret = secret_key.encode("utf-8")
        self.ttl = ttl

    def _sign(self, payload_segment: str) -> str:
        return hmac.new(self._secret, payload_segment.encode("ascii"), hashlib.sha256).hexdigest()

    def issue(self, user_id: int, now: datetime | None = None) -> str:
        issued_at = now or _now()
        payload = {
            "user_id": user_id,
            "exp": _to_millis(issued_at + self.ttl),
        }
        payload_segment = base64.b64encode(
            json.dumps(payload, separators=(",", ":")).encode("utf-8")
        ).decode("ascii")
        return f"{payload_segment}{TOKEN_DELIMITER}{self._sign(payload_segment)}"

    def verify(self, token: str | None, now: datetime | None = None) -> TokenPayload | None:
        """Return the payload of a valid, unexpired token, otherwise None."""
        if not isinstance(token, str):
            return None

        parts = token.split(TOKEN_DELIMITER)
        if len(parts) != 2 or not all(parts):
            return None

        payload_segment, signature = parts
        try:
            expected = self._sign(payload_segment).encode("ascii")
            provided = signature.encode("utf-8")
        except UnicodeEncodeError:
            return None

        if not hmac.compare_digest(expected, provided):
            return None

        try:
            raw = base64.b64decode(payload_segment, validate=True)
            payload = json.loads(raw.decode("utf-8"))
        except (binascii.Error, UnicodeDecodeError, ValueError):
            return None

        if not isinstance(payload, dict):
            return None

        user_id = payload.get("user_id")
        exp = payload.get("exp")
        if not isinstance(user_id, int) or isinstance(user_id, bool):
            return None
        if not isinstance(exp, (int, float)) or isinstance(exp, bool):
            return None

        current = now or _now()
        if exp <= _to_millis(current):
            return None

        return TokenPayload(
            user_id=user_id,
            expires_at=datetime.fromtimestamp(exp / 1000, tz=timezone.utc),
        )
