from __future__ import annotations

import os

import pytest

# Settings require a signing secret; set one before any tracker module is imported.
os.environ.setdefault("TOKEN_SECRET_KEY", "test-secret-key")

from tracker.database import open_storage  # noqa: E402
from tracker.security.tokens import TokenCodec  # noqa: E402


@pytest.fixture
def storage(tmp_path):
    return open_storage(tmp_path / "data")


@pytest.fixture
def codec():
    return TokenCodec("unit-test-secret")
