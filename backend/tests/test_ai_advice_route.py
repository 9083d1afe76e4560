from __future__ import annotations

import asyncio

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

import tracker.advice as advice_router
from tracker.ai.gemini_client import GeminiRequestError, GeminiResponseError
from tracker.services import expenses_service


class StubGeminiClient:
    def __init__(self, result=None, error=None):
        self.result = result
        self.error = error
        self.calls = []

    async def generate_text(self, system_prompt, prompt, **kwargs):
        self.calls.append((system_prompt, prompt))
        if self.error is not None:
            raise self.error
        return self.result


def _app(storage, client_instance, user_id=1):
    app = FastAPI()
    app.include_router(advice_router.router)

    async def override_storage():
        yield storage

    app.dependency_overrides[advice_router.get_storage] = override_storage
    app.dependency_overrides[advice_router.get_current_user_id] = lambda: user_id
    app.dependency_overrides[advice_router.get_gemini_client] = lambda: client_instance
    return app


def test_ai_advice_requires_auth(storage) -> None:
    app = FastAPI()
    app.include_router(advice_router.router)

    with TestClient(app) as client:
        response = client.post("/api/ai-advice", json={})

    assert response.status_code == 401


def test_ai_advice_not_configured(storage) -> None:
    with TestClient(_app(storage, None)) as client:
        response = client.post("/api/ai-advice", json={})

    assert response.status_code == 200
    assert response.json() == {"suggestions": [advice_router.AI_NOT_CONFIGURED]}


def test_ai_advice_builds_prompt_from_own_expenses(storage, monkeypatch) -> None:
    asyncio.run(expenses_service.create_expense(storage, 1, {"category": "food", "amount": 12}))
    asyncio.run(expenses_service.create_expense(storage, 2, {"category": "yacht", "amount": 99999}))
    monkeypatch.setattr(advice_router.settings, "currency_symbol", "$")

    stub = StubGeminiClient(result="  Save more.  ")
    with TestClient(_app(storage, stub)) as client:
        response = client.post("/api/ai-advice", json={"prompt": "I earn 2000 a month."})

    assert response.status_code == 200
    assert response.json() == {"suggestions": ["Save more."]}

    system_prompt, prompt = stub.calls[0]
    assert system_prompt == advice_router.SYSTEM_PROMPT
    assert "food: $12.00" in prompt
    assert "yacht" not in prompt
    assert prompt.endswith("I earn 2000 a month.")


@pytest.mark.parametrize(
    "error,status_code",
    [
        (GeminiRequestError(429, "slow down"), 503),
        (GeminiRequestError(500, "boom"), 502),
        (GeminiResponseError("bad shape"), 502),
    ],
)
def test_ai_advice_upstream_failures(storage, error, status_code) -> None:
    with TestClient(_app(storage, StubGeminiClient(error=error))) as client:
        response = client.post("/api/ai-advice", json={})

    assert response.status_code == status_code
