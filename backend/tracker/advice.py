"""Budgeting advice endpoints: rule-based tips and Gemini-generated guidance."""

import logging

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from .ai.gemini_client import GeminiClient, GeminiError, GeminiRequestError
from .ai.prompt import SYSTEM_PROMPT, build_advice_prompt
from .auth import get_current_user_id
from .config import settings
from .database import Storage, get_storage
from .services.advice_service import build_advice
from .services.expenses_service import list_expenses, summarize_by_category

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["advice"])

AI_NOT_CONFIGURED = (
    "AI integration not configured. Please set a GEMINI_API_KEY environment variable "
    "to enable external advice."
)


class AdviceResponse(BaseModel):
    total: float
    summary: dict[str, float]
    suggestions: list[str]


class AiAdviceRequest(BaseModel):
    prompt: str | None = None


class AiAdviceResponse(BaseModel):
    suggestions: list[str]


def get_gemini_client() -> GeminiClient | None:
    if not settings.gemini_api_key:
        return None

    return GeminiClient(
        api_key=settings.gemini_api_key,
        model=settings.gemini_model,
        timeout_seconds=settings.gemini_timeout_seconds,
        max_retries=settings.gemini_max_retries,
    )


@router.get("/advice", response_model=AdviceResponse)
async def advice_endpoint(
    user_id: int = Depends(get_current_user_id),
    storage: Storage = Depends(get_storage),
) -> AdviceResponse:
    """Educational suggestions based on the user's spending mix."""
    return AdviceResponse(**build_advice(await list_expenses(storage, user_id)))


@router.post("/ai-advice", response_model=AiAdviceResponse)
async def ai_advice_endpoint(
    payload: AiAdviceRequest | None = None,
    user_id: int = Depends(get_current_user_id),
    storage: Storage = Depends(get_storage),
    client: GeminiClient | None = Depends(get_gemini_client),
) -> AiAdviceResponse:
    if client is None:
        return AiAdviceResponse(suggestions=[AI_NOT_CONFIGURED])

    total, summary = summarize_by_category(await list_expenses(storage, user_id))
    prompt = build_advice_prompt(
        summary,
        total,
        settings.currency_symbol,
        payload.prompt if payload else None,
    )

    try:
        text = await client.generate_text(SYSTEM_PROMPT, prompt)
    except GeminiRequestError as exc:
        logger.warning("AI advice request failed with status %s", exc.status_code)
        if exc.status_code == 429:
            raise HTTPException(status_code=503, detail="AI advice is rate-limited right now. Try again shortly.") from exc
        raise HTTPException(status_code=502, detail="External AI request failed") from exc
    except GeminiError as exc:
        logger.warning("AI advice response could not be parsed: %s", exc)
        raise HTTPException(status_code=502, detail="Failed to parse AI response") from exc

    return AiAdviceResponse(suggestions=[text.strip()])
