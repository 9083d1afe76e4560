"""Expenses router: user-scoped CRUD plus the per-category summary."""

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel

from .auth import get_current_user_id
from .database import Storage, get_storage
from .errors import NotFoundError, ValidationError
from .services.expenses_service import (
    create_expense,
    delete_expense,
    list_expenses,
    summarize_by_category,
    update_expense,
)

router = APIRouter(prefix="/api", tags=["expenses"])


class ExpenseCreateRequest(BaseModel):
    # Field checks live in the service layer and surface as 400s.
    category: str | None = None
    amount: float | str | None = None
    date: str | None = None


class ExpenseUpdateRequest(BaseModel):
    category: str | None = None
    amount: float | str | None = None
    date: str | None = None


class ExpenseResponse(BaseModel):
    id: int
    user_id: int
    category: str
    amount: float
    date: str


@router.get("/expenses", response_model=list[ExpenseResponse])
async def list_expenses_endpoint(
    user_id: int = Depends(get_current_user_id),
    storage: Storage = Depends(get_storage),
) -> list[ExpenseResponse]:
    rows = await list_expenses(storage, user_id)
    return [ExpenseResponse(**row) for row in rows]


@router.post("/expenses", response_model=ExpenseResponse, status_code=status.HTTP_201_CREATED)
async def create_expense_endpoint(
    payload: ExpenseCreateRequest,
    user_id: int = Depends(get_current_user_id),
    storage: Storage = Depends(get_storage),
) -> ExpenseResponse:
    try:
        row = await create_expense(storage, user_id, payload.model_dump(exclude_none=True))
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    return ExpenseResponse(**row)


@router.put("/expenses/{expense_id}", response_model=ExpenseResponse)
async def update_expense_endpoint(
    expense_id: int,
    payload: ExpenseUpdateRequest,
    user_id: int = Depends(get_current_user_id),
    storage: Storage = Depends(get_storage),
) -> ExpenseResponse:
    """Partially update one expense; omitted fields keep their values."""
    try:
        row = await update_expense(storage, user_id, expense_id, payload.model_dump(exclude_unset=True))
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    return ExpenseResponse(**row)


@router.delete("/expenses/{expense_id}", response_model=ExpenseResponse)
async def delete_expense_endpoint(
    expense_id: int,
    user_id: int = Depends(get_current_user_id),
    storage: Storage = Depends(get_storage),
) -> ExpenseResponse:
    """Delete one expense and return the removed record."""
    try:
        row = await delete_expense(storage, user_id, expense_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc

    return ExpenseResponse(**row)


@router.get("/summary", response_model=dict[str, float])
async def summary_endpoint(
    user_id: int = Depends(get_current_user_id),
    storage: Storage = Depends(get_storage),
) -> dict[str, float]:
    """Total spent per category for the current user."""
    _, summary = summarize_by_category(await list_expenses(storage, user_id))
    return summary
