"""Goals router with user-scoped CRUD endpoints."""

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel

from .auth import get_current_user_id
from .database import Storage, get_storage
from .errors import NotFoundError, ValidationError
from .services.goals_service import create_goal, delete_goal, list_goals, update_goal

router = APIRouter(prefix="/api/goals", tags=["goals"])


class GoalCreateRequest(BaseModel):
    title: str | None = None
    target_amount: float | str | None = None
    frequency: str | None = None


class GoalUpdateRequest(BaseModel):
    title: str | None = None
    target_amount: float | str | None = None
    frequency: str | None = None


class GoalResponse(BaseModel):
    id: int
    user_id: int
    title: str
    target_amount: float
    frequency: str


@router.post("", response_model=GoalResponse, status_code=status.HTTP_201_CREATED)
async def create_goal_endpoint(
    payload: GoalCreateRequest,
    user_id: int = Depends(get_current_user_id),
    storage: Storage = Depends(get_storage),
) -> GoalResponse:
    """Create one savings goal for the current user."""
    try:
        row = await create_goal(storage, user_id, payload.model_dump(exclude_none=True))
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    return GoalResponse(**row)


@router.get("", response_model=list[GoalResponse])
async def list_goals_endpoint(
    user_id: int = Depends(get_current_user_id),
    storage: Storage = Depends(get_storage),
) -> list[GoalResponse]:
    rows = await list_goals(storage, user_id)
    return [GoalResponse(**row) for row in rows]


@router.put("/{goal_id}", response_model=GoalResponse)
async def update_goal_endpoint(
    goal_id: int,
    payload: GoalUpdateRequest,
    user_id: int = Depends(get_current_user_id),
    storage: Storage = Depends(get_storage),
) -> GoalResponse:
    """Partially update one goal."""
    try:
        row = await update_goal(storage, user_id, goal_id, payload.model_dump(exclude_unset=True))
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    return GoalResponse(**row)


@router.delete("/{goal_id}", response_model=GoalResponse)
async def delete_goal_endpoint(
    goal_id: int,
    user_id: int = Depends(get_current_user_id),
    storage: Storage = Depends(get_storage),
) -> GoalResponse:
    """Delete one goal for the current user and return it."""
    try:
        row = await delete_goal(storage, user_id, goal_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc

    return GoalResponse(**row)
