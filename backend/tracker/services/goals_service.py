"""Service layer for user-scoped savings goal CRUD."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ..errors import NotFoundError, ValidationError
from ..utils import parse_positive_amount, require_text

if TYPE_CHECKING:
    from ..database import Storage

DEFAULT_FREQUENCY = "monthly"
# Offered by the client. Stored values are free text; these are not enforced.
SUGGESTED_FREQUENCIES = ("daily", "weekly", "monthly")
GOAL_FIELDS = ("title", "target_amount", "frequency")


def _frequency(value: Any) -> str:
    if value is None or (isinstance(value, str) and not value.strip()):
        return DEFAULT_FREQUENCY
    return require_text(value, "frequency")


def _validate_patch(patch: dict[str, Any]) -> dict[str, Any]:
    if not patch:
        raise ValidationError("At least one field must be provided")

    unknown = set(patch) - set(GOAL_FIELDS)
    if unknown:
        raise ValidationError(f"Unknown fields: {', '.join(sorted(unknown))}")

    cleaned: dict[str, Any] = {}
    if "title" in patch:
        cleaned["title"] = require_text(patch["title"], "title")
    if "target_amount" in patch:
        cleaned["target_amount"] = parse_positive_amount(patch["target_amount"], "target_amount")
    if "frequency" in patch:
        cleaned["frequency"] = require_text(patch["frequency"], "frequency")
    return cleaned


async def list_goals(storage: Storage, user_id: int) -> list[dict[str, Any]]:
    return await storage.goals.list_by_owner(user_id)


async def get_goal(storage: Storage, user_id: int, goal_id: int) -> dict[str, Any]:
    row = await storage.goals.find_by_id(goal_id, owner_id=user_id)
    if row is None:
        raise NotFoundError("Goal not found")
    return row


async def create_goal(storage: Storage, user_id: int, data: dict[str, Any]) -> dict[str, Any]:
    """Create one goal; frequency falls back to monthly."""
    if data.get("title") in (None, "") or data.get("target_amount") in (None, ""):
        raise ValidationError("Title and target are required")

    return await storage.goals.insert(
        {
            "user_id": user_id,
            "title": require_text(data["title"], "title"),
            "target_amount": parse_positive_amount(data["target_amount"], "target_amount"),
            "frequency": _frequency(data.get("frequency")),
        }
    )


async def update_goal(
    storage: Storage,
    user_id: int,
    goal_id: int,
    patch: dict[str, Any],
) -> dict[str, Any]:
    row = await storage.goals.update_by_id(goal_id, _validate_patch(patch), owner_id=user_id)
    if row is None:
        raise NotFoundError("Goal not found")
    return row


async def delete_goal(storage: Storage, user_id: int, goal_id: int) -> dict[str, Any]:
    """Hard-delete one goal scoped to the authenticated user."""
    removed = await storage.goals.delete_by_id(goal_id, owner_id=user_id)
    if removed is None:
        raise NotFoundError("Goal not found")
    return removed
