"""Service layer for user-scoped expense CRUD and category summaries."""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

from ..errors import NotFoundError, ValidationError
from ..utils import parse_positive_amount, parse_timestamp, require_text, utc_now_iso

if TYPE_CHECKING:
    from ..database import Storage

EXPENSE_FIELDS = ("category", "amount", "date")


def _now_iso() -> str:
    """Wrapper for deterministic tests."""
    return utc_now_iso()


def _validate_patch(patch: dict[str, Any]) -> dict[str, Any]:
    if not patch:
        raise ValidationError("At least one field must be provided")

    unknown = set(patch) - set(EXPENSE_FIELDS)
    if unknown:
        raise ValidationError(f"Unknown fields: {', '.join(sorted(unknown))}")

    cleaned: dict[str, Any] = {}
    if "category" in patch:
        cleaned["category"] = require_text(patch["category"], "category")
    if "amount" in patch:
        cleaned["amount"] = parse_positive_amount(patch["amount"], "amount")
    if "date" in patch:
        cleaned["date"] = parse_timestamp(patch["date"], "date")
    return cleaned


async def list_expenses(storage: Storage, user_id: int) -> list[dict[str, Any]]:
    return await storage.expenses.list_by_owner(user_id)


async def get_expense(storage: Storage, user_id: int, expense_id: int) -> dict[str, Any]:
    row = await storage.expenses.find_by_id(expense_id, owner_id=user_id)
    if row is None:
        raise NotFoundError("Expense not found")
    return row


async def create_expense(storage: Storage, user_id: int, data: dict[str, Any]) -> dict[str, Any]:
    """Create one expense for the user; ``date`` defaults to now (UTC)."""
    if data.get("category") in (None, "") or data.get("amount") in (None, ""):
        raise ValidationError("Category and amount are required")

    date = data.get("date")
    return await storage.expenses.insert(
        {
            "user_id": user_id,
            "category": require_text(data["category"], "category"),
            "amount": parse_positive_amount(data["amount"], "amount"),
            "date": parse_timestamp(date, "date") if date else _now_iso(),
        }
    )


async def update_expense(
    storage: Storage,
    user_id: int,
    expense_id: int,
    patch: dict[str, Any],
) -> dict[str, Any]:
    """Apply a partial update; other users' expenses look exactly like missing ones."""
    row = await storage.expenses.update_by_id(expense_id, _validate_patch(patch), owner_id=user_id)
    if row is None:
        raise NotFoundError("Expense not found")
    return row


async def delete_expense(storage: Storage, user_id: int, expense_id: int) -> dict[str, Any]:
    removed = await storage.expenses.delete_by_id(expense_id, owner_id=user_id)
    if removed is None:
        raise NotFoundError("Expense not found")
    return removed


def summarize_by_category(expenses: Iterable[dict[str, Any]]) -> tuple[float, dict[str, float]]:
    """Return (total, {category: total}) in first-seen category order."""
    summary: dict[str, float] = {}
    total = 0.0
    for expense in expenses:
        amount = float(expense.get("amount") or 0)
        category = str(expense.get("category") or "")
        summary[category] = summary.get(category, 0.0) + amount
        total += amount
    return total, summary
