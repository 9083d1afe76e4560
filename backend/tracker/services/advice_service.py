"""Rule-based budgeting suggestions derived from a user's expenses."""

from __future__ import annotations

from typing import Any

from .expenses_service import summarize_by_category

# Categories above this share of total spending get a cut-back suggestion.
HEAVY_CATEGORY_SHARE = 0.3

BUDGET_RULE_TIP = (
    "Aim to follow a budgeting rule like the 50/30/20 rule: allocate around 50% of your "
    "income to necessities (rent, utilities, groceries), 30% to wants, and at least 20% "
    "to savings."
)
SAVINGS_TIP = (
    "Build an emergency fund covering 3-6 months of expenses and focus on paying down "
    "high-interest debt before investing. Then consider putting savings into broad vehicles "
    "such as high-yield savings accounts, certificates of deposit, or diversified index funds. "
    "Always consult a professional for personalized advice."
)


def build_advice(expenses: list[dict[str, Any]]) -> dict[str, Any]:
    """
    Summarize spending and produce suggestions.

    Heavy-category suggestions come first, in category order; the two general
    tips are always appended. Educational information, not financial advice.
    """
    total, summary = summarize_by_category(expenses)

    suggestions: list[str] = []
    if total > 0:
        for category, amount in summary.items():
            share = amount / total
            if share > HEAVY_CATEGORY_SHARE:
                suggestions.append(
                    f"Your spending on {category} accounts for about {round(share * 100)}% of "
                    "your total expenses. Consider ways to reduce this category to free up "
                    "money for savings."
                )

    suggestions.append(BUDGET_RULE_TIP)
    suggestions.append(SAVINGS_TIP)

    return {"total": total, "summary": summary, "suggestions": suggestions}
