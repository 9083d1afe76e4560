from __future__ import annotations

from tracker.ai.prompt import build_advice_prompt
from tracker.services.advice_service import BUDGET_RULE_TIP, SAVINGS_TIP, build_advice


def test_no_expenses_gives_general_tips_only() -> None:
    advice = build_advice([])

    assert advice == {"total": 0.0, "summary": {}, "suggestions": [BUDGET_RULE_TIP, SAVINGS_TIP]}


def test_heavy_categories_are_called_out_first() -> None:
    advice = build_advice(
        [
            {"category": "rent", "amount": 600.0},
            {"category": "food", "amount": 300.0},
            {"category": "fun", "amount": 100.0},
        ]
    )

    assert advice["total"] == 1000.0
    assert advice["summary"] == {"rent": 600.0, "food": 300.0, "fun": 100.0}
    assert len(advice["suggestions"]) == 3
    assert "rent accounts for about 60%" in advice["suggestions"][0]
    assert advice["suggestions"][1:] == [BUDGET_RULE_TIP, SAVINGS_TIP]


def test_exactly_thirty_percent_is_not_heavy() -> None:
    advice = build_advice([{"category": "a", "amount": 3.0}, {"category": "b", "amount": 7.0}])

    heavy = [s for s in advice["suggestions"] if s.startswith("Your spending on")]
    assert heavy == [advice["suggestions"][0]]
    assert "on b " in heavy[0]


def test_advice_prompt_lists_categories_and_extra_prompt() -> None:
    prompt = build_advice_prompt({"food": 12.0, "rent": 100.5}, 112.5, "₦", "I want to buy a car.")

    assert prompt.startswith("User spending summary: food: ₦12.00, rent: ₦100.50 with total ₦112.50.")
    assert prompt.endswith("\n\nI want to buy a car.")


def test_advice_prompt_without_expenses() -> None:
    prompt = build_advice_prompt({}, 0.0, "$")
    assert "no expenses recorded" in prompt
    assert "total $0.00" in prompt
