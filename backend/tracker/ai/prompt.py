"""Prompt constants and helpers for AI budgeting advice."""

SYSTEM_PROMPT = """
You are a helpful assistant providing general budgeting and saving guidance.

Rules:
- Do not provide personalized financial advice.
- Do not recommend specific financial products.
- Keep answers short and practical.
""".strip()


def build_advice_prompt(
    summary: dict[str, float],
    total: float,
    currency: str,
    extra_prompt: str | None = None,
) -> str:
    """Describe the user's spending and ask for 50/30/20-style suggestions."""
    summary_lines = ", ".join(
        f"{category}: {currency}{amount:.2f}" for category, amount in summary.items()
    )
    prompt = (
        f"User spending summary: {summary_lines or 'no expenses recorded'} "
        f"with total {currency}{total:.2f}. "
        "Provide general budgeting and saving suggestions based on this summary following "
        "the 50-30-20 budgeting rule. Recommend ways to reduce costs and outline general "
        "types of investment vehicles (e.g., high-yield savings accounts, index funds, "
        "retirement accounts) without mentioning specific financial products. Include a "
        "disclaimer that it is educational information, not personal financial advice."
    )

    if extra_prompt and extra_prompt.strip():
        return f"{prompt}\n\n{extra_prompt.strip()}"
    return prompt
