"""
Amount formatting and parsing.

Whole amounts are shown without a decimal point ("5"), everything else
with exactly two decimals ("5.50").
"""

from typing import Any, Optional

from budgetwatch.models.budget import Account, AggregateTotals


def format_amount(value: float) -> str:
    """Render an amount: integers bare, anything else to two decimals."""
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return f"{value:.2f}"


def render_summary(totals: AggregateTotals) -> str:
    """Text of the always-on summary notification."""
    return (
        f"Budget: {format_amount(totals.total_spent)} / "
        f"{format_amount(totals.total_limit)} "
        f"({format_amount(totals.remaining)} Left)"
    )


def render_account_line(account: Account) -> str:
    """
    Per-account budget line shown in the account list.

    Unlike the summary, the remaining amount is not clamped at zero, so
    an overspent account shows a negative remainder.
    """
    left = account.weekly_limit - account.spent_this_week
    return (
        f"Budget: {format_amount(account.spent_this_week)} / "
        f"{format_amount(account.weekly_limit)} "
        f"({format_amount(left)} Left)"
    )


def parse_amount(raw: Any, default: Optional[float] = 0.0) -> Optional[float]:
    """
    Leniently turn a stored or typed value into a float.

    Anything that is not a number, or a string holding one, gives the
    default instead of an error.
    """
    if isinstance(raw, bool):
        return default
    if isinstance(raw, (int, float)):
        return float(raw)
    if isinstance(raw, str):
        try:
            return float(raw.strip())
        except ValueError:
            return default
    return default


def clean_amount_input(text: str) -> str:
    """Keep only digits and decimal points from user input."""
    return "".join(ch for ch in text if ch.isdigit() or ch == ".")
