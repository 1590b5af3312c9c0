"""Budget aggregation, alert classification and formatting."""

from budgetwatch.budget.calculator import (
    DEFAULT_CLOSE_RATIO,
    DEFAULT_OVER_RATIO,
    aggregate,
    classify,
)
from budgetwatch.budget.formatting import (
    clean_amount_input,
    format_amount,
    parse_amount,
    render_account_line,
    render_summary,
)

__all__ = [
    "DEFAULT_CLOSE_RATIO",
    "DEFAULT_OVER_RATIO",
    "aggregate",
    "classify",
    "clean_amount_input",
    "format_amount",
    "parse_amount",
    "render_account_line",
    "render_summary",
]
