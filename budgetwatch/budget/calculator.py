"""
Budget Calculations

Pure functions: the same accounts always give the same totals, and the
same totals always give the same alert tier. Nothing here touches
storage or notifications.
"""

from typing import Iterable

from budgetwatch.models.budget import Account, AggregateTotals, AlertTier


DEFAULT_CLOSE_RATIO = 0.9
DEFAULT_OVER_RATIO = 1.0


def aggregate(accounts: Iterable[Account]) -> AggregateTotals:
    """
    Sum spending and limits across every account.

    The two sums are independent; an empty iterable gives zero totals.
    """
    total_spent = 0.0
    total_limit = 0.0
    for account in accounts:
        total_spent += account.spent_this_week
        total_limit += account.weekly_limit
    return AggregateTotals(total_spent=total_spent, total_limit=total_limit)


def classify(
    totals: AggregateTotals,
    close_ratio: float = DEFAULT_CLOSE_RATIO,
    over_ratio: float = DEFAULT_OVER_RATIO,
) -> AlertTier:
    """
    Map spent/limit onto an alert tier.

    Without a positive limit the ratio is meaningless and no alert is
    raised. Bands include their lower edge, and OVER is checked first:

        ratio >= over_ratio                 -> OVER
        close_ratio <= ratio < over_ratio   -> CLOSE
        otherwise                           -> NONE
    """
    ratio = totals.ratio
    if ratio is None:
        return AlertTier.NONE
    if ratio >= over_ratio:
        return AlertTier.OVER
    if ratio >= close_ratio:
        return AlertTier.CLOSE
    return AlertTier.NONE
