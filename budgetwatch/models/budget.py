"""
Core Data Models for budgetwatch

These models define the schemas for all budget data flowing through the
system. Amounts are plain floats with no currency attached and no sign
constraints: a negative limit or a refund recorded as negative spending
is accepted as-is.
"""

from enum import Enum
from typing import Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class AccountField(str, Enum):
    """Amount fields that can be set for every account at once."""
    TOTAL_MONEY = "total_money"
    WEEKLY_LIMIT = "weekly_limit"
    SPENT_THIS_WEEK = "spent_this_week"


class AlertTier(str, Enum):
    """
    How close the week's combined spending is to the combined limit.

    NONE:  below the close band, or no positive limit at all
    CLOSE: at or above the close band, below the over band
    OVER:  at or above the over band
    """
    NONE = "none"
    CLOSE = "close"
    OVER = "over"

    @property
    def message(self) -> Optional[str]:
        """Fixed alert text for this tier, None when nothing is raised."""
        return _TIER_MESSAGES.get(self)

    @property
    def raises_alert(self) -> bool:
        return self is not AlertTier.NONE


_TIER_MESSAGES = {
    AlertTier.CLOSE: "Close to budget",
    AlertTier.OVER: "Over budget",
}


# =============================================================================
# ACCOUNT MODEL
# =============================================================================

class Account(BaseModel):
    """
    A named budget bucket.

    Snapshots are immutable; use model_copy(update=...) and save the copy
    to change an account.
    """
    model_config = ConfigDict(frozen=True)

    id: str = Field(
        default_factory=lambda: str(uuid4()),
        min_length=1,
        description="Opaque unique identifier"
    )
    name: str = Field(
        default="Account",
        description="Display name"
    )
    total_money: float = Field(
        default=0.0,
        description="Total balance held in this account"
    )
    weekly_limit: float = Field(
        default=0.0,
        description="How much may be spent per week"
    )
    spent_this_week: float = Field(
        default=0.0,
        description="How much has been spent so far this week"
    )

    def with_field(self, field: AccountField, value: float) -> "Account":
        """Copy of this account with one amount field replaced."""
        return self.model_copy(update={field.value: float(value)})


# =============================================================================
# DERIVED MODELS
# =============================================================================

class AggregateTotals(BaseModel):
    """Sums across every account. Derived, never persisted."""
    model_config = ConfigDict(frozen=True)

    total_spent: float = 0.0
    total_limit: float = 0.0

    @property
    def remaining(self) -> float:
        """Amount still available this week, never below zero."""
        return max(self.total_limit - self.total_spent, 0.0)

    @property
    def ratio(self) -> Optional[float]:
        """Spent/limit ratio, None when there is no positive limit."""
        if self.total_limit <= 0:
            return None
        return self.total_spent / self.total_limit


class BudgetSnapshot(BaseModel):
    """Outcome of one notifier refresh."""
    model_config = ConfigDict(frozen=True)

    totals: AggregateTotals
    tier: AlertTier
    summary_text: str
    alerts_enabled: bool
    alert_shown: bool = Field(
        description="Whether an alert notification is showing after the refresh"
    )
