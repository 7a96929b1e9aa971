"""Admin domain models."""

from dataclasses import dataclass
from typing import Literal

Role = Literal["free", "premium", "admin"]
AccountStatus = Literal["Active", "Suspended"]
Billing = Literal["monthly", "yearly"]


@dataclass(frozen=True)
class SubscriptionSummary:
    plan: Literal["free", "premium"]
    active: bool
    billing: Billing | None


@dataclass(frozen=True)
class UserRow:
    """Normalized admin view of a user document."""

    id: str
    name: str
    email: str
    role: Role
    account_status: AccountStatus
    joined_iso: str
    subscription: SubscriptionSummary
    photo_url: str | None = None


@dataclass(frozen=True)
class DashboardMetrics:
    """Headline numbers for the admin dashboard."""

    users: int
    active_users: int
    subscriptions: int
    revenue: float
    free_users: int
    premium_users: int
