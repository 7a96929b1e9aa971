"""Admin dashboard metrics."""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from mealmigo_site.domain.admin import DashboardMetrics
from mealmigo_site.services.documents import (
    USERS_COLLECTION,
    DocumentStore,
    parse_timestamp,
)

SUBSCRIPTION_PRICE = 9.99
ACTIVE_WINDOW = timedelta(days=30)


@dataclass
class DashboardService:
    store: DocumentStore

    def metrics(self, now: datetime | None = None) -> DashboardMetrics:
        """Count users, recent activity and paying subscriptions."""
        current = now or datetime.now(tz=UTC)
        cutoff = current - ACTIVE_WINDOW
        users = [doc.data for doc in self.store.list_collection(USERS_COLLECTION)]
        active = 0
        subscriptions = 0
        free = 0
        premium = 0
        for data in users:
            last_active = parse_timestamp(data.get("lastActive"))
            if last_active is not None and last_active >= cutoff:
                active += 1
            role = data.get("role")
            subscription = data.get("subscription")
            if role == "premium":
                premium += 1
                if isinstance(subscription, dict) and subscription.get("active") is True:
                    subscriptions += 1
            elif role == "free":
                free += 1
        return DashboardMetrics(
            users=len(users),
            active_users=active,
            subscriptions=subscriptions,
            revenue=round(subscriptions * SUBSCRIPTION_PRICE, 2),
            free_users=free,
            premium_users=premium,
        )
