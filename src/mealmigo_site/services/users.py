"""Admin user management: row normalization, table state and suspension."""

import logging
import math
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from typing import Literal

from mealmigo_site.domain.admin import AccountStatus, Role, SubscriptionSummary, UserRow
from mealmigo_site.services.documents import (
    USERS_COLLECTION,
    DocumentNotFoundError,
    DocumentStore,
    StoredDocument,
    parse_timestamp,
    user_path,
)

logger = logging.getLogger(__name__)

RoleFilter = Literal["all", "free", "premium", "admin"]


def _joined_iso(data: dict[str, object]) -> str:
    for key in ("createdAt", "joined"):
        parsed = parse_timestamp(data.get(key))
        if parsed is not None:
            return parsed.isoformat()
    return datetime.now(tz=UTC).isoformat()


def normalize_user_row(doc: StoredDocument) -> UserRow:
    """Build a table row from an arbitrarily shaped user document."""
    data = doc.data
    raw_role = data["role"].lower() if isinstance(data.get("role"), str) else "free"
    subscription = data.get("subscription")
    subscription = subscription if isinstance(subscription, dict) else {}
    plan = (
        "premium"
        if subscription.get("plan") == "premium" or raw_role == "premium"
        else "free"
    )
    role: Role = "admin" if raw_role == "admin" else plan
    status: AccountStatus = (
        "Suspended" if data.get("accountStatus") == "Suspended" else "Active"
    )
    active = subscription.get("active")
    billing = subscription.get("billing")
    photo_url = data.get("photoURL")
    return UserRow(
        id=doc.id,
        name=str(data.get("name") or data.get("displayName") or "Member"),
        email=str(data.get("email") or "—"),
        role=role,
        account_status=status,
        joined_iso=_joined_iso(data),
        subscription=SubscriptionSummary(
            plan=plan,
            active=active if isinstance(active, bool) else plan == "premium",
            billing=billing if billing in {"monthly", "yearly"} else None,
        ),
        photo_url=photo_url if isinstance(photo_url, str) else None,
    )


@dataclass
class UsersTable:
    """Search, role filter and pagination over loaded rows."""

    rows: list[UserRow] = field(default_factory=list)
    per_page: int = 10
    query: str = ""
    role_filter: RoleFilter = "all"
    page: int = 1

    def set_filters(self, query: str | None = None, role_filter: RoleFilter | None = None) -> None:
        """Change the filters and return to the first page."""
        if query is not None:
            self.query = query
        if role_filter is not None:
            self.role_filter = role_filter
        self.page = 1

    @property
    def filtered(self) -> list[UserRow]:
        needle = self.query.strip().lower()
        rows = self.rows
        if needle:
            rows = [
                row
                for row in rows
                if needle in row.name.lower() or needle in row.email.lower()
            ]
        if self.role_filter != "all":
            rows = [row for row in rows if row.role == self.role_filter]
        return rows

    @property
    def page_count(self) -> int:
        return max(1, math.ceil(len(self.filtered) / self.per_page))

    def go_to(self, page: int) -> None:
        self.page = max(1, min(page, self.page_count))

    @property
    def visible(self) -> list[UserRow]:
        start = (self.page - 1) * self.per_page
        return self.filtered[start : start + self.per_page]


@dataclass
class UserAdminService:
    """Loads user rows and flips suspension."""

    store: DocumentStore

    def load(self) -> list[UserRow]:
        return [
            normalize_user_row(doc)
            for doc in self.store.list_collection(USERS_COLLECTION)
        ]

    def table(
        self,
        query: str = "",
        role_filter: RoleFilter = "all",
        page: int = 1,
    ) -> UsersTable:
        """Load rows into a table with the given filters and page."""
        table = UsersTable(rows=self.load())
        table.set_filters(query, role_filter)
        table.go_to(page)
        return table

    def toggle_suspend(self, row: UserRow) -> UserRow:
        """Write the opposite status and return the updated row."""
        status: AccountStatus = (
            "Suspended" if row.account_status == "Active" else "Active"
        )
        self.store.update_document(user_path(row.id), {"accountStatus": status})
        logger.info("Changed account status", extra={"uid": row.id, "status": status})
        return replace(row, account_status=status)

    def toggle_suspend_by_id(self, uid: str) -> UserRow:
        data = self.store.get_document(user_path(uid))
        if data is None:
            raise DocumentNotFoundError(user_path(uid))
        return self.toggle_suspend(normalize_user_row(StoredDocument(id=uid, data=data)))
