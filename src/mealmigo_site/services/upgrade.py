"""Premium upgrade flag flip; no payment is captured."""

import logging
from dataclasses import dataclass
from typing import Literal

from mealmigo_site.services.documents import (
    DocumentNotFoundError,
    DocumentStore,
    user_path,
    utc_now_iso,
)

logger = logging.getLogger(__name__)

BillingPlan = Literal["monthly", "yearly"]


@dataclass
class UpgradeService:
    store: DocumentStore

    def upgrade(self, uid: str, billing: BillingPlan) -> dict[str, object]:
        """Mark the user premium, creating the document if it is missing."""
        payload: dict[str, object] = {
            "role": "premium",
            "subscription": {
                "plan": "premium",
                "billing": billing,
                "active": True,
                "startedAt": utc_now_iso(),
            },
        }
        try:
            self.store.update_document(user_path(uid), payload)
        except DocumentNotFoundError:
            self.store.set_document(user_path(uid), payload, merge=True)
        logger.info("Upgraded to premium", extra={"uid": uid, "billing": billing})
        return payload
