"""Member account page: overview and the profile form."""

# ruff: noqa: N815

import logging
import re
from dataclasses import dataclass
from typing import Literal

from pydantic import BaseModel, Field

from mealmigo_site.domain.session import AuthUser
from mealmigo_site.services.documents import (
    DocumentStore,
    health_profile_path,
    user_path,
    utc_now_iso,
)

logger = logging.getLogger(__name__)

Sex = Literal["male", "female", "other"]

_BIRTHDAY = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class ProfileForm(BaseModel):
    """Fields edited on the member profile form."""

    displayName: str | None = None
    birthday: str | None = None
    heightCm: float | None = None
    weightKg: float | None = None
    sex: Sex = "other"
    goal: str | None = None
    preferredIntensity: str | None = None
    equipment: list[str] = Field(default_factory=list)
    notes: str | None = None
    shareWithCoach: bool | None = None

    @property
    def birth_year(self) -> int | None:
        if self.birthday and _BIRTHDAY.match(self.birthday):
            return int(self.birthday[:4])
        return None


class AccountOverview(BaseModel):
    name: str
    email: str | None
    subscription: str
    is_premium: bool


def subscription_label(data: dict[str, object] | None) -> str:
    """Return "Premium (<billing>)" for an active premium plan, else "Free"."""
    subscription = (data or {}).get("subscription")
    if (
        isinstance(subscription, dict)
        and subscription.get("plan") == "premium"
        and subscription.get("active")
    ):
        return f"Premium ({subscription.get('billing') or 'monthly'})"
    return "Free"


def _sex_from_profile(demographics: dict[str, object], stored: object) -> Sex:
    sex_at_birth = demographics.get("sexAtBirth")
    if sex_at_birth in {"male", "female"}:
        return sex_at_birth
    if sex_at_birth:
        return "other"
    return stored if stored in {"male", "female", "other"} else "other"


@dataclass
class ProfileService:
    store: DocumentStore

    def overview(self, user: AuthUser) -> AccountOverview:
        data = self.store.get_document(user_path(user.uid)) or {}
        label = subscription_label(data)
        return AccountOverview(
            name=str(data.get("name") or user.display_name or "Member"),
            email=user.email,
            subscription=label,
            is_premium=label != "Free",
        )

    def load(self, uid: str) -> ProfileForm:
        """Read the form, preferring health-profile demographics."""
        user = self.store.get_document(user_path(uid)) or {}
        health = self.store.get_document(health_profile_path(uid)) or {}
        stored = user.get("profile") if isinstance(user.get("profile"), dict) else {}
        demographics = health.get("demographics")
        demographics = demographics if isinstance(demographics, dict) else {}
        fitness = health.get("fitness") if isinstance(health.get("fitness"), dict) else {}
        constraints = health.get("constraints")
        consent = health.get("consent") if isinstance(health.get("consent"), dict) else {}
        return ProfileForm(
            displayName=user.get("name") or None,
            birthday=stored.get("birthday") or None,
            heightCm=demographics.get("heightCm") or stored.get("heightCm"),
            weightKg=demographics.get("weightKg") or stored.get("weightKg"),
            sex=_sex_from_profile(demographics, stored.get("sex")),
            goal=fitness.get("goal"),
            preferredIntensity=fitness.get("preferredIntensity"),
            equipment=list(fitness.get("equipment") or []),
            notes=constraints.get("notes") if isinstance(constraints, dict) else None,
            shareWithCoach=consent.get("shareWithCoach"),
        )

    def save(self, uid: str, form: ProfileForm) -> None:
        """Update the user document, then merge present fields into the health profile."""
        now = utc_now_iso()
        self.store.update_document(
            user_path(uid),
            {
                "name": form.displayName,
                "profile": {
                    "birthday": form.birthday or None,
                    "heightCm": form.heightCm,
                    "weightKg": form.weightKg,
                    "sex": form.sex,
                    "updatedAt": now,
                },
                "updatedAt": now,
            },
        )
        demographics: dict[str, object] = {
            "sexAtBirth": form.sex if form.sex in {"male", "female"} else "prefer_not_to_say"
        }
        if form.heightCm is not None:
            demographics["heightCm"] = form.heightCm
        if form.weightKg is not None:
            demographics["weightKg"] = form.weightKg
        if form.birth_year is not None:
            demographics["birthYear"] = form.birth_year
        fitness: dict[str, object] = {}
        if form.goal:
            fitness["goal"] = form.goal
        if form.preferredIntensity:
            fitness["preferredIntensity"] = form.preferredIntensity
        if form.equipment:
            fitness["equipment"] = form.equipment
        patch: dict[str, object] = {
            "demographics": demographics,
            "fitness": fitness,
            "updatedAt": now,
        }
        if form.notes:
            patch["constraints"] = {"notes": form.notes}
        if form.shareWithCoach is not None:
            patch["consent"] = {"shareWithCoach": form.shareWithCoach}
        self.store.set_document(health_profile_path(uid), patch, merge=True)
        logger.info("Saved profile", extra={"uid": uid})
