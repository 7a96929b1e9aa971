"""Signed-in health wizard: risk derivation and step-by-step persistence."""

import logging
from dataclasses import dataclass
from typing import TypeVar

from pydantic import BaseModel, ValidationError

from mealmigo_site.domain.health import HealthProfile, ParqPlus, RiskLevel
from mealmigo_site.services.documents import (
    DocumentStore,
    health_profile_path,
    merge_documents,
    utc_now_iso,
)

logger = logging.getLogger(__name__)

WIZARD_STEPS: tuple[str, ...] = (
    "consent",
    "parq",
    "conditions",
    "medications",
    "injuries",
    "emergency",
    "fitness",
)


class ConsentRequiredError(ValueError):
    """Raised when the wizard is completed without both consents."""

    def __init__(self) -> None:
        super().__init__("Please accept the terms and the health data consent.")


class InvalidAnswersError(ValueError):
    """Raised when submitted answers do not fit the profile shape."""


ModelT = TypeVar("ModelT", bound=BaseModel)


def validate_answers(model: type[ModelT], data: dict[str, object]) -> ModelT:
    """Validate client answers, naming the offending fields on failure."""
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        fields = sorted(
            {".".join(str(part) for part in error["loc"]) for error in exc.errors()}
        )
        raise InvalidAnswersError(
            f"Please check these answers: {', '.join(fields)}."
        ) from exc


def derive_risk(parq: ParqPlus) -> RiskLevel:
    """Map PAR-Q+ answers to a coarse risk level."""
    if parq.q1_chestPain or parq.q5_heartCondition:
        return "high"
    if parq.q2_dizziness or parq.q6_bloodPressureIssue or parq.q4_prescriptionMeds:
        return "moderate"
    return "low"


def toggle_tag(items: list[str], value: str) -> list[str]:
    """Return a copy of items with value added or removed."""
    if value in items:
        return [item for item in items if item != value]
    return [*items, value]


def clamp_step(step: int, last: int) -> int:
    return max(0, min(step, last))


def profile_from_document(data: dict[str, object] | None) -> HealthProfile:
    """Overlay stored fields on the default profile."""
    return HealthProfile.model_validate(
        {**HealthProfile().model_dump(), **(data or {})}
    )


@dataclass
class HealthWizardService:
    """Loads and saves the signed-in user's health profile."""

    store: DocumentStore

    def load(self, uid: str) -> HealthProfile:
        return profile_from_document(self.store.get_document(health_profile_path(uid)))

    def save(
        self,
        uid: str,
        profile: HealthProfile,
        partial: dict[str, object] | None = None,
    ) -> HealthProfile:
        """Apply a partial update, derive risk and merge-write the profile."""
        merged = validate_answers(
            HealthProfile, merge_documents(profile.model_dump(), partial or {})
        )
        now = utc_now_iso()
        merged = merged.model_copy(
            update={
                "riskLevel": derive_risk(merged.parqPlus),
                "createdAt": merged.createdAt or now,
                "updatedAt": now,
            }
        )
        self.store.set_document(
            health_profile_path(uid),
            merged.model_dump(exclude_none=True),
            merge=True,
        )
        logger.info("Saved health profile", extra={"uid": uid})
        return merged

    def complete(self, uid: str, profile: HealthProfile) -> HealthProfile:
        """Mark the profile completed once both consents are present."""
        if not profile.consent.tosAcceptedAt or not profile.consent.healthConsentAt:
            raise ConsentRequiredError()
        return self.save(uid, profile, {"completed": True})
