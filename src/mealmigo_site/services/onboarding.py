"""Pre-signup onboarding quiz: draft lifecycle and final profile assembly."""

import logging
import uuid
from dataclasses import dataclass
from datetime import date

from mealmigo_site.domain.health import HealthProfile, Quiz, QuizDraft
from mealmigo_site.services.accounts import AccountService
from mealmigo_site.services.calculators import bmi
from mealmigo_site.services.documents import (
    DocumentStore,
    health_profile_path,
    merge_documents,
    user_path,
    utc_now_iso,
)
from mealmigo_site.services.drafts import DraftStore
from mealmigo_site.services.health import clamp_step, derive_risk, validate_answers

logger = logging.getLogger(__name__)

QUIZ_STEPS: tuple[str, ...] = ("basics", "goals", "preferences", "consent", "summary")
FINISH_REDIRECT = "/verify-email?next=/app"

_INTENSITY_BY_ACTIVITY = {
    "sedentary": "low",
    "light": "low",
    "moderate": "medium",
    "active": "high",
    "very_active": "high",
}


class DraftNotFoundError(LookupError):
    """Raised when a draft id is unknown or expired."""

    def __init__(self, draft_id: str) -> None:
        super().__init__("Onboarding draft not found or expired.")
        self.draft_id = draft_id


def _birth_year(birthday: str | None) -> int | None:
    if not birthday:
        return None
    try:
        return date.fromisoformat(birthday).year
    except ValueError:
        return None


def summarize_preferences(quiz: Quiz) -> str:
    """One-line summary of the food preferences for the constraint notes."""
    parts = []
    if quiz.dietPreference:
        parts.append(f"Diet: {quiz.dietPreference}")
    if quiz.cuisineLikes:
        parts.append(f"Cuisines: {', '.join(quiz.cuisineLikes)}")
    if quiz.foodsToAvoid and quiz.foodsToAvoid.strip():
        parts.append(f"Avoid: {quiz.foodsToAvoid.strip()}")
    if quiz.cookingTime:
        parts.append(f"Cooking time: {quiz.cookingTime} min")
    if quiz.budget:
        parts.append(f"Budget: {quiz.budget}")
    return " | ".join(parts)


def build_final_profile(profile: HealthProfile, quiz: Quiz) -> HealthProfile:
    """Fold quiz answers into the health profile and mark it completed."""
    now = utc_now_iso()
    demographics = profile.demographics.model_copy(
        update={
            "heightCm": quiz.heightCm
            if quiz.heightCm is not None
            else profile.demographics.heightCm,
            "weightKg": quiz.weightKg
            if quiz.weightKg is not None
            else profile.demographics.weightKg,
            "birthYear": _birth_year(quiz.birthday) or profile.demographics.birthYear,
        }
    )
    fitness = profile.fitness.model_copy(
        update={
            "goal": quiz.goal or profile.fitness.goal,
            "preferredIntensity": _INTENSITY_BY_ACTIVITY.get(
                quiz.activityLevel or "", profile.fitness.preferredIntensity
            ),
        }
    )
    notes = " • ".join(
        note
        for note in (profile.constraints.notes.strip(), summarize_preferences(quiz))
        if note
    )
    return profile.model_copy(
        update={
            "completed": True,
            "riskLevel": derive_risk(profile.parqPlus),
            "demographics": demographics,
            "fitness": fitness,
            "constraints": profile.constraints.model_copy(update={"notes": notes}),
            "createdAt": profile.createdAt or now,
            "updatedAt": now,
        }
    )


@dataclass
class OnboardingService:
    """Holds quiz drafts server-side until the account is created."""

    store: DocumentStore
    accounts: AccountService
    drafts: DraftStore
    ttl_seconds: int

    def start(self, sex: str | None = None) -> tuple[str, QuizDraft]:
        """Open a new draft, optionally pre-filling the sex at birth."""
        draft = QuizDraft()
        if sex in {"male", "female"}:
            draft.health_profile.demographics.sexAtBirth = sex
        draft_id = uuid.uuid4().hex
        self.drafts.set(draft_id, draft, self.ttl_seconds)
        return draft_id, draft

    def get(self, draft_id: str) -> QuizDraft:
        draft = self.drafts.get(draft_id)
        if draft is None:
            raise DraftNotFoundError(draft_id)
        return draft

    def update(
        self,
        draft_id: str,
        *,
        quiz: dict[str, object] | None = None,
        health_profile: dict[str, object] | None = None,
        step: int | None = None,
    ) -> QuizDraft:
        """Apply partial answers and move to a clamped step."""
        current = self.get(draft_id)
        draft = QuizDraft(
            quiz=validate_answers(Quiz, {**current.quiz.model_dump(), **(quiz or {})}),
            health_profile=validate_answers(
                HealthProfile,
                merge_documents(current.health_profile.model_dump(), health_profile or {}),
            ),
            step=clamp_step(
                current.step if step is None else step, len(QUIZ_STEPS) - 1
            ),
        )
        self.drafts.set(draft_id, draft, self.ttl_seconds)
        return draft

    @staticmethod
    def bmi_preview(quiz: Quiz) -> float | None:
        return bmi(quiz.heightCm, quiz.weightKg)

    def finish(self, draft_id: str, name: str, email: str, password: str) -> str:
        """Create the account, persist the final profile and clear the draft."""
        draft = self.get(draft_id)
        profile = build_final_profile(draft.health_profile, draft.quiz)
        user = self.accounts.register(name, email, password, with_subscription=False)
        self.store.set_document(
            user_path(user.uid),
            {
                "name": name.strip() or None,
                "email": user.email,
                "role": "free",
                "accountStatus": "Active",
                "updatedAt": profile.updatedAt,
            },
            merge=True,
        )
        self.store.set_document(
            health_profile_path(user.uid),
            profile.model_dump(exclude_none=True),
            merge=True,
        )
        self.drafts.delete(draft_id)
        logger.info("Finished onboarding", extra={"uid": user.uid})
        return FINISH_REDIRECT
