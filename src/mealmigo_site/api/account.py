"""Member endpoints: onboarding quiz, account overview, profile, wizard, upgrade."""

from fastapi import APIRouter, Depends, status

from mealmigo_site.api.dependencies import (
    get_container,
    require_onboarded,
    require_signed_in,
)
from mealmigo_site.api.schemas import (
    HealthUpdate,
    OnboardingFinish,
    OnboardingStart,
    OnboardingUpdate,
    UpgradeRequest,
)
from mealmigo_site.containers import AppContainer
from mealmigo_site.domain.health import (
    ALLERGIES,
    CONDITIONS,
    EQUIPMENT,
    INJURIES,
    HealthProfile,
    QuizDraft,
)
from mealmigo_site.domain.session import AuthUser
from mealmigo_site.services.health import WIZARD_STEPS
from mealmigo_site.services.onboarding import QUIZ_STEPS, OnboardingService
from mealmigo_site.services.profile import AccountOverview, ProfileForm

onboarding_router = APIRouter(prefix="/api/onboarding", tags=["onboarding"])
account_router = APIRouter(prefix="/api/account", tags=["account"])


def _draft_payload(draft_id: str, draft: QuizDraft) -> dict[str, object]:
    return {
        "draft_id": draft_id,
        "step": draft.step,
        "step_name": QUIZ_STEPS[draft.step],
        "steps": list(QUIZ_STEPS),
        "bmi": OnboardingService.bmi_preview(draft.quiz),
        "quiz": draft.quiz.model_dump(),
        "health_profile": draft.health_profile.model_dump(),
    }


@onboarding_router.post("", status_code=status.HTTP_201_CREATED)
async def start_onboarding(
    body: OnboardingStart, container: AppContainer = Depends(get_container)
) -> dict[str, object]:
    draft_id, draft = container.onboarding_service.start(body.sex)
    return _draft_payload(draft_id, draft)


@onboarding_router.get("/{draft_id}")
async def get_onboarding(
    draft_id: str, container: AppContainer = Depends(get_container)
) -> dict[str, object]:
    return _draft_payload(draft_id, container.onboarding_service.get(draft_id))


@onboarding_router.patch("/{draft_id}")
async def update_onboarding(
    draft_id: str,
    body: OnboardingUpdate,
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    draft = container.onboarding_service.update(
        draft_id,
        quiz=body.quiz,
        health_profile=body.health_profile,
        step=body.step,
    )
    return _draft_payload(draft_id, draft)


@onboarding_router.post("/{draft_id}/finish")
async def finish_onboarding(
    draft_id: str,
    body: OnboardingFinish,
    container: AppContainer = Depends(get_container),
) -> dict[str, str]:
    """Create the account and persist the completed profile."""
    redirect = container.onboarding_service.finish(
        draft_id, body.name, body.email, body.password
    )
    return {"redirect": redirect}


@account_router.get("")
async def account_overview(
    user: AuthUser = Depends(require_onboarded),
    container: AppContainer = Depends(get_container),
) -> AccountOverview:
    return container.profile_service.overview(user)


@account_router.get("/profile")
async def get_profile(
    user: AuthUser = Depends(require_onboarded),
    container: AppContainer = Depends(get_container),
) -> ProfileForm:
    return container.profile_service.load(user.uid)


@account_router.put("/profile")
async def save_profile(
    form: ProfileForm,
    user: AuthUser = Depends(require_onboarded),
    container: AppContainer = Depends(get_container),
) -> dict[str, str]:
    container.profile_service.save(user.uid, form)
    return {"message": "Profile saved."}


@account_router.post("/upgrade")
async def upgrade(
    body: UpgradeRequest,
    user: AuthUser = Depends(require_signed_in),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Flip the account to premium without taking payment."""
    return container.upgrade_service.upgrade(user.uid, body.billing)


@account_router.get("/health")
async def get_health_profile(
    user: AuthUser = Depends(require_signed_in),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    return {
        "steps": list(WIZARD_STEPS),
        "options": {
            "conditions": list(CONDITIONS),
            "allergies": list(ALLERGIES),
            "injuries": list(INJURIES),
            "equipment": list(EQUIPMENT),
        },
        "profile": container.health_wizard_service.load(user.uid).model_dump(),
    }


@account_router.put("/health")
async def save_health_profile(
    body: HealthUpdate,
    user: AuthUser = Depends(require_signed_in),
    container: AppContainer = Depends(get_container),
) -> HealthProfile:
    wizard = container.health_wizard_service
    return wizard.save(user.uid, wizard.load(user.uid), body.partial)


@account_router.post("/health/complete")
async def complete_health_profile(
    body: HealthUpdate,
    user: AuthUser = Depends(require_signed_in),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    wizard = container.health_wizard_service
    current = wizard.save(user.uid, wizard.load(user.uid), body.partial)
    profile = wizard.complete(user.uid, current)
    return {"profile": profile.model_dump(), "redirect": "/account"}
