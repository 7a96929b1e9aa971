"""Public site endpoints: landing page, calculators, auth flows, download, chat."""

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import HTMLResponse, JSONResponse

from mealmigo_site.api.dependencies import (
    current_session,
    get_container,
    require_signed_in,
)
from mealmigo_site.api.schemas import ChatRequest, Credentials, EmailRequest, SignUpRequest
from mealmigo_site.api.views import render_landing
from mealmigo_site.containers import AppContainer
from mealmigo_site.domain.content import ContentView
from mealmigo_site.domain.session import AuthState, AuthUser
from mealmigo_site.services.accounts import ADMIN_HOME
from mealmigo_site.services.calculators import Activity, Sex, bmi, bmi_category, bmr, tdee
from mealmigo_site.services.guards import VERIFY_EMAIL, RedirectRequired

router = APIRouter(tags=["public"])


@router.get("/", response_class=HTMLResponse)
async def landing_page(container: AppContainer = Depends(get_container)) -> HTMLResponse:
    """Render the marketing landing page."""
    return HTMLResponse(render_landing(container.content_feed.view()))


@router.get("/api/content")
async def content(container: AppContainer = Depends(get_container)) -> ContentView:
    return container.content_feed.view()


@router.get("/api/calculators/bmi", response_model=None)
async def bmi_calculator(
    height_cm: float, weight_kg: float
) -> dict[str, object] | JSONResponse:
    value = bmi(height_cm, weight_kg)
    if value is None or weight_kg <= 0:
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"error": "Enter a valid height and weight."},
        )
    return {"bmi": value, "category": bmi_category(value)}


@router.get("/api/calculators/bmr")
async def bmr_calculator(
    age: float = Query(gt=0),
    height_cm: float = Query(gt=0),
    weight_kg: float = Query(gt=0),
    sex: Sex = "male",
    activity: Activity | None = None,
) -> dict[str, object]:
    value = bmr(age, height_cm, weight_kg, sex)
    return {"bmr": value, "tdee": tdee(value, activity) if activity else None}


@router.post("/api/login")
async def login(
    body: Credentials, container: AppContainer = Depends(get_container)
) -> dict[str, str]:
    """Admin-only sign in."""
    result = container.account_service.admin_sign_in(body.email, body.password)
    return {"access_token": result.access_token, "redirect": ADMIN_HOME}


@router.post("/api/password-reset")
async def password_reset(
    body: EmailRequest, container: AppContainer = Depends(get_container)
) -> dict[str, str]:
    return {"message": container.account_service.send_password_reset(body.email)}


@router.post("/api/signup", status_code=status.HTTP_201_CREATED)
async def sign_up(
    body: SignUpRequest,
    session: AuthState = Depends(current_session),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Create a free account from the sign-up modal."""
    if session.user is not None:
        raise RedirectRequired("/account")
    user = container.account_service.register(body.name, body.email, body.password)
    return {"uid": user.uid, "email": user.email, "next": VERIFY_EMAIL}


@router.get("/api/verify-email")
async def verify_email_status(
    user: AuthUser = Depends(require_signed_in),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    return {
        "email": user.email,
        "verified": user.email_verified,
        "next": container.account_service.verification_next(user),
    }


@router.post("/api/verify-email/resend")
async def resend_verification(
    user: AuthUser = Depends(require_signed_in),
    container: AppContainer = Depends(get_container),
) -> dict[str, str]:
    container.account_service.resend_verification(user)
    return {"message": "Verification email sent. Check your inbox."}


@router.get("/api/download", dependencies=[Depends(require_signed_in)])
async def download_links(
    container: AppContainer = Depends(get_container),
) -> dict[str, str]:
    links = container.site_settings_service.app_store_links()
    return links.model_dump()


@router.post("/api/chat")
async def chat(
    body: ChatRequest, container: AppContainer = Depends(get_container)
) -> dict[str, str]:
    return {"reply": await container.chat_service.reply(body.message)}
