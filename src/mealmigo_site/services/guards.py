"""Route guard decisions for protected pages."""

from mealmigo_site.domain.session import AuthState

LOGIN = "/login"
VERIFY_EMAIL = "/verify-email"
ONBOARDING = "/onboarding"


class RedirectRequired(Exception):
    """Raised by request dependencies when the caller must go elsewhere."""

    def __init__(self, location: str) -> None:
        super().__init__(location)
        self.location = location


def protected_route_redirect(
    state: AuthState,
    require_auth: bool = False,
    require_admin: bool = False,
    redirect_to: str = "/",
) -> str | None:
    """Return where to send the caller, or None when the route may render.

    Nothing is decided while the session is still loading.
    """
    if state.loading:
        return None
    if require_auth and state.user is None:
        return redirect_to
    if require_admin and not state.is_admin:
        return redirect_to
    return None


def require_auth_redirect(
    state: AuthState, health_profile: dict[str, object] | None
) -> str | None:
    """Gate for signed-in member pages."""
    if state.loading:
        return None
    if state.user is None:
        return LOGIN
    if not state.user.email_verified:
        return VERIFY_EMAIL
    if (health_profile or {}).get("completed") is not True:
        return ONBOARDING
    return None
