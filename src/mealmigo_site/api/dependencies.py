"""Request-scoped dependencies: container access, session resolution, guards."""

from fastapi import Depends, Header, Request

from mealmigo_site.containers import AppContainer
from mealmigo_site.domain.session import AuthState, AuthUser
from mealmigo_site.services.documents import health_profile_path
from mealmigo_site.services.guards import (
    LOGIN,
    RedirectRequired,
    protected_route_redirect,
    require_auth_redirect,
)


def get_container(request: Request) -> AppContainer:
    return request.app.state.container


def bearer_token(authorization: str | None = Header(default=None)) -> str | None:
    """Extract the access token from an ``Authorization: Bearer`` header."""
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def current_session(
    container: AppContainer = Depends(get_container),
    token: str | None = Depends(bearer_token),
) -> AuthState:
    return container.session_resolver.resolve(token)


def require_signed_in(session: AuthState = Depends(current_session)) -> AuthUser:
    """Send anonymous callers to the login page."""
    target = protected_route_redirect(session, require_auth=True, redirect_to=LOGIN)
    if target is not None or session.user is None:
        raise RedirectRequired(target or LOGIN)
    return session.user


def require_onboarded(
    session: AuthState = Depends(current_session),
    container: AppContainer = Depends(get_container),
) -> AuthUser:
    """Gate member pages on sign-in, verified email and a completed profile."""
    health_profile = (
        container.store.get_document(health_profile_path(session.user.uid))
        if session.user is not None
        else None
    )
    target = require_auth_redirect(session, health_profile)
    if target is not None or session.user is None:
        raise RedirectRequired(target or LOGIN)
    return session.user


def require_admin(session: AuthState = Depends(current_session)) -> AuthUser:
    """Send non-admins back to the landing page."""
    target = protected_route_redirect(
        session, require_auth=True, require_admin=True, redirect_to="/"
    )
    if target is not None or session.user is None:
        raise RedirectRequired(target or "/")
    return session.user
