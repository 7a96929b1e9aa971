"""Supabase Auth implementation of the auth provider."""

import logging
from collections.abc import Callable
from dataclasses import dataclass

from supabase import AuthError as SupabaseAuthError
from supabase import Client

from mealmigo_site.domain.session import AuthUser, SignInResult
from mealmigo_site.services.auth import AuthChangeListener, AuthError, AuthProvider
from mealmigo_site.services.documents import Unsubscribe

logger = logging.getLogger(__name__)


def _to_auth_user(user: object) -> AuthUser:
    metadata = getattr(user, "user_metadata", None) or {}
    return AuthUser(
        uid=str(user.id),
        email=user.email,
        email_verified=bool(getattr(user, "email_confirmed_at", None)),
        display_name=metadata.get("display_name") or metadata.get("name"),
    )


def _auth_error(exc: SupabaseAuthError) -> AuthError:
    return AuthError(exc.message, code=getattr(exc, "code", None))


@dataclass
class SupabaseAuthProvider(AuthProvider):
    """Password auth over Supabase.

    ``client`` is built with the anon key and performs user-facing calls;
    ``admin_client`` holds the service key and revokes sessions.
    Sign-in and sign-up run on a fresh client from ``session_client`` so the
    resulting session never lands on the shared client.
    """

    client: Client
    admin_client: Client
    session_client: Callable[[], Client]

    def get_user(self, access_token: str) -> AuthUser | None:
        try:
            response = self.client.auth.get_user(access_token)
        except SupabaseAuthError as exc:
            raise _auth_error(exc) from exc
        if response is None or response.user is None:
            return None
        return _to_auth_user(response.user)

    def sign_in(self, email: str, password: str) -> SignInResult:
        try:
            response = self.session_client().auth.sign_in_with_password(
                {"email": email, "password": password}
            )
        except SupabaseAuthError as exc:
            raise _auth_error(exc) from exc
        if response.user is None or response.session is None:
            raise AuthError("Sign in failed. Please try again.")
        return SignInResult(
            user=_to_auth_user(response.user),
            access_token=response.session.access_token,
        )

    def sign_up(
        self, email: str, password: str, display_name: str | None = None
    ) -> AuthUser:
        credentials: dict[str, object] = {"email": email, "password": password}
        if display_name:
            credentials["options"] = {"data": {"display_name": display_name}}
        try:
            response = self.session_client().auth.sign_up(credentials)
        except SupabaseAuthError as exc:
            raise _auth_error(exc) from exc
        if response.user is None:
            raise AuthError("Sign up failed. Please try again.")
        return _to_auth_user(response.user)

    def sign_out(self, access_token: str) -> None:
        try:
            self.admin_client.auth.admin.sign_out(access_token)
        except SupabaseAuthError:
            logger.warning("Failed to revoke session", exc_info=True)

    def send_password_reset(self, email: str) -> None:
        try:
            self.client.auth.reset_password_for_email(email)
        except SupabaseAuthError as exc:
            raise _auth_error(exc) from exc

    def resend_verification(self, email: str) -> None:
        try:
            self.client.auth.resend({"type": "signup", "email": email})
        except SupabaseAuthError as exc:
            raise _auth_error(exc) from exc

    def on_auth_state_change(self, listener: AuthChangeListener) -> Unsubscribe:
        def handle(_event: object, session: object) -> None:
            if session is None or getattr(session, "user", None) is None:
                listener(None, None)
                return
            listener(_to_auth_user(session.user), session.access_token)

        subscription = self.client.auth.on_auth_state_change(handle)
        return subscription.unsubscribe
