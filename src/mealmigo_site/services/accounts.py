"""Sign-in, sign-up and email verification flows."""

import logging
from dataclasses import dataclass

from mealmigo_site.domain.session import AuthUser, SignInResult
from mealmigo_site.services.auth import AuthError, AuthProvider, role_of
from mealmigo_site.services.documents import DocumentStore, user_path, utc_now_iso

logger = logging.getLogger(__name__)

ADMIN_HOME = "/admin/dashboard"
HEALTH_WIZARD = "/account/health"

_RESET_ERRORS = {
    "user_not_found": "No account found with this email.",
    "email_address_invalid": "Invalid email address.",
    "validation_failed": "Invalid email address.",
}


@dataclass
class AccountService:
    """Application service for account lifecycle actions."""

    provider: AuthProvider
    store: DocumentStore

    def admin_sign_in(self, email: str, password: str) -> SignInResult:
        """Sign in an admin; everyone else is signed out again with a reason."""
        result = self.provider.sign_in(email.strip(), password)
        try:
            data = self.store.get_document(user_path(result.user.uid))
        except Exception as exc:
            logger.exception("Failed to check user role")
            raise AuthError("Failed to verify user role. Please try again.") from exc
        if role_of(data) == "admin":
            return result
        self.provider.sign_out(result.access_token)
        if not result.user.email_verified:
            raise AuthError("Please verify your email before logging in.")
        raise AuthError("Only admin accounts can sign in.")

    def send_password_reset(self, email: str) -> str:
        """Send a reset email and return the confirmation message."""
        try:
            self.provider.send_password_reset(email.strip())
        except AuthError as exc:
            raise AuthError(
                _RESET_ERRORS.get(exc.code or "", str(exc)), code=exc.code
            ) from exc
        return (
            "Password reset email sent! "
            "Please check your inbox (and spam/junk folder)."
        )

    def register(
        self,
        name: str,
        email: str,
        password: str,
        *,
        with_subscription: bool = True,
    ) -> AuthUser:
        """Create a free account and its user document."""
        display_name = name.strip() or None
        user = self.provider.sign_up(email.strip(), password, display_name)
        payload: dict[str, object] = {
            "name": display_name,
            "email": user.email,
            "role": "free",
            "accountStatus": "Active",
            "createdAt": utc_now_iso(),
        }
        if with_subscription:
            payload["subscription"] = {"plan": "free", "active": False, "billing": None}
        self.store.set_document(user_path(user.uid), payload, merge=True)
        logger.info("Registered account", extra={"uid": user.uid})
        return user

    def resend_verification(self, user: AuthUser) -> None:
        """Send the verification email again for an unverified user."""
        if not user.email:
            raise AuthError("Not signed in")
        self.provider.resend_verification(user.email)

    @staticmethod
    def verification_next(user: AuthUser) -> str | None:
        """Return where a verified user continues to, or None while unverified."""
        return HEALTH_WIZARD if user.email_verified else None
