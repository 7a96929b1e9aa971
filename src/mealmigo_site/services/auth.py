"""Auth provider interface and session resolution."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from typing import Protocol

from mealmigo_site.domain.session import (
    ANONYMOUS,
    LOADING,
    AuthState,
    AuthUser,
    SignInResult,
)
from mealmigo_site.services.documents import DocumentStore, Unsubscribe, user_path

logger = logging.getLogger(__name__)

AuthChangeListener = Callable[[AuthUser | None, str | None], None]
StateListener = Callable[[AuthState], None]


class AuthError(Exception):
    """Raised when the auth provider rejects an operation."""

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.code = code


class AuthProvider(Protocol):
    """Hosted authentication provider."""

    def get_user(self, access_token: str) -> AuthUser | None:
        """Return the user owning the token, or None if it is invalid."""

    def sign_in(self, email: str, password: str) -> SignInResult:
        """Sign in with email and password."""

    def sign_up(
        self, email: str, password: str, display_name: str | None = None
    ) -> AuthUser:
        """Create an account; the provider sends the verification email."""

    def sign_out(self, access_token: str) -> None:
        """Revoke the session behind the token."""

    def send_password_reset(self, email: str) -> None:
        """Send a password reset email."""

    def resend_verification(self, email: str) -> None:
        """Send the sign-up verification email again."""

    def on_auth_state_change(self, listener: AuthChangeListener) -> Unsubscribe:
        """Subscribe to session changes."""


def role_of(data: dict[str, object] | None) -> str:
    """Return the lower-cased role stored on a user document."""
    role = (data or {}).get("role")
    return role.lower() if isinstance(role, str) else ""


def read_is_admin(store: DocumentStore, uid: str) -> bool:
    """Return True when the user document carries the admin role.

    A failed read resolves to False: privilege fails closed but the user
    stays signed in.
    """
    try:
        data = store.get_document(user_path(uid))
    except Exception:
        logger.exception("Failed to read user role", extra={"uid": uid})
        return False
    return role_of(data) == "admin"


@dataclass
class AuthSession:
    """Process-wide session context fed by the provider's session stream."""

    provider: AuthProvider
    store: DocumentStore
    _state: AuthState = field(default=LOADING, init=False)
    _listeners: list[StateListener] = field(default_factory=list, init=False)
    _unsubscribe: Unsubscribe | None = field(default=None, init=False)
    _cancelled: bool = field(default=False, init=False)

    @property
    def state(self) -> AuthState:
        """Return the current session state."""
        return self._state

    def start(self) -> None:
        """Subscribe to the provider; calling twice is a no-op."""
        if self._unsubscribe is not None:
            return
        self._cancelled = False
        self._unsubscribe = self.provider.on_auth_state_change(self._handle_change)

    def close(self) -> None:
        """Detach from the provider and drop late resolutions."""
        self._cancelled = True
        unsubscribe, self._unsubscribe = self._unsubscribe, None
        if unsubscribe is not None:
            unsubscribe()
        self._listeners.clear()

    def subscribe(self, listener: StateListener) -> Unsubscribe:
        """Register a state listener and return its teardown handle."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _handle_change(self, user: AuthUser | None, access_token: str | None) -> None:
        if self._cancelled:
            return
        self._set_state(replace(self._state, user=user, access_token=access_token))
        is_admin = read_is_admin(self.store, user.uid) if user else False
        if self._cancelled:
            return
        self._set_state(
            AuthState(
                user=user,
                loading=False,
                is_admin=is_admin,
                access_token=access_token,
            )
        )

    def _set_state(self, state: AuthState) -> None:
        self._state = state
        for listener in list(self._listeners):
            listener(state)


@dataclass
class SessionResolver:
    """Resolves the session for a single request's bearer token."""

    provider: AuthProvider
    store: DocumentStore

    def resolve(self, access_token: str | None) -> AuthState:
        """Return the session for the token; anonymous when absent or invalid."""
        if not access_token:
            return ANONYMOUS
        try:
            user = self.provider.get_user(access_token)
        except AuthError:
            logger.info("Rejected access token")
            return ANONYMOUS
        if user is None:
            return ANONYMOUS
        return AuthState(
            user=user,
            loading=False,
            is_admin=read_is_admin(self.store, user.uid),
            access_token=access_token,
        )
