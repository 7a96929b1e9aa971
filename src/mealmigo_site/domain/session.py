"""Domain models for authentication state."""

from dataclasses import dataclass


@dataclass(frozen=True)
class AuthUser:
    """Represents a user as reported by the auth provider."""

    uid: str
    email: str | None
    email_verified: bool
    display_name: str | None = None


@dataclass(frozen=True)
class AuthState:
    """Resolved session: the raw user, a loading flag and the admin bit."""

    user: AuthUser | None
    loading: bool
    is_admin: bool
    access_token: str | None = None


@dataclass(frozen=True)
class SignInResult:
    """Outcome of a password sign-in."""

    user: AuthUser
    access_token: str


LOADING = AuthState(user=None, loading=True, is_admin=False)
ANONYMOUS = AuthState(user=None, loading=False, is_admin=False)
