from fastapi.testclient import TestClient

from mealmigo_site.api.app import create_app
from mealmigo_site.domain.session import ANONYMOUS, LOADING, AuthState, AuthUser
from mealmigo_site.services.auth import AuthSession, SessionResolver, read_is_admin, role_of
from mealmigo_site.services.guards import (
    LOGIN,
    ONBOARDING,
    VERIFY_EMAIL,
    protected_route_redirect,
    require_auth_redirect,
)
from tests.conftest import FakeAuthProvider, InMemoryDocumentStore

VERIFIED = AuthUser(uid="u1", email="u@example.com", email_verified=True)
UNVERIFIED = AuthUser(uid="u1", email="u@example.com", email_verified=False)


def test_role_of_normalizes_case() -> None:
    assert role_of({"role": "Admin"}) == "admin"
    assert role_of({"role": 3}) == ""
    assert role_of(None) == ""


def test_read_is_admin_fails_closed() -> None:
    store = InMemoryDocumentStore(documents={"users/u1": {"role": "admin"}})
    assert read_is_admin(store, "u1") is True

    store.denied_paths.add("users/u1")
    assert read_is_admin(store, "u1") is False


def test_resolver_handles_missing_and_invalid_tokens() -> None:
    provider = FakeAuthProvider()
    resolver = SessionResolver(provider=provider, store=InMemoryDocumentStore())

    assert resolver.resolve(None) == ANONYMOUS
    assert resolver.resolve("unknown") == ANONYMOUS
    assert resolver.resolve("expired") == ANONYMOUS


def test_resolver_reads_admin_flag() -> None:
    provider = FakeAuthProvider()
    provider.add_user("a1", "admin@example.com")
    store = InMemoryDocumentStore(documents={"users/a1": {"role": "admin"}})

    state = SessionResolver(provider=provider, store=store).resolve("token-a1")

    assert state.user.uid == "a1"
    assert state.is_admin is True
    assert state.loading is False
    assert state.access_token == "token-a1"


def test_auth_session_starts_loading_and_resolves() -> None:
    provider = FakeAuthProvider()
    store = InMemoryDocumentStore(documents={"users/u1": {"role": "admin"}})
    session = AuthSession(provider=provider, store=store)
    seen: list[AuthState] = []
    session.subscribe(seen.append)

    assert session.state == LOADING

    session.start()
    session.start()
    provider.emit(VERIFIED, "token-u1")

    assert len(provider.listeners) == 1
    assert seen[0].user == VERIFIED
    assert seen[0].loading is True
    assert session.state.is_admin is True
    assert session.state.loading is False

    provider.emit(None)
    assert session.state.user is None
    assert session.state.is_admin is False


def test_auth_session_ignores_changes_after_close() -> None:
    provider = FakeAuthProvider()
    session = AuthSession(provider=provider, store=InMemoryDocumentStore())
    session.start()
    listener = provider.listeners[0]

    session.close()
    listener(VERIFIED, "token-u1")

    assert provider.listeners == []
    assert session.state == LOADING


def test_protected_route_waits_while_loading() -> None:
    assert protected_route_redirect(LOADING, require_auth=True, require_admin=True) is None


def test_protected_route_redirects() -> None:
    member = AuthState(user=VERIFIED, loading=False, is_admin=False)
    admin = AuthState(user=VERIFIED, loading=False, is_admin=True)

    assert protected_route_redirect(ANONYMOUS, require_auth=True, redirect_to="/login") == "/login"
    assert protected_route_redirect(member, require_admin=True) == "/"
    assert protected_route_redirect(admin, require_auth=True, require_admin=True) is None
    assert protected_route_redirect(ANONYMOUS) is None


def test_require_auth_redirect_order() -> None:
    unverified = AuthState(user=UNVERIFIED, loading=False, is_admin=False)
    verified = AuthState(user=VERIFIED, loading=False, is_admin=False)

    assert require_auth_redirect(LOADING, None) is None
    assert require_auth_redirect(ANONYMOUS, None) == LOGIN
    assert require_auth_redirect(unverified, {"completed": True}) == VERIFY_EMAIL
    assert require_auth_redirect(verified, {"completed": "yes"}) == ONBOARDING
    assert require_auth_redirect(verified, {"completed": True}) is None


def test_app_lifespan_starts_and_closes_auth_session(container) -> None:
    provider = container.auth_provider
    user = provider.add_user("admin", "admin@example.com")
    container.store.set_document("users/admin", {"role": "admin"})

    with TestClient(create_app(container)):
        assert len(provider.listeners) == 1
        provider.emit(user, "token-admin")
        assert container.auth_session.state.is_admin is True

    assert provider.listeners == []
