"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import Client, ClientOptions, create_client

from mealmigo_site.adapters.openai_chat_client import OpenAIChatClient
from mealmigo_site.adapters.supabase_auth_provider import SupabaseAuthProvider
from mealmigo_site.adapters.supabase_document_store import SupabaseDocumentStore
from mealmigo_site.adapters.supabase_file_storage import SupabaseFileStorage
from mealmigo_site.config import Settings
from mealmigo_site.services.accounts import AccountService
from mealmigo_site.services.auth import AuthProvider, AuthSession, SessionResolver
from mealmigo_site.services.chat import ChatService
from mealmigo_site.services.cms import CmsEditorService
from mealmigo_site.services.content import ContentFeed
from mealmigo_site.services.dashboard import DashboardService
from mealmigo_site.services.documents import DocumentStore, FileStorage
from mealmigo_site.services.drafts import InMemoryDraftStore
from mealmigo_site.services.dropdowns import DropdownService
from mealmigo_site.services.health import HealthWizardService
from mealmigo_site.services.onboarding import OnboardingService
from mealmigo_site.services.profile import ProfileService
from mealmigo_site.services.recipes import RecipeService
from mealmigo_site.services.site_settings import SiteSettingsService
from mealmigo_site.services.upgrade import UpgradeService
from mealmigo_site.services.users import UserAdminService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    store: DocumentStore
    storage: FileStorage
    auth_provider: AuthProvider
    auth_session: AuthSession
    session_resolver: SessionResolver
    account_service: AccountService
    content_feed: ContentFeed
    cms_service: CmsEditorService
    user_admin_service: UserAdminService
    dropdown_service: DropdownService
    dashboard_service: DashboardService
    site_settings_service: SiteSettingsService
    recipe_service: RecipeService
    profile_service: ProfileService
    upgrade_service: UpgradeService
    health_wizard_service: HealthWizardService
    onboarding_service: OnboardingService
    chat_service: ChatService
    close_resources: Callable[[], Awaitable[None]]


def build_services(
    settings: Settings,
    store: DocumentStore,
    storage: FileStorage,
    auth_provider: AuthProvider,
    chat_service: ChatService,
    close_resources: Callable[[], Awaitable[None]],
) -> AppContainer:
    """Wire services on top of already-built backend adapters."""
    account_service = AccountService(auth_provider, store)
    return AppContainer(
        settings=settings,
        store=store,
        storage=storage,
        auth_provider=auth_provider,
        auth_session=AuthSession(auth_provider, store),
        session_resolver=SessionResolver(auth_provider, store),
        account_service=account_service,
        content_feed=ContentFeed(
            store, refresh_after_seconds=settings.content_refresh_seconds
        ),
        cms_service=CmsEditorService(store, storage),
        user_admin_service=UserAdminService(store),
        dropdown_service=DropdownService(store),
        dashboard_service=DashboardService(store),
        site_settings_service=SiteSettingsService(store),
        recipe_service=RecipeService(store, storage),
        profile_service=ProfileService(store),
        upgrade_service=UpgradeService(store),
        health_wizard_service=HealthWizardService(store),
        onboarding_service=OnboardingService(
            store=store,
            accounts=account_service,
            drafts=InMemoryDraftStore(),
            ttl_seconds=settings.quiz_draft_ttl_seconds,
        ),
        chat_service=chat_service,
        close_resources=close_resources,
    )


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    service_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    anon_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_anon_key
    )

    def session_client() -> Client:
        return create_client(
            resolved_settings.supabase_url,
            resolved_settings.supabase_anon_key,
            options=ClientOptions(auto_refresh_token=False, persist_session=False),
        )

    chat_client = (
        OpenAIChatClient.create(resolved_settings.openai_api_key)
        if resolved_settings.openai_api_key
        else None
    )
    chat_service = ChatService(
        client=chat_client,
        model=resolved_settings.openai_model,
        max_tokens=resolved_settings.chat_max_tokens,
    )

    async def close_resources() -> None:
        if chat_client is not None:
            await chat_client.close()

    return build_services(
        settings=resolved_settings,
        store=SupabaseDocumentStore(service_client),
        storage=SupabaseFileStorage(service_client, resolved_settings.storage_bucket),
        auth_provider=SupabaseAuthProvider(
            client=anon_client,
            admin_client=service_client,
            session_client=session_client,
        ),
        chat_service=chat_service,
        close_resources=close_resources,
    )
