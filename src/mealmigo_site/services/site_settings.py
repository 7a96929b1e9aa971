"""Site settings editor and the public app store links lookup."""

import logging
from dataclasses import dataclass

from mealmigo_site.domain.site_settings import AppStoreLinks, SiteSettings
from mealmigo_site.services.documents import SETTINGS_PATH, DocumentStore

logger = logging.getLogger(__name__)


class AppLinksUnavailableError(LookupError):
    """Raised when the download page cannot show store links."""


@dataclass
class SiteSettingsService:
    store: DocumentStore

    def load(self) -> SiteSettings:
        """Return stored settings, writing the defaults when none exist."""
        data = self.store.get_document(SETTINGS_PATH)
        if data is None:
            defaults = SiteSettings()
            self.store.set_document(SETTINGS_PATH, defaults.model_dump())
            logger.info("Created default site settings")
            return defaults
        return SiteSettings.model_validate(data)

    def save(self, settings: SiteSettings) -> SiteSettings:
        self.store.set_document(SETTINGS_PATH, settings.model_dump(), merge=True)
        return settings

    def app_store_links(self) -> AppStoreLinks:
        """Return the configured store links for the download page."""
        data = self.store.get_document(SETTINGS_PATH)
        if data is None:
            logger.error("Settings document not found")
            raise AppLinksUnavailableError("Failed to load app store links.")
        links = data.get("appStoreLinks")
        if (
            not isinstance(links, dict)
            or not links.get("googlePlay")
            or not links.get("appStore")
        ):
            logger.warning("App store links missing or incomplete")
            raise AppLinksUnavailableError(
                "App store links are not configured correctly."
            )
        return AppStoreLinks(
            googlePlay=str(links["googlePlay"]),
            appStore=str(links["appStore"]),
            apk=str(links.get("apk") or ""),
        )
