"""Site-wide settings document models."""

# ruff: noqa: N815

from pydantic import BaseModel, ConfigDict, Field


class _Section(BaseModel):
    model_config = ConfigDict(extra="allow")


class GeneralSettings(_Section):
    siteName: str = "MyMealMigo"
    siteDescription: str = "A smart companion to guide you toward a healthier lifestyle"
    contactEmail: str = "support@mymealmigo.com"
    phoneNumber: str = "+1 (888) 123-4567"


class SocialLinks(_Section):
    facebook: str = ""
    twitter: str = ""
    instagram: str = ""
    youtube: str = ""


class ApiKeys(_Section):
    geminiApiKey: str = ""
    stripePublishableKey: str = ""
    stripeSecretKey: str = ""


class AppStoreLinks(_Section):
    googlePlay: str = ""
    appStore: str = ""
    apk: str = ""


class SiteSettings(_Section):
    """Singleton document at settings/main."""

    general: GeneralSettings = Field(default_factory=GeneralSettings)
    socialLinks: SocialLinks = Field(default_factory=SocialLinks)
    apiKeys: ApiKeys = Field(default_factory=ApiKeys)
    appStoreLinks: AppStoreLinks = Field(default_factory=AppStoreLinks)
