"""Landing page content models.

Field names mirror the stored document keys.
"""

# ruff: noqa: N815

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

CONTENT_SCHEMA_VERSION = 1

SectionKey = Literal["hero", "features", "howItWorks", "pricing", "appRating"]
SECTIONS: tuple[SectionKey, ...] = (
    "hero",
    "features",
    "howItWorks",
    "pricing",
    "appRating",
)

ICON_NAMES: tuple[str, ...] = (
    "Utensils",
    "LineChart",
    "BookOpen",
    "Lightbulb",
    "MessageSquare",
    "BarChart2",
    "ScanLine",
)


class _Document(BaseModel):
    model_config = ConfigDict(extra="allow")


class HeroContent(_Document):
    """Hero banner copy and media."""

    title1: str = ""
    title2: str = ""
    description: str = ""
    imageURL: str = ""
    videoURL: str = ""
    mediaType: Literal["image", "video"] = "image"
    imageStoragePath: str = ""
    videoStoragePath: str = ""


class Feature(_Document):
    """Feature card."""

    title: str = ""
    description: str = ""
    icon: str = ""


class Step(_Document):
    """How-it-works step."""

    title: str = ""
    description: str = ""
    image: str = ""
    storagePath: str = ""


class Plan(_Document):
    """Pricing plan card."""

    name: str = ""
    description: str = ""
    price: float = 0
    features: list[str] = Field(default_factory=list)
    buttonText: str = ""
    featured: bool = False


class TestimonialSettings(_Document):
    """Admin-configured filter and sort applied to ratings before display."""

    sortField: Literal["rating", "submittedTime"] = "rating"
    sortDirection: Literal["asc", "desc"] = "desc"
    minRating: float = Field(default=0, ge=0, le=5)
    showOnlyWithText: bool = False
    maxTestimonials: int = Field(default=0, ge=0)


class AppRating(BaseModel):
    """User-submitted review shown as a testimonial."""

    id: str
    name: str = ""
    text: str = ""
    rating: float = 0
    submittedTime: str = ""
    photoURL: str = ""
    isVisible: bool = True


class LandingPageContent(_Document):
    """Singleton CMS document."""

    schemaVersion: int = CONTENT_SCHEMA_VERSION
    hero: HeroContent = Field(default_factory=HeroContent)
    features: list[Feature] = Field(default_factory=list)
    howItWorks: list[Step] = Field(default_factory=list)
    pricing: list[Plan] = Field(default_factory=list)
    testimonialSettings: TestimonialSettings = Field(
        default_factory=TestimonialSettings
    )


class ContentView(BaseModel):
    """View model consumed by the landing page."""

    hero: HeroContent
    features: list[Feature]
    howItWorks: list[Step]
    pricing: list[Plan]
    testimonials: list[AppRating]
    isLoading: bool
