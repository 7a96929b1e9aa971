"""Landing page content: normalization, testimonial pipeline and live feed."""

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta

from pydantic import BaseModel, ValidationError

from mealmigo_site.domain.content import (
    AppRating,
    ContentView,
    Feature,
    HeroContent,
    LandingPageContent,
    Plan,
    Step,
    TestimonialSettings,
)
from mealmigo_site.services.documents import (
    CONTENT_PATH,
    RATINGS_COLLECTION,
    DocumentStore,
    StoredDocument,
    Unsubscribe,
    parse_timestamp,
    utc_now_iso,
)

logger = logging.getLogger(__name__)


def normalize_array(value: object) -> list[object]:
    """Coerce a stored value into a list.

    Lists pass through, legacy map-shaped data yields its values in insertion
    order, anything else yields an empty list.
    """
    if isinstance(value, list):
        return list(value)
    if isinstance(value, dict):
        return list(value.values())
    return []


def _items(value: object) -> list[dict[str, object]]:
    return [item for item in normalize_array(value) if isinstance(item, dict)]


def _validate_items(
    model: type[BaseModel], items: list[dict[str, object]]
) -> list[BaseModel]:
    valid = []
    for item in items:
        try:
            valid.append(model.model_validate(item))
        except ValidationError:
            logger.warning("Skipping malformed %s entry", model.__name__)
    return valid


def normalize_content(raw: dict[str, object] | None) -> LandingPageContent:
    """Build the content model from an arbitrarily shaped stored document."""
    if not raw:
        return LandingPageContent()
    hero_raw = raw.get("hero") if isinstance(raw.get("hero"), dict) else {}
    media_type = hero_raw.get("mediaType")
    hero = {
        **HeroContent().model_dump(),
        **hero_raw,
        "mediaType": media_type if media_type in {"image", "video"} else "image",
    }
    pricing = [
        {**plan, "features": [str(f) for f in normalize_array(plan.get("features"))]}
        for plan in _items(raw.get("pricing"))
    ]
    try:
        settings = TestimonialSettings.model_validate(
            raw.get("testimonialSettings") or {}
        )
    except ValidationError:
        logger.warning("Ignoring malformed testimonial settings")
        settings = TestimonialSettings()
    try:
        hero_model = HeroContent.model_validate(hero)
    except ValidationError:
        logger.warning("Ignoring malformed hero content")
        hero_model = HeroContent()
    return LandingPageContent(
        hero=hero_model,
        features=_validate_items(Feature, _items(raw.get("features"))),
        howItWorks=_validate_items(Step, _items(raw.get("howItWorks"))),
        pricing=_validate_items(Plan, pricing),
        testimonialSettings=settings,
    )


def normalize_rating(doc_id: str, raw: dict[str, object]) -> AppRating:
    """Build a rating from a stored document, tolerating missing fields."""
    submitted = raw.get("submittedTime")
    if isinstance(submitted, datetime):
        submitted_iso = parse_timestamp(submitted).isoformat()
    elif isinstance(submitted, str):
        submitted_iso = submitted
    else:
        submitted_iso = utc_now_iso()
    rating = raw.get("rating")
    return AppRating(
        id=doc_id,
        name=raw["name"] if isinstance(raw.get("name"), str) else "",
        text=raw["text"] if isinstance(raw.get("text"), str) else "",
        rating=float(rating)
        if isinstance(rating, int | float) and not isinstance(rating, bool)
        else 0.0,
        submittedTime=submitted_iso,
        photoURL=raw["photoURL"] if isinstance(raw.get("photoURL"), str) else "",
        isVisible=raw.get("isVisible") is not False,
    )


def _submitted_key(rating: AppRating) -> float:
    parsed = parse_timestamp(rating.submittedTime)
    return parsed.timestamp() if parsed else 0.0


def filter_testimonials(
    ratings: list[AppRating], settings: TestimonialSettings
) -> list[AppRating]:
    """Apply visibility, minimum rating, text filter, sort and truncation."""
    shown = [
        rating
        for rating in ratings
        if rating.isVisible is not False
        and rating.rating >= settings.minRating
        and (not settings.showOnlyWithText or rating.text.strip() != "")
    ]
    if settings.sortField == "rating":
        shown.sort(key=lambda rating: rating.rating, reverse=settings.sortDirection == "desc")
    else:
        shown.sort(key=_submitted_key, reverse=settings.sortDirection == "desc")
    if settings.maxTestimonials > 0:
        shown = shown[: settings.maxTestimonials]
    return shown


@dataclass
class ContentFeed:
    """Live view of the CMS document and ratings collection."""

    store: DocumentStore
    refresh_after_seconds: int = 30
    _content: LandingPageContent = field(default_factory=LandingPageContent, init=False)
    _ratings: list[AppRating] = field(default_factory=list, init=False)
    _loaded_doc: bool = field(default=False, init=False)
    _loaded_ratings: bool = field(default=False, init=False)
    _synced_at: datetime | None = field(default=None, init=False)
    _unsubscribers: list[Unsubscribe] = field(default_factory=list, init=False)

    @property
    def is_loading(self) -> bool:
        """Return True until both sources delivered a snapshot."""
        return not self._loaded_doc or not self._loaded_ratings

    def start(self) -> None:
        """Subscribe to both sources; calling twice is a no-op."""
        if self._unsubscribers:
            return
        self._unsubscribers = [
            self.store.watch_document(
                CONTENT_PATH, self._on_content, self._on_content_error
            ),
            self.store.watch_collection(
                RATINGS_COLLECTION, self._on_ratings, self._on_ratings_error
            ),
        ]

    def close(self) -> None:
        """Tear down both subscriptions."""
        unsubscribers, self._unsubscribers = self._unsubscribers, []
        for unsubscribe in unsubscribers:
            unsubscribe()

    def resync(self) -> None:
        """Re-read both sources and push them through the snapshot handlers."""
        try:
            self._on_content(self.store.get_document(CONTENT_PATH))
        except Exception as exc:
            self._on_content_error(exc)
        try:
            self._on_ratings(self.store.list_collection(RATINGS_COLLECTION))
        except Exception as exc:
            self._on_ratings_error(exc)

    def view(self) -> ContentView:
        """Return the merged view model, resyncing a stale snapshot first."""
        if self._is_stale():
            self.resync()
        return ContentView(
            hero=self._content.hero,
            features=self._content.features,
            howItWorks=self._content.howItWorks,
            pricing=self._content.pricing,
            testimonials=filter_testimonials(
                self._ratings, self._content.testimonialSettings
            ),
            isLoading=self.is_loading,
        )

    def _is_stale(self) -> bool:
        if not self._unsubscribers or self._synced_at is None:
            return False
        age = datetime.now(tz=UTC) - self._synced_at
        return age >= timedelta(seconds=self.refresh_after_seconds)

    def _on_content(self, data: dict[str, object] | None) -> None:
        self._content = normalize_content(data)
        self._loaded_doc = True
        self._synced_at = datetime.now(tz=UTC)

    def _on_content_error(self, exc: Exception) -> None:
        logger.error("Content subscription failed: %s", exc)
        self._content = LandingPageContent()
        self._loaded_doc = True

    def _on_ratings(self, documents: list[StoredDocument]) -> None:
        self._ratings = [normalize_rating(doc.id, doc.data) for doc in documents]
        self._loaded_ratings = True
        self._synced_at = datetime.now(tz=UTC)

    def _on_ratings_error(self, exc: Exception) -> None:
        logger.error("Ratings subscription failed: %s", exc)
        self._ratings = []
        self._loaded_ratings = True
