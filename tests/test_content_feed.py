from datetime import UTC, datetime, timedelta

from mealmigo_site.domain.content import AppRating, TestimonialSettings
from mealmigo_site.services.content import (
    ContentFeed,
    filter_testimonials,
    normalize_array,
    normalize_content,
    normalize_rating,
)
from tests.conftest import InMemoryDocumentStore


def _rating(doc_id: str, rating: float, text: str = "Great", days_ago: int = 0, **kwargs) -> AppRating:
    submitted = datetime(2024, 6, 1, tzinfo=UTC) - timedelta(days=days_ago)
    return AppRating(
        id=doc_id, name=doc_id, text=text, rating=rating, submittedTime=submitted.isoformat(), **kwargs
    )


def test_normalize_array_accepts_lists_and_legacy_maps() -> None:
    assert normalize_array([1, 2]) == [1, 2]
    assert normalize_array({"b": 1, "a": 2}) == [1, 2]
    assert normalize_array("nope") == []
    assert normalize_array(None) == []


def test_normalize_content_defaults_for_missing_document() -> None:
    content = normalize_content(None)

    assert content.hero.mediaType == "image"
    assert content.features == []
    assert content.testimonialSettings.maxTestimonials == 0


def test_normalize_content_tolerates_map_shaped_sections() -> None:
    content = normalize_content(
        {
            "hero": {"title1": "Eat", "mediaType": "gif"},
            "features": {"0": {"title": "Plans", "icon": "Utensils"}, "1": "junk"},
            "pricing": [{"name": "Pro", "price": 9.99, "features": {"a": "Chat", "b": 3}}],
            "howItWorks": None,
        }
    )

    assert content.hero.title1 == "Eat"
    assert content.hero.mediaType == "image"
    assert [feature.title for feature in content.features] == ["Plans"]
    assert content.pricing[0].features == ["Chat", "3"]
    assert content.howItWorks == []


def test_normalize_rating_fills_missing_fields() -> None:
    rating = normalize_rating(
        "r1", {"rating": True, "submittedTime": datetime(2024, 1, 1), "isVisible": None}
    )

    assert rating.rating == 0.0
    assert rating.name == ""
    assert rating.isVisible is True
    assert rating.submittedTime.startswith("2024-01-01T00:00:00")


def test_filter_testimonials_applies_settings() -> None:
    ratings = [
        _rating("a", 5, days_ago=3),
        _rating("b", 3),
        _rating("c", 4.5, text="   "),
        _rating("d", 4, isVisible=False),
        _rating("e", 4.8, days_ago=1),
    ]
    settings = TestimonialSettings(minRating=4, showOnlyWithText=True, maxTestimonials=2)

    shown = filter_testimonials(ratings, settings)

    assert [rating.id for rating in shown] == ["a", "e"]


def test_filter_testimonials_sorts_by_submitted_time_ascending() -> None:
    ratings = [_rating("new", 4), _rating("old", 4, days_ago=10), _rating("mid", 4, days_ago=5)]
    settings = TestimonialSettings(sortField="submittedTime", sortDirection="asc")

    assert [r.id for r in filter_testimonials(ratings, settings)] == ["old", "mid", "new"]


def test_filter_testimonials_is_idempotent_and_monotonic() -> None:
    ratings = [_rating(str(i), i % 5 + 0.5, days_ago=i) for i in range(12)]
    loose = TestimonialSettings(minRating=1)
    strict = TestimonialSettings(minRating=3)

    once = filter_testimonials(ratings, loose)

    assert filter_testimonials(once, loose) == once
    assert {r.id for r in filter_testimonials(ratings, strict)} <= {r.id for r in once}


def test_content_feed_is_loading_until_started() -> None:
    feed = ContentFeed(store=InMemoryDocumentStore())

    assert feed.view().isLoading is True

    feed.start()

    assert feed.view().isLoading is False


def test_content_feed_follows_document_changes() -> None:
    store = InMemoryDocumentStore()
    store.set_document("appRating/r1", {"name": "Ana", "text": "Love it", "rating": 5})
    feed = ContentFeed(store=store)
    feed.start()

    store.set_document("landingPageContent/main", {"hero": {"title1": "Fresh"}})
    store.set_document("appRating/r2", {"name": "Bo", "text": "Nice", "rating": 4})

    view = feed.view()
    assert view.hero.title1 == "Fresh"
    assert [rating.id for rating in view.testimonials] == ["r1", "r2"]

    feed.close()
    assert store.watches == []


def test_content_feed_falls_back_to_defaults_on_errors() -> None:
    store = InMemoryDocumentStore(fail_watches=True)
    feed = ContentFeed(store=store)

    feed.start()

    view = feed.view()
    assert view.isLoading is False
    assert view.testimonials == []
    assert view.hero.title1 == ""


def test_content_feed_start_twice_subscribes_once() -> None:
    store = InMemoryDocumentStore()
    feed = ContentFeed(store=store)

    feed.start()
    feed.start()

    assert len(store.watches) == 2


def test_content_feed_resyncs_stale_snapshot() -> None:
    store = InMemoryDocumentStore()
    feed = ContentFeed(store=store, refresh_after_seconds=0)
    feed.start()
    store.documents["landingPageContent/main"] = {"hero": {"title1": "Written elsewhere"}}

    assert feed.view().hero.title1 == "Written elsewhere"
