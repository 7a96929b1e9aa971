import json

import pytest

from mealmigo_site.services.cms import (
    CmsEditorService,
    InvalidSectionError,
    delete_item,
    parse_section,
    widget_for,
)
from mealmigo_site.services.documents import InvalidStoragePathError
from mealmigo_site.services.media import UploadedFile, UploadValidationError
from tests.conftest import InMemoryDocumentStore, InMemoryFileStorage

CONTENT = "landingPageContent/main"
PNG = UploadedFile(filename="hero.png", content_type="image/png", data=b"png")


def _service(documents: dict | None = None) -> tuple[CmsEditorService, InMemoryDocumentStore, InMemoryFileStorage]:
    store = InMemoryDocumentStore(documents=documents or {})
    storage = InMemoryFileStorage()
    return CmsEditorService(store=store, storage=storage), store, storage


def test_load_creates_default_document() -> None:
    service, store, _ = _service()

    snapshot = service.load()

    assert CONTENT in store.documents
    assert snapshot.content.schemaVersion == 1
    assert snapshot.ratings == []


def test_save_section_writes_only_that_key() -> None:
    service, store, _ = _service({CONTENT: {"hero": {"title1": "Keep"}, "custom": 1}})

    service.save_section("features", json.dumps([{"title": "Plans", "icon": "Utensils"}]))

    stored = store.documents[CONTENT]
    assert stored["hero"] == {"title1": "Keep"}
    assert stored["custom"] == 1
    assert stored["features"][0]["title"] == "Plans"
    assert stored["schemaVersion"] == 1


def test_save_app_rating_section_targets_testimonial_settings() -> None:
    service, store, _ = _service({CONTENT: {}})

    service.save_section("appRating", json.dumps({"minRating": 4, "maxTestimonials": 3}))

    assert store.documents[CONTENT]["testimonialSettings"]["minRating"] == 4
    assert "appRating" not in store.documents[CONTENT]
    assert json.loads(service.section_json("appRating"))["maxTestimonials"] == 3


@pytest.mark.parametrize(
    ("section", "text"),
    [
        ("features", "{not json"),
        ("features", json.dumps({"title": "not a list"})),
        ("appRating", json.dumps({"minRating": 9})),
    ],
)
def test_invalid_buffer_is_rejected_without_writing(section, text) -> None:
    service, store, _ = _service({CONTENT: {}})

    with pytest.raises(InvalidSectionError):
        service.save_section(section, text)
    assert store.writes == []


def test_parse_section_returns_plain_data() -> None:
    assert parse_section("hero", json.dumps({"title1": "Hi"}))["title1"] == "Hi"


def test_section_form_describes_widgets() -> None:
    service, _, _ = _service({CONTENT: {}})

    form = service.section_form(
        "pricing", json.dumps([{"name": "Pro", "price": 5, "features": ["A", "B"]}])
    )

    widgets = {field.key: field for field in form[0]}
    assert widgets["price"].widget == "number"
    assert widgets["features"].widget == "lines"
    assert widgets["features"].value == "A\nB"
    assert widgets["featured"].widget == "checkbox"


def test_widget_for_icons_lists_known_names() -> None:
    field = widget_for("icon", "Utensils")

    assert field.widget == "select"
    assert "ScanLine" in field.options


def test_delete_item_removes_index() -> None:
    text = json.dumps([{"title": "a"}, {"title": "b"}])

    assert json.loads(delete_item(text, 0)) == [{"title": "b"}]
    with pytest.raises(InvalidSectionError):
        delete_item(text, 5)


def test_blank_item_only_for_list_sections() -> None:
    assert CmsEditorService.blank_item("features") == {"title": "", "description": "", "icon": ""}
    with pytest.raises(InvalidSectionError):
        CmsEditorService.blank_item("hero")


def test_upload_hero_image_records_url_and_path() -> None:
    service, store, storage = _service({CONTENT: {}})

    url = service.upload_media("hero", PNG)

    hero = store.documents[CONTENT]["hero"]
    assert hero["imageURL"] == url
    assert hero["imageStoragePath"].startswith("websiteImages/hero_image_")
    assert hero["imageStoragePath"] in storage.objects


def test_upload_hero_video_switches_media_type() -> None:
    service, store, _ = _service({CONTENT: {}})

    service.upload_media(
        "hero", UploadedFile("clip.mp4", "video/mp4", b"mp4"), video=True
    )

    assert store.documents[CONTENT]["hero"]["mediaType"] == "video"


def test_upload_step_image_requires_valid_index() -> None:
    service, store, _ = _service({CONTENT: {"howItWorks": [{"title": "One"}]}})

    with pytest.raises(InvalidSectionError):
        service.upload_media("howItWorks", PNG, index=3)
    service.upload_media("howItWorks", PNG, index=0)

    step = store.documents[CONTENT]["howItWorks"][0]
    assert step["storagePath"].startswith("websiteImages/step0_")


def test_upload_rejects_wrong_type_before_storing() -> None:
    service, _, storage = _service({CONTENT: {}})

    with pytest.raises(UploadValidationError):
        service.upload_media("hero", UploadedFile("a.gif", "image/gif", b"gif"))
    assert storage.objects == {}


def test_remove_media_deletes_object_and_clears_fields() -> None:
    service, store, storage = _service({CONTENT: {}})
    service.upload_media("hero", PNG)
    path = store.documents[CONTENT]["hero"]["imageStoragePath"]

    service.remove_media("hero")

    assert storage.deleted == [path]
    assert store.documents[CONTENT]["hero"]["imageURL"] == ""


def test_remove_media_refuses_unmanaged_paths() -> None:
    service, _, storage = _service(
        {CONTENT: {"hero": {"imageStoragePath": "avatars/someone.png"}}}
    )

    with pytest.raises(InvalidStoragePathError):
        service.remove_media("hero")
    assert storage.deleted == []
