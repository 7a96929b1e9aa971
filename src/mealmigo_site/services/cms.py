"""Admin CMS editor for the landing page document."""

import json
import logging
from dataclasses import dataclass
from typing import Literal

from pydantic import BaseModel, Field, TypeAdapter, ValidationError

from mealmigo_site.domain.content import (
    CONTENT_SCHEMA_VERSION,
    ICON_NAMES,
    AppRating,
    Feature,
    HeroContent,
    LandingPageContent,
    Plan,
    SectionKey,
    Step,
    TestimonialSettings,
)
from mealmigo_site.services.content import normalize_content, normalize_rating
from mealmigo_site.services.documents import (
    CONTENT_PATH,
    RATINGS_COLLECTION,
    DocumentNotFoundError,
    DocumentStore,
    FileStorage,
)
from mealmigo_site.services.media import (
    UploadedFile,
    ensure_managed_path,
    media_path,
    validate_upload,
)

logger = logging.getLogger(__name__)

Widget = Literal["text", "textarea", "number", "lines", "media", "select", "checkbox", "hidden"]

_SECTION_ADAPTERS: dict[str, TypeAdapter] = {
    "hero": TypeAdapter(HeroContent),
    "features": TypeAdapter(list[Feature]),
    "howItWorks": TypeAdapter(list[Step]),
    "pricing": TypeAdapter(list[Plan]),
    "appRating": TypeAdapter(TestimonialSettings),
}
_ITEM_MODELS: dict[str, type[BaseModel]] = {
    "features": Feature,
    "howItWorks": Step,
    "pricing": Plan,
}
_MEDIA_KEYS = frozenset({"image", "imageURL", "videoURL"})
_HIDDEN_KEYS = frozenset({"storagePath", "imageStoragePath", "videoStoragePath"})
_TEXTAREA_KEYS = frozenset({"description", "text"})


class InvalidSectionError(ValueError):
    """Raised when an editor buffer does not parse into the section's shape."""

    def __init__(
        self, message: str = "Invalid JSON content. Please check the data structure."
    ) -> None:
        super().__init__(message)


class FieldDescriptor(BaseModel):
    """One input rendered by the visual editor."""

    key: str
    widget: Widget
    value: object = None
    options: list[str] = Field(default_factory=list)


@dataclass(frozen=True)
class CmsSnapshot:
    content: LandingPageContent
    ratings: list[AppRating]


def widget_for(key: str, value: object) -> FieldDescriptor:
    """Pick an editor widget by key naming convention."""
    if key in _HIDDEN_KEYS:
        return FieldDescriptor(key=key, widget="hidden", value=value)
    if key == "price":
        return FieldDescriptor(key=key, widget="number", value=value)
    if key == "features":
        return FieldDescriptor(key=key, widget="lines", value="\n".join(value or []))
    if key in _MEDIA_KEYS:
        return FieldDescriptor(key=key, widget="media", value=value)
    if key == "icon":
        return FieldDescriptor(
            key=key, widget="select", value=value, options=list(ICON_NAMES)
        )
    if key == "mediaType":
        return FieldDescriptor(
            key=key, widget="select", value=value, options=["image", "video"]
        )
    if key == "sortField":
        return FieldDescriptor(
            key=key, widget="select", value=value, options=["rating", "submittedTime"]
        )
    if key == "sortDirection":
        return FieldDescriptor(
            key=key, widget="select", value=value, options=["asc", "desc"]
        )
    if isinstance(value, bool):
        return FieldDescriptor(key=key, widget="checkbox", value=value)
    if isinstance(value, int | float):
        return FieldDescriptor(key=key, widget="number", value=value)
    if key in _TEXTAREA_KEYS:
        return FieldDescriptor(key=key, widget="textarea", value=value)
    return FieldDescriptor(key=key, widget="text", value=value)


def parse_section(section: SectionKey, text: str) -> object:
    """Parse an editor buffer and return the section's plain data."""
    adapter = _SECTION_ADAPTERS.get(section)
    if adapter is None:
        raise InvalidSectionError(f"Unknown section: {section}")
    try:
        parsed = adapter.validate_json(text)
    except ValidationError as exc:
        raise InvalidSectionError() from exc
    return adapter.dump_python(parsed)


def delete_item(text: str, index: int) -> str:
    """Remove one entry from a list-section buffer."""
    try:
        items = json.loads(text)
    except json.JSONDecodeError as exc:
        raise InvalidSectionError() from exc
    if not isinstance(items, list) or not 0 <= index < len(items):
        raise InvalidSectionError("Item index out of range.")
    del items[index]
    return json.dumps(items, indent=2, ensure_ascii=False)


@dataclass
class CmsEditorService:
    """Reads and writes landing page sections and their media."""

    store: DocumentStore
    storage: FileStorage

    def load(self) -> CmsSnapshot:
        """Read the content document, creating it when missing, and all ratings."""
        return CmsSnapshot(
            content=self._content(),
            ratings=[
                normalize_rating(doc.id, doc.data)
                for doc in self.store.list_collection(RATINGS_COLLECTION)
            ],
        )

    def section_json(self, section: SectionKey) -> str:
        return json.dumps(
            self._section_value(self._content(), section), indent=2, ensure_ascii=False
        )

    def section_form(self, section: SectionKey, text: str) -> list[list[FieldDescriptor]]:
        """Describe the visual editor inputs for each item in the buffer."""
        value = parse_section(section, text)
        items = value if isinstance(value, list) else [value]
        return [[widget_for(key, v) for key, v in item.items()] for item in items]

    def save_section(self, section: SectionKey, text: str) -> LandingPageContent:
        """Validate the buffer and merge-write only the section's key."""
        value = parse_section(section, text)
        key = "testimonialSettings" if section == "appRating" else section
        self.store.set_document(
            CONTENT_PATH,
            {key: value, "schemaVersion": CONTENT_SCHEMA_VERSION},
            merge=True,
        )
        logger.info("Saved CMS section", extra={"section": section})
        return self._content()

    @staticmethod
    def blank_item(section: SectionKey) -> dict[str, object]:
        model = _ITEM_MODELS.get(section)
        if model is None:
            raise InvalidSectionError(f"Section {section} has no list items.")
        return model().model_dump()

    def upload_media(
        self,
        section: SectionKey,
        upload: UploadedFile,
        index: int | None = None,
        video: bool = False,
    ) -> str:
        """Validate, upload, then record the URL and storage path."""
        content_type = validate_upload(upload, video=video)
        content = self._content()
        if section == "hero":
            path = media_path("hero_video" if video else "hero_image")
        elif section == "howItWorks" and not video:
            self._check_step_index(content, index)
            path = media_path(f"step{index}")
        else:
            raise InvalidSectionError("Media is only supported for hero and howItWorks.")
        url = self.storage.upload(path, upload.data, content_type)
        if section == "hero":
            hero = content.hero.model_copy(
                update={
                    "videoURL" if video else "imageURL": url,
                    "videoStoragePath" if video else "imageStoragePath": path,
                    "mediaType": "video" if video else "image",
                }
            )
            self._write("hero", hero.model_dump())
        else:
            steps = [step.model_dump() for step in content.howItWorks]
            steps[index] = {**steps[index], "image": url, "storagePath": path}
            self._write("howItWorks", steps)
        logger.info("Uploaded CMS media", extra={"path": path})
        return url

    def remove_media(
        self, section: SectionKey, index: int | None = None, video: bool = False
    ) -> None:
        """Delete the stored object and blank the recorded URL and path."""
        data = self.store.get_document(CONTENT_PATH)
        if data is None:
            raise DocumentNotFoundError(CONTENT_PATH)
        content = normalize_content(data)
        if section == "hero":
            hero = content.hero
            path = hero.videoStoragePath if video else hero.imageStoragePath
            self.storage.delete(ensure_managed_path(path))
            updated = hero.model_copy(
                update={
                    "videoURL" if video else "imageURL": "",
                    "videoStoragePath" if video else "imageStoragePath": "",
                    "mediaType": "image" if video else hero.mediaType,
                }
            )
            self._write("hero", updated.model_dump())
        elif section == "howItWorks":
            self._check_step_index(content, index)
            self.storage.delete(ensure_managed_path(content.howItWorks[index].storagePath))
            steps = [step.model_dump() for step in content.howItWorks]
            steps[index] = {**steps[index], "image": "", "storagePath": ""}
            self._write("howItWorks", steps)
        else:
            raise InvalidSectionError("Media is only supported for hero and howItWorks.")

    def _content(self) -> LandingPageContent:
        data = self.store.get_document(CONTENT_PATH)
        if data is None:
            default = LandingPageContent()
            self.store.set_document(CONTENT_PATH, default.model_dump())
            logger.info("Created default landing page content")
            return default
        return normalize_content(data)

    def _write(self, key: str, value: object) -> None:
        self.store.set_document(
            CONTENT_PATH,
            {key: value, "schemaVersion": CONTENT_SCHEMA_VERSION},
            merge=True,
        )

    @staticmethod
    def _section_value(content: LandingPageContent, section: SectionKey) -> object:
        if section == "appRating":
            return content.testimonialSettings.model_dump()
        value = getattr(content, section)
        if isinstance(value, list):
            return [item.model_dump() for item in value]
        return value.model_dump()

    @staticmethod
    def _check_step_index(content: LandingPageContent, index: int | None) -> None:
        if index is None or not 0 <= index < len(content.howItWorks):
            raise InvalidSectionError("Step index out of range.")
