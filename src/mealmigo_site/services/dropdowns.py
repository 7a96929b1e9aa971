"""Admin dropdown manager backed by atomic array operations."""

import logging
from dataclasses import dataclass

from pydantic import ValidationError

from mealmigo_site.domain.dropdowns import (
    DESCRIBED,
    ICON_REQUIRED,
    Dropdown,
    DropdownOption,
)
from mealmigo_site.services.documents import (
    DROPDOWNS_COLLECTION,
    DocumentNotFoundError,
    DocumentStore,
)

logger = logging.getLogger(__name__)

OPTIONS_FIELD = "options"


class InvalidOptionError(ValueError):
    """Raised when an option or category fails validation."""


def dropdown_path(dropdown_id: str) -> str:
    return f"{DROPDOWNS_COLLECTION}/{dropdown_id}"


def build_option(
    dropdown_id: str,
    name: str,
    icon: str | None = None,
    description: str | None = None,
) -> DropdownOption:
    """Trim and validate an option for the given category."""
    clean_name = name.strip()
    if not clean_name:
        raise InvalidOptionError("Option name cannot be empty.")
    clean_icon = (icon or "").strip() or None
    if dropdown_id in ICON_REQUIRED and clean_icon is None:
        raise InvalidOptionError("Icon name is required for this dropdown.")
    clean_description = (description or "").strip() or None
    return DropdownOption(
        name=clean_name,
        icon=clean_icon,
        description=clean_description if dropdown_id in DESCRIBED else None,
    )


def _options(raw: object) -> list[DropdownOption]:
    options = []
    for item in raw if isinstance(raw, list) else []:
        try:
            options.append(DropdownOption.model_validate(item))
        except ValidationError:
            logger.warning("Skipping malformed dropdown option")
    return options


@dataclass
class DropdownService:
    """Category and option CRUD without whole-array rewrites."""

    store: DocumentStore

    def list_dropdowns(self) -> list[Dropdown]:
        return [
            Dropdown(id=doc.id, options=_options(doc.data.get(OPTIONS_FIELD)))
            for doc in self.store.list_collection(DROPDOWNS_COLLECTION)
        ]

    def get(self, dropdown_id: str) -> Dropdown:
        data = self.store.get_document(dropdown_path(dropdown_id))
        if data is None:
            raise DocumentNotFoundError(dropdown_path(dropdown_id))
        return Dropdown(id=dropdown_id, options=_options(data.get(OPTIONS_FIELD)))

    def create(self, dropdown_id: str) -> Dropdown:
        clean_id = dropdown_id.strip()
        if not clean_id or "/" in clean_id:
            raise InvalidOptionError("Dropdown name cannot be empty.")
        self.store.set_document(dropdown_path(clean_id), {OPTIONS_FIELD: []}, merge=True)
        return self.get(clean_id)

    def add_option(
        self,
        dropdown_id: str,
        name: str,
        icon: str | None = None,
        description: str | None = None,
    ) -> DropdownOption:
        option = build_option(dropdown_id, name, icon, description)
        self.get(dropdown_id)
        self.store.array_union(
            dropdown_path(dropdown_id), OPTIONS_FIELD, [option.stored()]
        )
        return option

    def update_option(
        self,
        dropdown_id: str,
        current: DropdownOption,
        name: str,
        icon: str | None = None,
        description: str | None = None,
    ) -> DropdownOption:
        """Swap one option in place; ConflictError if it was changed meanwhile."""
        option = build_option(dropdown_id, name, icon, description)
        if current.model_extra:
            option = DropdownOption(**current.model_extra, **option.model_dump())
        self.store.array_replace(
            dropdown_path(dropdown_id),
            OPTIONS_FIELD,
            current.stored(),
            option.stored(),
        )
        return option

    def delete_option(self, dropdown_id: str, option: DropdownOption) -> None:
        self.store.array_remove(
            dropdown_path(dropdown_id), OPTIONS_FIELD, [option.stored()]
        )

    def delete(self, dropdown_id: str) -> None:
        self.store.delete_document(dropdown_path(dropdown_id))
        logger.info("Deleted dropdown", extra={"dropdown": dropdown_id})
