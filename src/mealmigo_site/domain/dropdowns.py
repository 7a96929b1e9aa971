"""Dropdown taxonomy models."""

from pydantic import BaseModel, ConfigDict, Field

ICON_REQUIRED = frozenset({"allergies", "dietTypes"})
DESCRIBED = frozenset({"dietTypes"})


class DropdownOption(BaseModel):
    """One selectable option stored in a category's options array.

    Keys written by other clients are kept so ``stored()`` matches the array
    element exactly.
    """

    model_config = ConfigDict(extra="allow")

    name: str
    icon: str | None = None
    description: str | None = None

    def stored(self) -> dict[str, object]:
        return self.model_dump(exclude_none=True)


class Dropdown(BaseModel):
    id: str
    options: list[DropdownOption] = Field(default_factory=list)
