"""Recipe models managed from the admin back office."""

# ruff: noqa: N815

from pydantic import BaseModel, Field


class Ingredient(BaseModel):
    name: str = ""
    amount: str = ""


class RecipeDraft(BaseModel):
    """Editable recipe fields as submitted by the form."""

    title: str = ""
    description: str = ""
    tags: list[str] = Field(default_factory=list)
    ingredients: list[Ingredient] = Field(default_factory=list)
    steps: list[str] = Field(default_factory=list)
    imageURL: str = ""
    imageStoragePath: str = ""
    isPublic: bool = True


class Recipe(RecipeDraft):
    """A stored recipe."""

    id: str
    createdAt: str | None = None
    updatedAt: str | None = None
