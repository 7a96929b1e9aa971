"""Admin recipe library: listing, editing and recipe images."""

import logging
from dataclasses import dataclass

from mealmigo_site.domain.recipes import Ingredient, Recipe, RecipeDraft
from mealmigo_site.services.documents import (
    RECIPES_COLLECTION,
    DocumentNotFoundError,
    DocumentStore,
    FileStorage,
    StoredDocument,
    parse_timestamp,
    utc_now_iso,
)
from mealmigo_site.services.media import (
    UploadedFile,
    ensure_managed_path,
    media_path,
    validate_upload,
)

logger = logging.getLogger(__name__)


class InvalidRecipeError(ValueError):
    """Raised when a recipe cannot be saved as submitted."""


def recipe_path(recipe_id: str) -> str:
    return f"{RECIPES_COLLECTION}/{recipe_id}"


def _iso(value: object) -> str | None:
    parsed = parse_timestamp(value)
    return parsed.isoformat() if parsed else None


def recipe_from_document(doc: StoredDocument) -> Recipe:
    """Map a stored document to a recipe, tolerating missing fields."""
    data = doc.data
    tags = data.get("tags")
    ingredients = data.get("ingredients")
    steps = data.get("steps")
    return Recipe(
        id=doc.id,
        title=str(data.get("title") or ""),
        description=str(data.get("description") or ""),
        tags=[str(tag) for tag in tags if tag] if isinstance(tags, list) else [],
        ingredients=[
            Ingredient.model_validate(item)
            for item in (ingredients if isinstance(ingredients, list) else [])
            if isinstance(item, dict)
        ],
        steps=[str(step) for step in steps] if isinstance(steps, list) else [],
        imageURL=str(data.get("imageURL") or ""),
        imageStoragePath=str(data.get("imageStoragePath") or ""),
        isPublic=data.get("isPublic") is not False,
        createdAt=_iso(data.get("createdAt")),
        updatedAt=_iso(data.get("updatedAt")),
    )


def clean_draft(draft: RecipeDraft) -> dict[str, object]:
    """Trim text and drop empty tags, ingredients and steps."""
    title = draft.title.strip()
    if not title:
        raise InvalidRecipeError("Recipe title cannot be empty.")
    return {
        "title": title,
        "description": draft.description.strip(),
        "tags": [tag.strip() for tag in draft.tags if tag.strip()],
        "ingredients": [
            {"name": item.name.strip(), "amount": item.amount.strip()}
            for item in draft.ingredients
            if item.name.strip()
        ],
        "steps": [step.strip() for step in draft.steps if step.strip()],
        "imageURL": draft.imageURL,
        "imageStoragePath": draft.imageStoragePath,
        "isPublic": draft.isPublic,
    }


def search_recipes(recipes: list[Recipe], query: str) -> list[Recipe]:
    needle = query.strip().lower()
    if not needle:
        return recipes
    return [
        recipe
        for recipe in recipes
        if needle in recipe.title.lower() or needle in " ".join(recipe.tags).lower()
    ]


@dataclass
class RecipeService:
    store: DocumentStore
    storage: FileStorage

    def list_recipes(self, query: str = "") -> list[Recipe]:
        """Return recipes, most recently updated first."""
        recipes = [
            recipe_from_document(doc)
            for doc in self.store.list_collection(RECIPES_COLLECTION)
        ]
        recipes.sort(key=lambda recipe: recipe.updatedAt or "", reverse=True)
        return search_recipes(recipes, query)

    def get(self, recipe_id: str) -> Recipe:
        data = self.store.get_document(recipe_path(recipe_id))
        if data is None:
            raise DocumentNotFoundError(recipe_path(recipe_id))
        return recipe_from_document(StoredDocument(id=recipe_id, data=data))

    def create(self, draft: RecipeDraft) -> Recipe:
        now = utc_now_iso()
        recipe_id = self.store.add_document(
            RECIPES_COLLECTION, {**clean_draft(draft), "createdAt": now, "updatedAt": now}
        )
        logger.info("Created recipe", extra={"recipe": recipe_id})
        return self.get(recipe_id)

    def update(self, recipe_id: str, draft: RecipeDraft) -> Recipe:
        self.store.update_document(
            recipe_path(recipe_id), {**clean_draft(draft), "updatedAt": utc_now_iso()}
        )
        return self.get(recipe_id)

    def delete(self, recipe_id: str) -> None:
        """Delete the recipe; a failed image delete does not block it."""
        recipe = self.get(recipe_id)
        if recipe.imageStoragePath:
            try:
                self.storage.delete(recipe.imageStoragePath)
            except Exception:
                logger.warning(
                    "Recipe image delete failed",
                    exc_info=True,
                    extra={"recipe": recipe_id},
                )
        self.store.delete_document(recipe_path(recipe_id))

    def upload_image(self, recipe_id: str, upload: UploadedFile) -> Recipe:
        """Upload a PNG or JPEG for a saved recipe and record it."""
        content_type = validate_upload(upload)
        if self.store.get_document(recipe_path(recipe_id)) is None:
            raise InvalidRecipeError("Save the recipe first, then upload an image.")
        path = media_path(f"recipes/{recipe_id}")
        url = self.storage.upload(path, upload.data, content_type)
        self.store.update_document(
            recipe_path(recipe_id),
            {"imageURL": url, "imageStoragePath": path, "updatedAt": utc_now_iso()},
        )
        return self.get(recipe_id)

    def remove_image(self, recipe_id: str) -> Recipe:
        recipe = self.get(recipe_id)
        if not recipe.imageStoragePath:
            return recipe
        self.storage.delete(ensure_managed_path(recipe.imageStoragePath))
        self.store.update_document(
            recipe_path(recipe_id),
            {"imageURL": "", "imageStoragePath": "", "updatedAt": utc_now_iso()},
        )
        return self.get(recipe_id)
