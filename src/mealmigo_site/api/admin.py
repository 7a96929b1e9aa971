"""Admin back office API, gated on the admin role."""

from dataclasses import asdict

from fastapi import APIRouter, Depends, File, Form, UploadFile, status

from mealmigo_site.api.dependencies import get_container, require_admin
from mealmigo_site.api.schemas import (
    DeleteItemRequest,
    NewDropdown,
    OptionInput,
    OptionUpdate,
    SectionText,
)
from mealmigo_site.containers import AppContainer
from mealmigo_site.domain.content import SECTIONS, SectionKey
from mealmigo_site.domain.dropdowns import Dropdown, DropdownOption
from mealmigo_site.domain.recipes import Recipe, RecipeDraft
from mealmigo_site.domain.site_settings import SiteSettings
from mealmigo_site.services.cms import FieldDescriptor, delete_item
from mealmigo_site.services.media import UploadedFile
from mealmigo_site.services.users import RoleFilter

router = APIRouter(
    prefix="/api/admin", tags=["admin"], dependencies=[Depends(require_admin)]
)


async def _read_upload(file: UploadFile) -> UploadedFile:
    return UploadedFile(
        filename=file.filename or "",
        content_type=file.content_type,
        data=await file.read(),
    )


@router.get("/dashboard")
async def dashboard(container: AppContainer = Depends(get_container)) -> dict[str, object]:
    return asdict(container.dashboard_service.metrics())


@router.get("/cms")
async def cms_overview(container: AppContainer = Depends(get_container)) -> dict[str, object]:
    snapshot = container.cms_service.load()
    return {
        "sections": list(SECTIONS),
        "content": snapshot.content.model_dump(),
        "ratings": [rating.model_dump() for rating in snapshot.ratings],
    }


@router.get("/cms/{section}")
async def cms_section(
    section: SectionKey, container: AppContainer = Depends(get_container)
) -> dict[str, str]:
    return {"section": section, "text": container.cms_service.section_json(section)}


@router.post("/cms/{section}/form")
async def cms_section_form(
    section: SectionKey,
    body: SectionText,
    container: AppContainer = Depends(get_container),
) -> list[list[FieldDescriptor]]:
    """Describe the visual editor for the current buffer."""
    return container.cms_service.section_form(section, body.text)


@router.put("/cms/{section}")
async def cms_save_section(
    section: SectionKey,
    body: SectionText,
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    content = container.cms_service.save_section(section, body.text)
    container.content_feed.resync()
    return {"message": "Content saved successfully!", "content": content.model_dump()}


@router.get("/cms/{section}/blank")
async def cms_blank_item(
    section: SectionKey, container: AppContainer = Depends(get_container)
) -> dict[str, object]:
    return container.cms_service.blank_item(section)


@router.post("/cms/delete-item")
async def cms_delete_item(body: DeleteItemRequest) -> dict[str, str]:
    return {"text": delete_item(body.text, body.index)}


@router.post("/cms/{section}/media")
async def cms_upload_media(
    section: SectionKey,
    file: UploadFile = File(...),
    index: int | None = Form(default=None),
    video: bool = Form(default=False),
    container: AppContainer = Depends(get_container),
) -> dict[str, str]:
    url = container.cms_service.upload_media(
        section, await _read_upload(file), index=index, video=video
    )
    container.content_feed.resync()
    return {"url": url, "message": f"{'Video' if video else 'Image'} uploaded successfully!"}


@router.delete("/cms/{section}/media")
async def cms_remove_media(
    section: SectionKey,
    index: int | None = None,
    video: bool = False,
    container: AppContainer = Depends(get_container),
) -> dict[str, str]:
    container.cms_service.remove_media(section, index=index, video=video)
    container.content_feed.resync()
    return {"message": f"{'Video' if video else 'Image'} removed successfully!"}


@router.get("/users")
async def list_users(
    q: str = "",
    role: RoleFilter = "all",
    page: int = 1,
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    table = container.user_admin_service.table(q, role, page)
    return {
        "users": [asdict(row) for row in table.visible],
        "page": table.page,
        "page_count": table.page_count,
        "total": len(table.filtered),
    }


@router.post("/users/{uid}/toggle-suspend")
async def toggle_suspend(
    uid: str, container: AppContainer = Depends(get_container)
) -> dict[str, object]:
    return asdict(container.user_admin_service.toggle_suspend_by_id(uid))


@router.get("/dropdowns")
async def list_dropdowns(container: AppContainer = Depends(get_container)) -> list[Dropdown]:
    return container.dropdown_service.list_dropdowns()


@router.post("/dropdowns", status_code=status.HTTP_201_CREATED)
async def create_dropdown(
    body: NewDropdown, container: AppContainer = Depends(get_container)
) -> Dropdown:
    return container.dropdown_service.create(body.id)


@router.post("/dropdowns/{dropdown_id}/options", status_code=status.HTTP_201_CREATED)
async def add_option(
    dropdown_id: str,
    body: OptionInput,
    container: AppContainer = Depends(get_container),
) -> DropdownOption:
    return container.dropdown_service.add_option(
        dropdown_id, body.name, body.icon, body.description
    )


@router.put("/dropdowns/{dropdown_id}/options")
async def update_option(
    dropdown_id: str,
    body: OptionUpdate,
    container: AppContainer = Depends(get_container),
) -> DropdownOption:
    return container.dropdown_service.update_option(
        dropdown_id, body.current, body.name, body.icon, body.description
    )


@router.post("/dropdowns/{dropdown_id}/options/delete")
async def delete_option(
    dropdown_id: str,
    option: DropdownOption,
    container: AppContainer = Depends(get_container),
) -> dict[str, str]:
    container.dropdown_service.delete_option(dropdown_id, option)
    return {"status": "ok"}


@router.delete("/dropdowns/{dropdown_id}")
async def delete_dropdown(
    dropdown_id: str, container: AppContainer = Depends(get_container)
) -> dict[str, str]:
    container.dropdown_service.delete(dropdown_id)
    return {"status": "ok"}


@router.get("/settings")
async def get_settings(container: AppContainer = Depends(get_container)) -> SiteSettings:
    return container.site_settings_service.load()


@router.put("/settings")
async def save_settings(
    settings: SiteSettings, container: AppContainer = Depends(get_container)
) -> SiteSettings:
    return container.site_settings_service.save(settings)


@router.get("/recipes")
async def list_recipes(
    q: str = "", container: AppContainer = Depends(get_container)
) -> list[Recipe]:
    return container.recipe_service.list_recipes(q)


@router.post("/recipes", status_code=status.HTTP_201_CREATED)
async def create_recipe(
    draft: RecipeDraft, container: AppContainer = Depends(get_container)
) -> Recipe:
    return container.recipe_service.create(draft)


@router.put("/recipes/{recipe_id}")
async def update_recipe(
    recipe_id: str,
    draft: RecipeDraft,
    container: AppContainer = Depends(get_container),
) -> Recipe:
    return container.recipe_service.update(recipe_id, draft)


@router.delete("/recipes/{recipe_id}")
async def delete_recipe(
    recipe_id: str, container: AppContainer = Depends(get_container)
) -> dict[str, str]:
    container.recipe_service.delete(recipe_id)
    return {"status": "ok"}


@router.post("/recipes/{recipe_id}/image")
async def upload_recipe_image(
    recipe_id: str,
    file: UploadFile = File(...),
    container: AppContainer = Depends(get_container),
) -> Recipe:
    return container.recipe_service.upload_image(recipe_id, await _read_upload(file))


@router.delete("/recipes/{recipe_id}/image")
async def remove_recipe_image(
    recipe_id: str, container: AppContainer = Depends(get_container)
) -> Recipe:
    return container.recipe_service.remove_image(recipe_id)
