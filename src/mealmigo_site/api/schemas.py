"""Request bodies accepted by the HTTP API."""

from typing import Literal

from pydantic import BaseModel, Field

from mealmigo_site.domain.dropdowns import DropdownOption


class Credentials(BaseModel):
    email: str
    password: str


class EmailRequest(BaseModel):
    email: str


class SignUpRequest(BaseModel):
    name: str = ""
    email: str
    password: str = Field(min_length=6)


class ChatRequest(BaseModel):
    message: str


class OnboardingStart(BaseModel):
    sex: Literal["male", "female"] | None = None


class OnboardingUpdate(BaseModel):
    quiz: dict[str, object] | None = None
    health_profile: dict[str, object] | None = None
    step: int | None = None


class OnboardingFinish(SignUpRequest):
    pass


class HealthUpdate(BaseModel):
    partial: dict[str, object] = Field(default_factory=dict)


class UpgradeRequest(BaseModel):
    billing: Literal["monthly", "yearly"] = "monthly"


class SectionText(BaseModel):
    text: str


class DeleteItemRequest(BaseModel):
    text: str
    index: int


class NewDropdown(BaseModel):
    id: str


class OptionInput(BaseModel):
    name: str
    icon: str | None = None
    description: str | None = None


class OptionUpdate(OptionInput):
    current: DropdownOption
