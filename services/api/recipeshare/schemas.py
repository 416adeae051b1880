"""Pydantic schemas for the recipe-sharing API.

Request/response models for:
- Auth (register, login, current user)
- Tags
- Recipes (with nested ordered blocks)
- Uploads

Field names are snake_case in Python and camelCase on the wire.
"""

from typing import Annotated, Literal, Optional, Union

from email_validator import EmailNotValidError, validate_email
from pydantic import AfterValidator, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class OkOut(ApiModel):
    ok: bool = True


# --- Auth ---

def _check_email(value: str) -> str:
    # Shape check only; the submitted string is stored and matched as-is
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError as e:
        raise ValueError(str(e)) from e
    return value


Email = Annotated[str, AfterValidator(_check_email)]


class RegisterIn(ApiModel):
    email: Email
    display_name: str = Field(..., min_length=1, max_length=50)
    password: str = Field(..., min_length=8, max_length=200)


class LoginIn(ApiModel):
    email: Email
    password: str = Field(..., min_length=1)


class AuthUser(ApiModel):
    """Caller identity; also the session-token payload."""
    id: str
    email: str
    display_name: str
    role: Literal["USER", "ADMIN"]

    @property
    def is_admin(self) -> bool:
        return self.role == "ADMIN"


# --- Tag ---

class TagIn(ApiModel):
    id: Optional[str] = None  # ignored; tags resolve by (name, color)
    name: str = Field(..., min_length=1, max_length=40)
    color: str = Field(..., min_length=1, max_length=40)


class TagOut(ApiModel):
    id: str
    name: str
    color: str


# --- Block ---

class TextBlockIn(ApiModel):
    type: Literal["TEXT"]
    text: str = Field(..., min_length=0)


class PhotoBlockIn(ApiModel):
    type: Literal["PHOTO"]
    photo_url: str = Field(..., min_length=1)


BlockIn = Annotated[Union[TextBlockIn, PhotoBlockIn], Field(discriminator="type")]


class BlockOut(ApiModel):
    id: str
    order: int
    type: Literal["TEXT", "PHOTO"]
    text: Optional[str] = None
    photo_url: Optional[str] = None


# --- Recipe ---

class RecipeUpsert(ApiModel):
    """Full recipe body for both create and update (update replaces everything)."""
    name: str = Field(..., min_length=1, max_length=120)
    tags: list[TagIn] = Field(default_factory=list)
    blocks: list[BlockIn] = Field(..., min_length=1)


class RecipeListItem(ApiModel):
    id: str
    name: str
    owner_id: str
    owner_display_name: str
    tags: list[TagOut]
    first_photo_url: Optional[str] = None


class RecipeDetail(ApiModel):
    id: str
    name: str
    owner_id: str
    owner_display_name: str
    tags: list[TagOut]
    blocks: list[BlockOut]


class RecipeCreated(ApiModel):
    id: str


# --- Upload ---

class UploadOut(ApiModel):
    url: str
