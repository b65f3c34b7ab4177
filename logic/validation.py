"""Pydantic schemas for validating request payloads and path identifiers."""

from __future__ import annotations

from typing import Annotated, Any, Dict, Iterable, List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from logic.errors import ValidationFailed

OBJECT_ID_PATTERN = r"^[0-9a-fA-F]{24}$"

ObjectId = Annotated[str, Field(pattern=OBJECT_ID_PATTERN)]
NonEmpty = Annotated[str, Field(min_length=1)]


class _Request(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    def changes(self) -> Dict[str, Any]:
        """Fields the client actually sent, for partial updates."""

        return self.model_dump(exclude_unset=True)


class RegisterRequest(_Request):
    """Input contract for account registration."""

    username: NonEmpty
    email: EmailStr
    password: str = Field(min_length=6)


class LoginRequest(_Request):
    email: EmailStr
    password: NonEmpty


class UserUpdateRequest(_Request):
    username: Optional[NonEmpty] = None
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(default=None, min_length=6)


class ProfileRequest(_Request):
    """Profile fields shared by the add and update profile routes."""

    bio: Optional[str] = None
    profile_photo: Optional[str] = None
    website: Optional[str] = None


class BioRequest(_Request):
    bio: str


class ClosetItemCreateRequest(_Request):
    """Closet item input; type, color and name may come from a linked product."""

    product_id: Optional[ObjectId] = None
    name: Optional[str] = None
    type: Optional[str] = None
    color: Optional[str] = None
    season: NonEmpty
    occasion: NonEmpty
    tags: List[str] = Field(default_factory=list)
    custom_image: Optional[str] = None


class ClosetItemUpdateRequest(_Request):
    name: Optional[str] = None
    type: Optional[NonEmpty] = None
    color: Optional[NonEmpty] = None
    season: Optional[NonEmpty] = None
    occasion: Optional[NonEmpty] = None
    tags: Optional[List[str]] = None
    custom_image: Optional[str] = None


class ProductCreateRequest(_Request):
    brand: NonEmpty
    name: Optional[str] = None
    type: NonEmpty
    color: NonEmpty
    price: float = Field(ge=0)
    link: NonEmpty
    image: str = ""
    season: Optional[str] = None
    occasion: Optional[str] = None
    availability: Optional[str] = None
    category: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    custom_image: Optional[str] = None


class ProductUpdateRequest(_Request):
    brand: Optional[NonEmpty] = None
    name: Optional[NonEmpty] = None
    type: Optional[NonEmpty] = None
    color: Optional[NonEmpty] = None
    price: Optional[float] = Field(default=None, ge=0)
    link: Optional[NonEmpty] = None
    image: Optional[str] = None
    season: Optional[str] = None
    occasion: Optional[str] = None
    availability: Optional[str] = None
    category: Optional[str] = None
    tags: Optional[List[str]] = None
    custom_image: Optional[str] = None


class ProductUpsertRequest(ProductCreateRequest):
    """Candidate product coming from an external recognition source."""

    name: NonEmpty


class RecognizeProductRequest(_Request):
    """Image to recognise plus the catalog fields recognition cannot infer."""

    image_url: NonEmpty
    brand: NonEmpty
    name: NonEmpty
    price: float = Field(ge=0)
    link: NonEmpty


class PostProductEntry(_Request):
    """Product tagged on a post; entries missing catalog fields are skipped."""

    brand: Optional[str] = None
    name: Optional[str] = None
    type: Optional[str] = None
    color: Optional[str] = None
    price: Optional[float] = Field(default=None, ge=0)
    link: Optional[str] = None


class OOTDPostCreateRequest(_Request):
    image_url: NonEmpty
    caption: str = ""
    tags: List[str] = Field(default_factory=list)
    mentions: List[ObjectId] = Field(default_factory=list)
    location: Optional[str] = None
    products: List[PostProductEntry] = Field(default_factory=list)


class OOTDPostUpdateRequest(_Request):
    image_url: Optional[NonEmpty] = None
    caption: Optional[str] = None
    tags: Optional[List[str]] = None
    mentions: Optional[List[ObjectId]] = None
    location: Optional[str] = None


class CommentRequest(_Request):
    text: NonEmpty


class WishlistItemCreateRequest(_Request):
    product_id: ObjectId


class NotificationCreateRequest(_Request):
    user_id: ObjectId
    type: NonEmpty
    message: NonEmpty
    related_id: Optional[ObjectId] = None

    @field_validator("type")
    @classmethod
    def _lower_type(cls, value: str) -> str:
        return value.lower()


def validation_failure(message: str, errors: Iterable[Dict[str, Any]]) -> ValidationFailed:
    """Translate Pydantic errors into the error raised to HTTP clients."""

    details = [
        {"field": ".".join(str(part) for part in error["loc"]), "message": error["msg"]}
        for error in errors
    ]
    return ValidationFailed(message, errors=details)


__all__ = [
    "OBJECT_ID_PATTERN",
    "BioRequest",
    "ClosetItemCreateRequest",
    "ClosetItemUpdateRequest",
    "CommentRequest",
    "LoginRequest",
    "NotificationCreateRequest",
    "OOTDPostCreateRequest",
    "OOTDPostUpdateRequest",
    "ObjectId",
    "PostProductEntry",
    "ProductCreateRequest",
    "ProductUpdateRequest",
    "ProductUpsertRequest",
    "ProfileRequest",
    "RecognizeProductRequest",
    "RegisterRequest",
    "UserUpdateRequest",
    "WishlistItemCreateRequest",
    "validation_failure",
]
