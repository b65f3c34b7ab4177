"""Catalog product data model."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from models.common import build_from_document, ensure_list, utc_now
from models.taxonomy import normalise_tags

DEFAULT_PRODUCT_NAME = "Untitled Item"


def product_identity(name: str, brand: str) -> str:
    """Key that identifies one catalog entry: name and brand, case-insensitive."""

    return f"{name.strip().lower()}|{brand.strip().lower()}"


@dataclass
class Product:
    """A catalog entry that closet and wishlist items can point at."""

    id: str
    brand: str
    type: str
    color: str
    price: float
    link: str
    image: str
    source: str
    name: str = DEFAULT_PRODUCT_NAME
    season: Optional[str] = None
    occasion: Optional[str] = None
    availability: Optional[str] = None
    category: Optional[str] = None
    tags: List[str] = field(default_factory=list)
    custom_image: Optional[str] = None
    created_at: str = field(default_factory=utc_now)

    def __post_init__(self) -> None:
        self.brand = self.brand.strip()
        self.name = (self.name or "").strip() or DEFAULT_PRODUCT_NAME
        self.type = self.type.strip().lower()
        self.color = self.color.strip().lower()
        self.price = float(self.price)
        if self.price < 0:
            raise ValueError("price cannot be negative")
        self.tags = normalise_tags(ensure_list(self.tags))

    @property
    def identity_key(self) -> str:
        return product_identity(self.name, self.brand)

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "Product":
        return build_from_document(cls, document)


__all__ = ["DEFAULT_PRODUCT_NAME", "Product", "product_identity"]
