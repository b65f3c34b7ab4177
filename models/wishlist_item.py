"""Wishlist item data model."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict

from models.common import build_from_document, utc_now


@dataclass
class WishlistItem:
    id: str
    user_id: str
    product_id: str
    added_at: str = field(default_factory=utc_now)

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "WishlistItem":
        return build_from_document(cls, document)


__all__ = ["WishlistItem"]
