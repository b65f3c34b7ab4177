"""Closet item data model."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from models.common import build_from_document, ensure_list, utc_now
from models.taxonomy import normalise_tags


@dataclass
class ClosetItem:
    """A garment a user owns, optionally derived from a catalog product."""

    id: str
    user_id: str
    type: str
    color: str
    season: str
    occasion: str
    product_id: Optional[str] = None
    name: Optional[str] = None
    tags: List[str] = field(default_factory=list)
    custom_image: Optional[str] = None
    added_at: str = field(default_factory=utc_now)

    def __post_init__(self) -> None:
        self.type = self.type.strip().lower()
        self.color = self.color.strip().lower()
        self.season = self.season.strip().lower()
        self.occasion = self.occasion.strip().lower()
        self.tags = normalise_tags(ensure_list(self.tags))

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "ClosetItem":
        return build_from_document(cls, document)


__all__ = ["ClosetItem"]
