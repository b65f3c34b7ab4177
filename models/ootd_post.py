"""Outfit-of-the-day post and comment data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from models.common import build_from_document, ensure_list, unique_ids, utc_now
from models.taxonomy import normalise_tags


@dataclass
class Comment:
    """Immutable comment left on a post."""

    user_id: str
    text: str
    timestamp: str = field(default_factory=utc_now)


@dataclass
class OOTDPost:
    """A user's outfit photo with its likes, saves and comments."""

    id: str
    user_id: str
    image_url: str
    caption: str = ""
    tags: List[str] = field(default_factory=list)
    likes: List[str] = field(default_factory=list)
    comments: List[Comment] = field(default_factory=list)
    mentions: List[str] = field(default_factory=list)
    saves: List[str] = field(default_factory=list)
    shares_count: int = 0
    location: Optional[str] = None
    timestamp: str = field(default_factory=utc_now)

    def __post_init__(self) -> None:
        self.caption = self.caption or ""
        self.tags = normalise_tags(ensure_list(self.tags))
        # likes and saves are sets of user ids
        self.likes = unique_ids(self.likes)
        self.saves = unique_ids(self.saves)
        self.mentions = unique_ids(self.mentions)
        self.comments = [
            comment if isinstance(comment, Comment) else Comment(**comment)
            for comment in ensure_list(self.comments)
        ]
        self.shares_count = max(0, int(self.shares_count or 0))

    def counts(self) -> Dict[str, int]:
        return {
            "likes_count": len(self.likes),
            "saves_count": len(self.saves),
            "comments_count": len(self.comments),
        }

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "OOTDPost":
        return build_from_document(cls, document)


__all__ = ["Comment", "OOTDPost"]
