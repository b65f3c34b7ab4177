"""User account and profile data model."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

from models.common import build_from_document, unique_ids, utc_now


def normalise_email(value: str) -> str:
    """Emails are unique case-insensitively, so they are stored lower-cased."""

    return value.strip().lower()


@dataclass
class User:
    """Represents a registered account with its follow graph."""

    id: str
    username: str
    email: str
    password_hash: str
    bio: str = ""
    profile_photo: Optional[str] = None
    website: str = ""
    follower_count: int = 0
    following_count: int = 0
    followers: List[str] = field(default_factory=list)
    following: List[str] = field(default_factory=list)
    created_at: str = field(default_factory=utc_now)
    updated_at: str = field(default_factory=utc_now)

    def __post_init__(self) -> None:
        self.username = self.username.strip()
        if not self.username:
            raise ValueError("username must not be empty")
        self.email = normalise_email(self.email)
        self.bio = self.bio or ""
        self.website = self.website or ""
        self.followers = unique_ids(self.followers)
        self.following = unique_ids(self.following)
        self.follower_count = max(0, int(self.follower_count or 0))
        self.following_count = max(0, int(self.following_count or 0))

    def to_public(self) -> Dict[str, Any]:
        """Serialise without the password hash."""

        payload = asdict(self)
        payload.pop("password_hash", None)
        return payload

    def summary(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "username": self.username,
            "email": self.email,
            "follower_count": self.follower_count,
            "following_count": self.following_count,
        }

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "User":
        return build_from_document(cls, document)


__all__ = ["User", "normalise_email"]
