"""Notification data model."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from models.common import build_from_document, utc_now


@dataclass
class Notification:
    """A message delivered to ``user_id`` about someone else's action."""

    id: str
    user_id: str
    type: str
    message: str
    related_id: Optional[str] = None
    is_read: bool = False
    timestamp: str = field(default_factory=utc_now)

    def __post_init__(self) -> None:
        self.type = self.type.strip().lower()
        if not self.message.strip():
            raise ValueError("notification message must not be empty")

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "Notification":
        return build_from_document(cls, document)


__all__ = ["Notification"]
