"""Follow relationships between users."""

from __future__ import annotations

import logging
from typing import Any, Dict, Tuple

from logic.errors import Conflict, NotFound
from models.user import User
from services.notification_service import NotificationService
from tools.document_store import DocumentStore
from tools.observability import instrument_service

LOGGER = logging.getLogger(__name__)
COLLECTION = "users"


class SocialService:
    """Maintains the mirrored ``following``/``followers`` lists and their counters.

    Both sides of a relationship are written in one store transaction so a
    failure can never leave only half of the edge recorded.
    """

    def __init__(self, store: DocumentStore, notifications: NotificationService) -> None:
        self.store = store
        self.notifications = notifications

    @instrument_service("social.follow", "Failed to follow user")
    def follow(self, actor_id: str, target_id: str) -> Tuple[User, User]:
        if actor_id == target_id:
            raise Conflict("You cannot follow yourself")
        with self.store.transaction():
            actor, target = self._load_pair(actor_id, target_id)
            if target_id in actor.following:
                raise Conflict("You already follow this user")

            def add_following(document: Dict[str, Any]) -> None:
                following = document.setdefault("following", [])
                following.append(target_id)
                document["following_count"] = len(following)

            def add_follower(document: Dict[str, Any]) -> None:
                followers = document.setdefault("followers", [])
                if actor_id not in followers:
                    followers.append(actor_id)
                document["follower_count"] = len(followers)

            actor_doc = self.store.modify(COLLECTION, actor_id, add_following)
            target_doc = self.store.modify(COLLECTION, target_id, add_follower)
            self.notifications.notify(
                target_id,
                actor_id,
                "follow",
                f"{actor.username} started following you.",
                related_id=actor_id,
            )
        LOGGER.info("Follow recorded", extra={"actor_id": actor_id, "target_id": target_id})
        return User.from_document(actor_doc), User.from_document(target_doc)

    @instrument_service("social.unfollow", "Failed to unfollow user")
    def unfollow(self, actor_id: str, target_id: str) -> Tuple[User, User]:
        if actor_id == target_id:
            raise Conflict("You cannot unfollow yourself")
        with self.store.transaction():
            actor, _ = self._load_pair(actor_id, target_id)
            if target_id not in actor.following:
                raise Conflict("You do not follow this user")

            def drop_following(document: Dict[str, Any]) -> None:
                document["following"] = [i for i in document.get("following", []) if i != target_id]
                document["following_count"] = len(document["following"])

            def drop_follower(document: Dict[str, Any]) -> None:
                document["followers"] = [i for i in document.get("followers", []) if i != actor_id]
                document["follower_count"] = len(document["followers"])

            actor_doc = self.store.modify(COLLECTION, actor_id, drop_following)
            target_doc = self.store.modify(COLLECTION, target_id, drop_follower)
        LOGGER.info("Unfollow recorded", extra={"actor_id": actor_id, "target_id": target_id})
        return User.from_document(actor_doc), User.from_document(target_doc)

    def _load_pair(self, actor_id: str, target_id: str) -> Tuple[User, User]:
        actor = self.store.get(COLLECTION, actor_id)
        target = self.store.get(COLLECTION, target_id)
        if actor is None or target is None:
            raise NotFound("User not found")
        return User.from_document(actor), User.from_document(target)


__all__ = ["SocialService"]
