"""Notification persistence and delivery."""

from __future__ import annotations

import logging
from dataclasses import asdict
from typing import List, Optional

from logic.errors import Forbidden, NotFound, ValidationFailed
from models.notification import Notification
from tools.document_store import DocumentStore, new_object_id
from tools.observability import instrument_service

LOGGER = logging.getLogger(__name__)
COLLECTION = "notifications"


class NotificationService:
    """Create and manage notifications addressed to a single recipient."""

    def __init__(self, store: DocumentStore) -> None:
        self.store = store

    def notify(
        self,
        recipient_id: str,
        actor_id: str,
        type: str,
        message: str,
        related_id: Optional[str] = None,
    ) -> Optional[Notification]:
        """Record a notification unless the actor is also the recipient.

        Joins the caller's store transaction when one is active.
        """

        if recipient_id == actor_id:
            return None
        return self._insert(recipient_id, type, message, related_id)

    def _insert(
        self, recipient_id: str, type: str, message: str, related_id: Optional[str]
    ) -> Notification:
        notification = Notification(
            id=new_object_id(),
            user_id=recipient_id,
            type=type,
            message=message,
            related_id=related_id,
        )
        self.store.insert(COLLECTION, asdict(notification))
        LOGGER.debug("Notification queued", extra={"notification_type": notification.type})
        return notification

    @instrument_service("notifications.create", "Failed to create notification")
    def create(
        self,
        author_id: str,
        user_id: str,
        type: str,
        message: str,
        related_id: Optional[str] = None,
    ) -> Notification:
        if user_id == author_id:
            raise ValidationFailed("Notifications cannot target their author")
        if self.store.get("users", user_id) is None:
            raise NotFound("User not found")
        return self._insert(user_id, type, message, related_id)

    @instrument_service("notifications.list_for_user", "Failed to retrieve notifications")
    def list_for_user(self, user_id: str) -> List[Notification]:
        documents = self.store.find(COLLECTION, {"user_id": user_id})
        # newest first; insertion order breaks timestamp ties
        documents.reverse()
        documents.sort(key=lambda doc: doc.get("timestamp", ""), reverse=True)
        return [Notification.from_document(doc) for doc in documents]

    @instrument_service("notifications.get", "Failed to retrieve notification")
    def get(self, notification_id: str) -> Notification:
        document = self.store.get(COLLECTION, notification_id)
        if document is None:
            raise NotFound("Notification not found")
        return Notification.from_document(document)

    @instrument_service("notifications.mark_as_read", "Failed to update notification")
    def mark_as_read(self, notification_id: str, actor_id: str) -> Notification:
        with self.store.transaction():
            self._require_recipient(notification_id, actor_id)
            document = self.store.update(COLLECTION, notification_id, {"is_read": True})
        return Notification.from_document(document)

    @instrument_service("notifications.delete", "Failed to delete notification")
    def delete(self, notification_id: str, actor_id: str) -> Notification:
        with self.store.transaction():
            self._require_recipient(notification_id, actor_id)
            document = self.store.delete(COLLECTION, notification_id)
        return Notification.from_document(document)

    def _require_recipient(self, notification_id: str, actor_id: str) -> None:
        document = self.store.get(COLLECTION, notification_id)
        if document is None:
            raise NotFound("Notification not found")
        if document["user_id"] != actor_id:
            raise Forbidden("You can only manage your own notifications")


__all__ = ["NotificationService"]
