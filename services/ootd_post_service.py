"""Outfit-of-the-day posts and the interactions on them."""

from __future__ import annotations

import logging
from dataclasses import asdict
from typing import Any, Dict, List, Mapping, Optional, Tuple

from logic.errors import Forbidden, NotFound
from models.ootd_post import Comment, OOTDPost
from models.product import Product
from services.notification_service import NotificationService
from services.product_service import ProductService
from tools.document_store import DocumentStore, new_object_id
from tools.observability import instrument_service

LOGGER = logging.getLogger(__name__)
COLLECTION = "ootd_posts"
PRODUCT_ENTRY_FIELDS = ("brand", "name", "type", "color", "price", "link")
REQUIRED_PRODUCT_FIELDS = ("brand", "type", "color", "price", "link")


class OOTDPostService:
    """Posts plus like, save and comment interactions.

    Every interaction that changes a post and notifies its owner runs inside
    a single store transaction.
    """

    def __init__(
        self,
        store: DocumentStore,
        products: ProductService,
        notifications: NotificationService,
    ) -> None:
        self.store = store
        self.products = products
        self.notifications = notifications

    @instrument_service("ootd_posts.create", "Failed to create post")
    def create(
        self,
        user_id: str,
        image_url: str,
        caption: str = "",
        tags: Optional[List[str]] = None,
        mentions: Optional[List[str]] = None,
        location: Optional[str] = None,
        products: Optional[List[Mapping[str, Any]]] = None,
    ) -> Tuple[OOTDPost, List[Product]]:
        """Create a post and upsert the catalog products tagged on it."""

        if self.store.get("users", user_id) is None:
            raise NotFound("User not found")
        post = OOTDPost(
            id=new_object_id(),
            user_id=user_id,
            image_url=image_url,
            caption=caption,
            tags=tags or [],
            mentions=mentions or [],
            location=location,
        )
        created_products: List[Product] = []
        with self.store.transaction():
            self.store.insert(COLLECTION, asdict(post))
            for entry in products or []:
                if any(entry.get(key) in (None, "") for key in REQUIRED_PRODUCT_FIELDS):
                    continue
                candidate = {key: entry.get(key) for key in PRODUCT_ENTRY_FIELDS}
                candidate["image"] = image_url
                candidate["tags"] = post.tags
                # tagging never rewrites a product already in the catalog
                product, _ = self.products.upsert(candidate, source="UserCreated", refresh=False)
                created_products.append(product)
        return post, created_products

    @instrument_service("ootd_posts.list", "Failed to retrieve posts")
    def list_posts(self) -> List[OOTDPost]:
        return self._newest_first(self.store.find(COLLECTION))

    @instrument_service("ootd_posts.list_for_user", "Failed to retrieve posts")
    def list_for_user(self, user_id: str) -> List[OOTDPost]:
        posts = self._newest_first(self.store.find(COLLECTION, {"user_id": user_id}))
        if not posts:
            raise NotFound("No posts found for this user")
        return posts

    @instrument_service("ootd_posts.get", "Failed to retrieve post")
    def get(self, post_id: str) -> OOTDPost:
        return self._require(post_id)

    @instrument_service("ootd_posts.update", "Failed to update post")
    def update(self, post_id: str, actor_id: str, changes: Mapping[str, Any]) -> OOTDPost:
        with self.store.transaction():
            current = self._require_owned(post_id, actor_id)
            provided = {key: value for key, value in changes.items() if value is not None}
            merged = OOTDPost.from_document({**asdict(current), **provided, "id": post_id})
            document = self.store.update(COLLECTION, post_id, asdict(merged))
        return OOTDPost.from_document(document)

    @instrument_service("ootd_posts.delete", "Failed to delete post")
    def delete(self, post_id: str, actor_id: str) -> OOTDPost:
        with self.store.transaction():
            post = self._require_owned(post_id, actor_id)
            self.store.delete(COLLECTION, post_id)
        return post

    @instrument_service("ootd_posts.like", "Failed to like post")
    def like(self, post_id: str, actor_id: str) -> OOTDPost:
        return self._add_reaction(post_id, actor_id, "likes", "like", "liked your post.")

    @instrument_service("ootd_posts.unlike", "Failed to unlike post")
    def unlike(self, post_id: str, actor_id: str) -> OOTDPost:
        return self._remove_reaction(post_id, actor_id, "likes")

    @instrument_service("ootd_posts.save", "Failed to save post")
    def save(self, post_id: str, actor_id: str) -> OOTDPost:
        return self._add_reaction(post_id, actor_id, "saves", "save", "saved your post.")

    @instrument_service("ootd_posts.unsave", "Failed to unsave post")
    def unsave(self, post_id: str, actor_id: str) -> OOTDPost:
        return self._remove_reaction(post_id, actor_id, "saves")

    @instrument_service("ootd_posts.comment", "Failed to add comment")
    def comment(self, post_id: str, actor_id: str, text: str) -> OOTDPost:
        comment = Comment(user_id=actor_id, text=text)
        with self.store.transaction():
            post = self._require(post_id)
            actor_name = self._actor_name(actor_id)
            document = self.store.push(COLLECTION, post_id, "comments", asdict(comment))
            self.notifications.notify(
                post.user_id,
                actor_id,
                "comment",
                f'{actor_name} commented on your post: "{text}"',
                related_id=post_id,
            )
        return OOTDPost.from_document(document)

    @instrument_service("ootd_posts.counts", "Failed to retrieve post counts")
    def counts(self, post_id: str) -> Dict[str, int]:
        return self._require(post_id).counts()

    def _add_reaction(
        self, post_id: str, actor_id: str, field: str, notification_type: str, verb: str
    ) -> OOTDPost:
        with self.store.transaction():
            post = self._require(post_id)
            if actor_id in getattr(post, field):
                # already reacted: no state change and no notification
                return post
            actor_name = self._actor_name(actor_id)
            document = self.store.add_to_set(COLLECTION, post_id, field, actor_id)
            self.notifications.notify(
                post.user_id, actor_id, notification_type, f"{actor_name} {verb}", related_id=post_id
            )
        return OOTDPost.from_document(document)

    def _remove_reaction(self, post_id: str, actor_id: str, field: str) -> OOTDPost:
        document = self.store.pull(COLLECTION, post_id, field, actor_id)
        if document is None:
            raise NotFound("OOTD post not found")
        return OOTDPost.from_document(document)

    def _actor_name(self, actor_id: str) -> str:
        actor = self.store.get("users", actor_id)
        if actor is None:
            raise NotFound("User not found")
        return actor["username"]

    def _require(self, post_id: str) -> OOTDPost:
        document = self.store.get(COLLECTION, post_id)
        if document is None:
            raise NotFound("OOTD post not found")
        return OOTDPost.from_document(document)

    def _require_owned(self, post_id: str, actor_id: str) -> OOTDPost:
        post = self._require(post_id)
        if post.user_id != actor_id:
            raise Forbidden("You can only modify your own posts")
        return post

    @staticmethod
    def _newest_first(documents: List[Dict[str, Any]]) -> List[OOTDPost]:
        documents.reverse()
        documents.sort(key=lambda doc: doc.get("timestamp", ""), reverse=True)
        return [OOTDPost.from_document(doc) for doc in documents]


__all__ = ["OOTDPostService"]
