"""Closet item service: a user's garments, optionally linked to catalog products."""

from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict, List, Mapping, Optional

from logic.errors import Forbidden, NotFound, ValidationFailed
from models.closet_item import ClosetItem
from models.taxonomy import normalise_tags
from tools.document_store import DocumentStore, new_object_id
from tools.observability import instrument_service

COLLECTION = "closet_items"
PRODUCT_FIRST_FIELDS = ("type", "color", "season", "occasion", "name")


def merge_with_product(request: Mapping[str, Any], product: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """Resolve closet item fields, preferring the linked product's values.

    ``custom_image`` falls back from the product ``image`` to the request.
    """

    merged = {key: request.get(key) for key in PRODUCT_FIRST_FIELDS}
    merged["custom_image"] = request.get("custom_image")
    if product is None:
        return merged
    for key in PRODUCT_FIRST_FIELDS:
        if product.get(key):
            merged[key] = product[key]
    if product.get("image"):
        merged["custom_image"] = product["image"]
    return merged


class ClosetItemService:
    def __init__(self, store: DocumentStore) -> None:
        self.store = store

    @instrument_service("closet_items.create", "Failed to create closet item")
    def create(self, user_id: str, payload: Mapping[str, Any]) -> ClosetItem:
        if not payload.get("season") or not payload.get("occasion"):
            raise ValidationFailed("Season and occasion are required")

        product_id = payload.get("product_id")
        product = None
        if product_id:
            product = self.store.get("products", product_id)
            if product is None:
                raise NotFound("Product not found")
        elif not payload.get("name"):
            raise ValidationFailed("Name is required when no product is linked")

        fields = merge_with_product(payload, product)
        missing = [key for key in ("type", "color") if not fields.get(key)]
        if missing:
            raise ValidationFailed(f"Missing required fields: {', '.join(missing)}")

        if self.store.get("users", user_id) is None:
            raise NotFound("User not found")

        item = ClosetItem(
            id=new_object_id(),
            user_id=user_id,
            product_id=product_id,
            tags=list(payload.get("tags") or []),
            **fields,
        )
        self.store.insert(COLLECTION, asdict(item))
        return item

    @instrument_service("closet_items.list_for_user", "Failed to retrieve closet items")
    def list_for_user(
        self,
        user_id: str,
        name: Optional[str] = None,
        type: Optional[str] = None,
        season: Optional[str] = None,
        occasion: Optional[str] = None,
        color: Optional[str] = None,
        tags: Optional[str] = None,
    ) -> List[ClosetItem]:
        exact = {
            key: value.strip().lower()
            for key, value in (("type", type), ("season", season), ("occasion", occasion), ("color", color))
            if value
        }
        wanted_tags = normalise_tags(part for part in (tags or "").split(",") if part.strip())
        needle = (name or "").strip().lower()

        def predicate(document: Dict[str, Any]) -> bool:
            if needle and needle not in str(document.get("name") or "").lower():
                return False
            if wanted_tags and not set(wanted_tags) & set(document.get("tags", [])):
                return False
            return True

        documents = self.store.find(
            COLLECTION, {"user_id": user_id, **exact}, predicate=predicate
        )
        return [ClosetItem.from_document(doc) for doc in documents]

    @instrument_service("closet_items.get", "Failed to retrieve closet item")
    def get(self, item_id: str) -> ClosetItem:
        document = self.store.get(COLLECTION, item_id)
        if document is None:
            raise NotFound("Closet item not found")
        return ClosetItem.from_document(document)

    @instrument_service("closet_items.update", "Failed to update closet item")
    def update(self, item_id: str, actor_id: str, changes: Mapping[str, Any]) -> ClosetItem:
        with self.store.transaction():
            current = self._require_owned(item_id, actor_id)
            provided = {key: value for key, value in changes.items() if value is not None}
            merged = ClosetItem.from_document({**asdict(current), **provided, "id": item_id})
            document = self.store.update(COLLECTION, item_id, asdict(merged))
        return ClosetItem.from_document(document)

    @instrument_service("closet_items.delete", "Failed to delete closet item")
    def delete(self, item_id: str, actor_id: str) -> ClosetItem:
        with self.store.transaction():
            item = self._require_owned(item_id, actor_id)
            self.store.delete(COLLECTION, item_id)
        return item

    def _require_owned(self, item_id: str, actor_id: str) -> ClosetItem:
        item = self.get(item_id)
        if item.user_id != actor_id:
            raise Forbidden("You can only modify your own closet items")
        return item


__all__ = ["ClosetItemService", "merge_with_product"]
