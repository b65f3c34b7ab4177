"""Wishlist items pointing at catalog products."""

from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict, List

from logic.errors import Forbidden, NotFound
from models.wishlist_item import WishlistItem
from tools.document_store import DocumentStore, new_object_id
from tools.observability import instrument_service

COLLECTION = "wishlist_items"


class WishlistItemService:
    def __init__(self, store: DocumentStore) -> None:
        self.store = store

    def _with_product(self, item: WishlistItem) -> Dict[str, Any]:
        """Serialise an item with its catalog product embedded under ``product``.

        The product is ``None`` when it has since been removed from the catalog.
        """

        payload = asdict(item)
        payload["product"] = self.store.get("products", item.product_id)
        return payload

    @instrument_service("wishlist_items.create", "Failed to add wishlist item")
    def create(self, user_id: str, product_id: str) -> WishlistItem:
        with self.store.transaction():
            if self.store.get("users", user_id) is None:
                raise NotFound("User not found")
            if self.store.get("products", product_id) is None:
                raise NotFound("Product not found")
            item = WishlistItem(id=new_object_id(), user_id=user_id, product_id=product_id)
            self.store.insert(COLLECTION, asdict(item))
        return item

    @instrument_service("wishlist_items.list_for_user", "Failed to retrieve wishlist")
    def list_for_user(self, user_id: str) -> List[Dict[str, Any]]:
        documents = self.store.find(COLLECTION, {"user_id": user_id})
        return [self._with_product(WishlistItem.from_document(doc)) for doc in documents]

    @instrument_service("wishlist_items.get", "Failed to retrieve wishlist item")
    def get(self, item_id: str) -> Dict[str, Any]:
        return self._with_product(self._require(item_id))

    @instrument_service("wishlist_items.delete", "Failed to delete wishlist item")
    def delete(self, item_id: str, actor_id: str) -> WishlistItem:
        with self.store.transaction():
            item = self._require(item_id)
            if item.user_id != actor_id:
                raise Forbidden("You can only modify your own wishlist")
            self.store.delete(COLLECTION, item_id)
        return item

    def _require(self, item_id: str) -> WishlistItem:
        document = self.store.get(COLLECTION, item_id)
        if document is None:
            raise NotFound("Wishlist item not found")
        return WishlistItem.from_document(document)


__all__ = ["WishlistItemService"]
