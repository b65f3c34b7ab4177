"""Wishlist routes."""

from __future__ import annotations

from dataclasses import asdict

from fastapi import APIRouter

from logic.validation import WishlistItemCreateRequest
from server.dependencies import Container, CurrentUser, IdPath

router = APIRouter(prefix="/wishlist-items", tags=["wishlist-items"])


@router.post("", status_code=201)
def create_wishlist_item(
    request: WishlistItemCreateRequest, container: Container, actor_id: CurrentUser
) -> dict:
    item = container.wishlist_items.create(actor_id, request.product_id)
    return {"message": "Wishlist item added successfully", "wishlist_item": asdict(item)}


@router.get("/user/{user_id}")
def list_wishlist_items(user_id: IdPath, container: Container) -> list:
    return container.wishlist_items.list_for_user(user_id)


@router.get("/{item_id}")
def get_wishlist_item(item_id: IdPath, container: Container) -> dict:
    return container.wishlist_items.get(item_id)


@router.delete("/{item_id}")
def delete_wishlist_item(item_id: IdPath, container: Container, actor_id: CurrentUser) -> dict:
    container.wishlist_items.delete(item_id, actor_id)
    return {"message": "Wishlist item deleted successfully"}
