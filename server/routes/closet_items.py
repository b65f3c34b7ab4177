"""Closet item routes."""

from __future__ import annotations

from dataclasses import asdict
from typing import Optional

from fastapi import APIRouter

from logic.validation import ClosetItemCreateRequest, ClosetItemUpdateRequest
from server.dependencies import Container, CurrentUser, IdPath

router = APIRouter(prefix="/closet-items", tags=["closet-items"])


@router.post("", status_code=201)
def create_closet_item(
    request: ClosetItemCreateRequest, container: Container, actor_id: CurrentUser
) -> dict:
    item = container.closet_items.create(actor_id, request.model_dump())
    return {"message": "Closet item created successfully", "closet_item": asdict(item)}


@router.get("/user/{user_id}")
def list_closet_items(
    user_id: IdPath,
    container: Container,
    name: Optional[str] = None,
    type: Optional[str] = None,
    season: Optional[str] = None,
    occasion: Optional[str] = None,
    color: Optional[str] = None,
    tags: Optional[str] = None,
) -> list:
    items = container.closet_items.list_for_user(
        user_id,
        name=name,
        type=type,
        season=season,
        occasion=occasion,
        color=color,
        tags=tags,
    )
    return [asdict(item) for item in items]


@router.get("/{item_id}")
def get_closet_item(item_id: IdPath, container: Container) -> dict:
    return asdict(container.closet_items.get(item_id))


@router.put("/{item_id}")
def update_closet_item(
    item_id: IdPath,
    request: ClosetItemUpdateRequest,
    container: Container,
    actor_id: CurrentUser,
) -> dict:
    item = container.closet_items.update(item_id, actor_id, request.changes())
    return {"message": "Closet item updated successfully", "closet_item": asdict(item)}


@router.delete("/{item_id}")
def delete_closet_item(item_id: IdPath, container: Container, actor_id: CurrentUser) -> dict:
    container.closet_items.delete(item_id, actor_id)
    return {"message": "Closet item deleted successfully"}
