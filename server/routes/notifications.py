"""Notification routes."""

from __future__ import annotations

from dataclasses import asdict

from fastapi import APIRouter

from logic.validation import NotificationCreateRequest
from server.dependencies import Container, CurrentUser, IdPath

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.post("", status_code=201)
def create_notification(
    request: NotificationCreateRequest, container: Container, actor_id: CurrentUser
) -> dict:
    notification = container.notifications.create(
        author_id=actor_id,
        user_id=request.user_id,
        type=request.type,
        message=request.message,
        related_id=request.related_id,
    )
    return {"message": "Notification created successfully", "notification": asdict(notification)}


@router.get("/user/{user_id}")
def list_notifications(user_id: IdPath, container: Container) -> list:
    return [asdict(n) for n in container.notifications.list_for_user(user_id)]


@router.get("/{notification_id}")
def get_notification(notification_id: IdPath, container: Container) -> dict:
    return asdict(container.notifications.get(notification_id))


@router.put("/{notification_id}/read")
def mark_notification_as_read(
    notification_id: IdPath, container: Container, actor_id: CurrentUser
) -> dict:
    notification = container.notifications.mark_as_read(notification_id, actor_id)
    return {"message": "Notification marked as read", "notification": asdict(notification)}


@router.delete("/{notification_id}")
def delete_notification(
    notification_id: IdPath, container: Container, actor_id: CurrentUser
) -> dict:
    container.notifications.delete(notification_id, actor_id)
    return {"message": "Notification deleted successfully"}
