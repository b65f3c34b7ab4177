"""FastAPI dependencies shared by the routers."""

from __future__ import annotations

from typing import Annotated, Optional

from fastapi import Depends, Header, Path, Request

from logic.errors import Forbidden
from logic.validation import OBJECT_ID_PATTERN
from vesture_app.app import VestureApp

IdPath = Annotated[str, Path(pattern=OBJECT_ID_PATTERN)]


def get_container(request: Request) -> VestureApp:
    """Return the application container attached by ``create_app``."""

    return request.app.state.container


def require_user_id(
    container: Annotated[VestureApp, Depends(get_container)],
    authorization: Annotated[Optional[str], Header()] = None,
) -> str:
    """Verify the bearer token and return the authenticated user id."""

    return container.tokens.verify_header(authorization)


Container = Annotated[VestureApp, Depends(get_container)]
CurrentUser = Annotated[str, Depends(require_user_id)]


def ensure_same_user(actor_id: str, user_id: str) -> None:
    if actor_id != user_id:
        raise Forbidden("You can only modify your own account")


__all__ = [
    "Container",
    "CurrentUser",
    "IdPath",
    "ensure_same_user",
    "get_container",
    "require_user_id",
]
