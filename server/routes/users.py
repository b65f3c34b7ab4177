"""User, authentication, follow and profile routes."""

from __future__ import annotations

from fastapi import APIRouter

from logic.validation import (
    BioRequest,
    LoginRequest,
    ProfileRequest,
    RegisterRequest,
    UserUpdateRequest,
)
from server.dependencies import Container, CurrentUser, IdPath, ensure_same_user

router = APIRouter(prefix="/users", tags=["users"])


@router.post("", status_code=201)
def register(request: RegisterRequest, container: Container) -> dict:
    user, token = container.users.register(
        username=request.username, email=request.email, password=request.password
    )
    return {
        "message": "User created successfully",
        "user": user.to_public(),
        "token": token,
        "user_id": user.id,
    }


@router.post("/login")
def login(request: LoginRequest, container: Container) -> dict:
    user, token = container.users.login(email=request.email, password=request.password)
    return {"message": "Login successful", "token": token, "user_id": user.id}


@router.get("")
def list_users(container: Container) -> list:
    return container.users.list_users()


@router.get("/{user_id}")
def get_user(user_id: IdPath, container: Container) -> dict:
    return container.users.get(user_id).to_public()


@router.put("/{user_id}")
def update_user(
    user_id: IdPath, request: UserUpdateRequest, container: Container, actor_id: CurrentUser
) -> dict:
    ensure_same_user(actor_id, user_id)
    user = container.users.update(user_id, **request.changes())
    return {"message": "User updated successfully", "user": user.to_public()}


@router.delete("/{user_id}")
def delete_user(user_id: IdPath, container: Container, actor_id: CurrentUser) -> dict:
    ensure_same_user(actor_id, user_id)
    container.users.delete(user_id)
    return {"message": "User deleted successfully"}


@router.post("/{user_id}/follow")
def follow_user(user_id: IdPath, container: Container, actor_id: CurrentUser) -> dict:
    actor, target = container.social.follow(actor_id, user_id)
    return {
        "message": "User followed successfully",
        "following_count": actor.following_count,
        "follower_count": target.follower_count,
    }


@router.post("/{user_id}/unfollow")
def unfollow_user(user_id: IdPath, container: Container, actor_id: CurrentUser) -> dict:
    actor, target = container.social.unfollow(actor_id, user_id)
    return {
        "message": "User unfollowed successfully",
        "following_count": actor.following_count,
        "follower_count": target.follower_count,
    }


@router.post("/{user_id}/profile")
def add_profile(
    user_id: IdPath, request: ProfileRequest, container: Container, actor_id: CurrentUser
) -> dict:
    ensure_same_user(actor_id, user_id)
    user = container.users.add_profile(user_id, **request.model_dump())
    return {"message": "Profile information added", "user": user.to_public()}


@router.put("/{user_id}/profile")
def update_profile(
    user_id: IdPath, request: ProfileRequest, container: Container, actor_id: CurrentUser
) -> dict:
    ensure_same_user(actor_id, user_id)
    user = container.users.update_profile(user_id, **request.model_dump())
    return {"message": "Profile information updated", "user": user.to_public()}


@router.delete("/{user_id}/profile")
def remove_profile(user_id: IdPath, container: Container, actor_id: CurrentUser) -> dict:
    ensure_same_user(actor_id, user_id)
    user = container.users.remove_profile(user_id)
    return {"message": "Profile information removed", "user": user.to_public()}


@router.put("/{user_id}/bio")
def update_bio(
    user_id: IdPath, request: BioRequest, container: Container, actor_id: CurrentUser
) -> dict:
    ensure_same_user(actor_id, user_id)
    user = container.users.update_bio(user_id, request.bio)
    return {"message": "Bio updated successfully", "user": user.to_public()}


@router.delete("/{user_id}/profile-photo")
def remove_profile_photo(user_id: IdPath, container: Container, actor_id: CurrentUser) -> dict:
    ensure_same_user(actor_id, user_id)
    user = container.users.remove_profile_photo(user_id)
    return {"message": "Profile photo removed", "user": user.to_public()}
