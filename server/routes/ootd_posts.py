"""OOTD post routes, including likes, saves and comments."""

from __future__ import annotations

from dataclasses import asdict

from fastapi import APIRouter

from logic.validation import CommentRequest, OOTDPostCreateRequest, OOTDPostUpdateRequest
from server.dependencies import Container, CurrentUser, IdPath

router = APIRouter(prefix="/ootd-posts", tags=["ootd-posts"])


@router.post("", status_code=201)
def create_post(request: OOTDPostCreateRequest, container: Container, actor_id: CurrentUser) -> dict:
    payload = request.model_dump()
    post, products = container.ootd_posts.create(actor_id, **payload)
    return {
        "message": "OOTD post created successfully",
        "ootd_post": asdict(post),
        "products": [asdict(product) for product in products],
    }


@router.get("")
def list_posts(container: Container) -> list:
    return [asdict(post) for post in container.ootd_posts.list_posts()]


@router.get("/{user_id}/posts")
def list_user_posts(user_id: IdPath, container: Container) -> list:
    return [asdict(post) for post in container.ootd_posts.list_for_user(user_id)]


@router.get("/{post_id}")
def get_post(post_id: IdPath, container: Container) -> dict:
    return asdict(container.ootd_posts.get(post_id))


@router.put("/{post_id}")
def update_post(
    post_id: IdPath, request: OOTDPostUpdateRequest, container: Container, actor_id: CurrentUser
) -> dict:
    post = container.ootd_posts.update(post_id, actor_id, request.changes())
    return {"message": "OOTD post updated successfully", "ootd_post": asdict(post)}


@router.delete("/{post_id}")
def delete_post(post_id: IdPath, container: Container, actor_id: CurrentUser) -> dict:
    container.ootd_posts.delete(post_id, actor_id)
    return {"message": "OOTD post deleted successfully"}


@router.post("/{post_id}/like")
def like_post(post_id: IdPath, container: Container, actor_id: CurrentUser) -> dict:
    post = container.ootd_posts.like(post_id, actor_id)
    return {"message": "Post liked successfully", "likes_count": len(post.likes)}


@router.post("/{post_id}/unlike")
def unlike_post(post_id: IdPath, container: Container, actor_id: CurrentUser) -> dict:
    post = container.ootd_posts.unlike(post_id, actor_id)
    return {"message": "Like removed successfully", "likes_count": len(post.likes)}


@router.post("/{post_id}/comment")
def comment_on_post(
    post_id: IdPath, request: CommentRequest, container: Container, actor_id: CurrentUser
) -> dict:
    post = container.ootd_posts.comment(post_id, actor_id, request.text)
    return {
        "message": "Comment added successfully",
        "comments": [asdict(comment) for comment in post.comments],
    }


@router.post("/{post_id}/save")
def save_post(post_id: IdPath, container: Container, actor_id: CurrentUser) -> dict:
    post = container.ootd_posts.save(post_id, actor_id)
    return {"message": "Post saved successfully", "saves_count": len(post.saves)}


@router.post("/{post_id}/unsave")
def unsave_post(post_id: IdPath, container: Container, actor_id: CurrentUser) -> dict:
    post = container.ootd_posts.unsave(post_id, actor_id)
    return {"message": "Post unsaved successfully", "saves_count": len(post.saves)}


@router.get("/{post_id}/counts")
def post_counts(post_id: IdPath, container: Container) -> dict:
    return container.ootd_posts.counts(post_id)
