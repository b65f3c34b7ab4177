"""Post lifecycle, interactions and the notifications they produce."""

from __future__ import annotations

import pytest

from logic.errors import Forbidden, NotFound
from tools.document_store import new_object_id
from vesture_app.app import VestureApp


@pytest.fixture()
def setup(container: VestureApp):
    owner, _ = container.users.register("owner", "owner@example.com", "secret123")
    fan, _ = container.users.register("fan", "fan@example.com", "secret123")
    post, _ = container.ootd_posts.create(owner.id, image_url="https://img.example/p.jpg", tags=["#Street"])
    return owner, fan, post


def test_like_is_idempotent_and_notifies_once(container: VestureApp, setup) -> None:
    owner, fan, post = setup

    container.ootd_posts.like(post.id, fan.id)
    liked = container.ootd_posts.like(post.id, fan.id)

    assert liked.likes == [fan.id]
    notifications = container.notifications.list_for_user(owner.id)
    assert [n.type for n in notifications] == ["like"]
    assert notifications[0].related_id == post.id
    assert notifications[0].message == "fan liked your post."


def test_owner_interactions_do_not_notify(container: VestureApp, setup) -> None:
    owner, _, post = setup
    container.ootd_posts.like(post.id, owner.id)
    container.ootd_posts.save(post.id, owner.id)
    container.ootd_posts.comment(post.id, owner.id, "my own fit")

    assert container.notifications.list_for_user(owner.id) == []
    assert container.ootd_posts.counts(post.id) == {"likes_count": 1, "saves_count": 1, "comments_count": 1}


def test_save_unsave_and_comment(container: VestureApp, setup) -> None:
    owner, fan, post = setup

    container.ootd_posts.save(post.id, fan.id)
    container.ootd_posts.save(post.id, fan.id)
    unsaved = container.ootd_posts.unsave(post.id, fan.id)
    assert unsaved.saves == []

    commented = container.ootd_posts.comment(post.id, fan.id, "love it")
    commented = container.ootd_posts.comment(post.id, fan.id, "love it")
    assert [c.text for c in commented.comments] == ["love it", "love it"]
    assert all(c.user_id == fan.id and c.timestamp for c in commented.comments)

    types = sorted(n.type for n in container.notifications.list_for_user(owner.id))
    assert types == ["comment", "comment", "save"]


def test_unknown_post_is_not_found(container: VestureApp, setup) -> None:
    _, fan, _ = setup
    for action in (container.ootd_posts.like, container.ootd_posts.unlike, container.ootd_posts.save):
        with pytest.raises(NotFound):
            action(new_object_id(), fan.id)
    with pytest.raises(NotFound):
        container.ootd_posts.counts(new_object_id())


def test_only_owner_may_update_or_delete(container: VestureApp, setup) -> None:
    owner, fan, post = setup
    with pytest.raises(Forbidden):
        container.ootd_posts.update(post.id, fan.id, {"caption": "mine now"})
    with pytest.raises(Forbidden):
        container.ootd_posts.delete(post.id, fan.id)

    updated = container.ootd_posts.update(post.id, owner.id, {"caption": "Sunday", "tags": None})
    assert updated.caption == "Sunday"
    assert updated.tags == ["street"]

    container.ootd_posts.delete(post.id, owner.id)
    with pytest.raises(NotFound):
        container.ootd_posts.get(post.id)


def test_list_for_user_without_posts_is_not_found(container: VestureApp, setup) -> None:
    owner, fan, post = setup
    assert [p.id for p in container.ootd_posts.list_for_user(owner.id)] == [post.id]
    with pytest.raises(NotFound):
        container.ootd_posts.list_for_user(fan.id)


def test_post_routes_with_tagged_products(client, register) -> None:
    owner = register("owner")
    fan = register("fan")

    created = client.post(
        "/api/ootd-posts",
        json={
            "image_url": "https://img.example/look.jpg",
            "caption": "Look",
            "tags": ["casual"],
            "products": [
                {"brand": "Acme", "name": "Denim Jacket", "type": "jacket", "color": "blue", "price": 80, "link": "https://shop/1"},
                {"brand": "Acme", "name": "Incomplete"},
            ],
        },
        headers=owner["headers"],
    )
    assert created.status_code == 201
    body = created.json()
    post_id = body["ootd_post"]["id"]
    assert body["ootd_post"]["user_id"] == owner["id"]
    assert [p["name"] for p in body["products"]] == ["Denim Jacket"]
    assert body["products"][0]["source"] == "UserCreated"
    assert body["products"][0]["image"] == "https://img.example/look.jpg"

    liked = client.post(f"/api/ootd-posts/{post_id}/like", headers=fan["headers"])
    assert liked.json() == {"message": "Post liked successfully", "likes_count": 1}

    comment = client.post(f"/api/ootd-posts/{post_id}/comment", json={"text": "nice"}, headers=fan["headers"])
    assert comment.json()["comments"][0]["text"] == "nice"

    counts = client.get(f"/api/ootd-posts/{post_id}/counts").json()
    assert counts == {"likes_count": 1, "saves_count": 0, "comments_count": 1}

    assert client.get(f"/api/ootd-posts/{owner['id']}/posts").status_code == 200
    assert client.get(f"/api/ootd-posts/{fan['id']}/posts").status_code == 404
    assert len(client.get("/api/ootd-posts").json()) == 1

    forbidden = client.delete(f"/api/ootd-posts/{post_id}", headers=fan["headers"])
    assert forbidden.status_code == 403


def test_tagging_a_post_leaves_existing_catalog_product_unchanged(container: VestureApp, setup) -> None:
    owner, _, _ = setup
    catalog = container.products.create(
        {
            "brand": "Acme",
            "name": "Biker",
            "type": "jacket",
            "color": "black",
            "price": 120.0,
            "link": "https://shop.example/biker",
            "image": "https://img.example/official.jpg",
        }
    )

    _, tagged = container.ootd_posts.create(
        owner.id,
        image_url="https://img.example/selfie.jpg",
        products=[
            {"brand": "acme", "name": "biker", "type": "jeans", "color": "red", "price": 1, "link": "https://x"}
        ],
    )

    stored = container.products.get(catalog.id)
    assert [product.id for product in tagged] == [catalog.id]
    assert (stored.type, stored.color, stored.price) == ("jacket", "black", 120.0)
    assert stored.image == "https://img.example/official.jpg"
    assert stored.source == "UserUploaded"


def test_products_created_from_a_post_carry_its_tags(container: VestureApp, setup) -> None:
    owner, _, _ = setup
    post, created = container.ootd_posts.create(
        owner.id,
        image_url="https://img.example/look.jpg",
        tags=["#Street", "Summer Look"],
        products=[
            {"brand": "Acme", "name": "Tee", "type": "shirt", "color": "white", "price": 15, "link": "https://shop/tee"}
        ],
    )

    assert created[0].tags == ["street", "summer_look"]
    assert container.products.get(created[0].id).tags == post.tags
