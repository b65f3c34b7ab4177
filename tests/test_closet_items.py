"""Closet item creation precedence and filtering."""

from __future__ import annotations

import pytest

from logic.errors import Forbidden, NotFound, ValidationFailed
from services.closet_item_service import merge_with_product
from tools.document_store import new_object_id
from vesture_app.app import VestureApp


@pytest.fixture()
def owner(container: VestureApp):
    user, _ = container.users.register("ana", "ana@example.com", "secret123")
    return user


def test_merge_prefers_product_fields() -> None:
    merged = merge_with_product(
        {"type": "shirt", "color": "red", "season": "summer", "occasion": "casual", "name": "Mine", "custom_image": "mine.jpg"},
        {"type": "jacket", "color": "black", "name": "Biker", "image": "product.jpg", "season": None},
    )
    assert merged == {
        "type": "jacket",
        "color": "black",
        "season": "summer",
        "occasion": "casual",
        "name": "Biker",
        "custom_image": "product.jpg",
    }


def test_create_from_product(container: VestureApp, owner) -> None:
    product = container.products.create(
        {"brand": "Acme", "name": "Biker", "type": "jacket", "color": "black", "price": 120, "link": "l", "image": "p.jpg"}
    )
    item = container.closet_items.create(
        owner.id,
        {"product_id": product.id, "type": "shirt", "season": "autumn", "occasion": "night"},
    )
    assert (item.type, item.color, item.name, item.custom_image) == ("jacket", "black", "Biker", "p.jpg")
    assert (item.season, item.occasion) == ("autumn", "night")


def test_create_validation_rules(container: VestureApp, owner) -> None:
    with pytest.raises(ValidationFailed, match="Name is required"):
        container.closet_items.create(owner.id, {"type": "shirt", "color": "red", "season": "s", "occasion": "o"})
    with pytest.raises(ValidationFailed, match="color"):
        container.closet_items.create(owner.id, {"name": "Tee", "type": "shirt", "season": "s", "occasion": "o"})
    with pytest.raises(ValidationFailed, match="Season and occasion"):
        container.closet_items.create(owner.id, {"name": "Tee", "type": "shirt", "color": "red"})
    with pytest.raises(NotFound, match="Product"):
        container.closet_items.create(
            owner.id, {"product_id": new_object_id(), "season": "s", "occasion": "o"}
        )


def test_list_filters(container: VestureApp, owner) -> None:
    base = {"season": "summer", "occasion": "casual"}
    tee = container.closet_items.create(owner.id, {**base, "name": "White Tee", "type": "tee", "color": "white", "tags": ["basics"]})
    container.closet_items.create(owner.id, {**base, "name": "Black Jeans", "type": "jeans", "color": "black"})

    assert [i.id for i in container.closet_items.list_for_user(owner.id, name="tee")] == [tee.id]
    assert [i.id for i in container.closet_items.list_for_user(owner.id, color="WHITE")] == [tee.id]
    assert [i.id for i in container.closet_items.list_for_user(owner.id, tags="basics,other")] == [tee.id]
    assert len(container.closet_items.list_for_user(owner.id, season="summer")) == 2
    assert container.closet_items.list_for_user(new_object_id()) == []


def test_owner_only_update_and_delete(container: VestureApp, owner) -> None:
    other, _ = container.users.register("ben", "ben@example.com", "secret123")
    item = container.closet_items.create(
        owner.id, {"name": "Tee", "type": "tee", "color": "white", "season": "summer", "occasion": "casual"}
    )
    with pytest.raises(Forbidden):
        container.closet_items.update(item.id, other.id, {"color": "red"})

    updated = container.closet_items.update(item.id, owner.id, {"color": "Red"})
    assert updated.color == "red"

    container.closet_items.delete(item.id, owner.id)
    with pytest.raises(NotFound):
        container.closet_items.get(item.id)


def test_closet_routes(client, register) -> None:
    ana = register("ana")
    created = client.post(
        "/api/closet-items",
        json={"name": "Tee", "type": "tee", "color": "white", "season": "summer", "occasion": "casual"},
        headers=ana["headers"],
    )
    assert created.status_code == 201
    item_id = created.json()["closet_item"]["id"]

    missing_season = client.post(
        "/api/closet-items", json={"name": "Tee", "type": "tee", "color": "white"}, headers=ana["headers"]
    )
    assert missing_season.status_code == 400

    listed = client.get(f"/api/closet-items/user/{ana['id']}", params={"type": "tee"})
    assert [item["id"] for item in listed.json()] == [item_id]
    assert client.get(f"/api/closet-items/{item_id}").json()["name"] == "Tee"
