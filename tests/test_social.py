"""Follow and unfollow invariants."""

from __future__ import annotations

import pytest

from logic.errors import Conflict, NotFound
from tools.document_store import new_object_id
from vesture_app.app import VestureApp


@pytest.fixture()
def pair(container: VestureApp):
    ana, _ = container.users.register("ana", "ana@example.com", "secret123")
    ben, _ = container.users.register("ben", "ben@example.com", "secret123")
    return ana, ben


def test_follow_updates_both_sides_and_notifies(container: VestureApp, pair) -> None:
    ana, ben = pair
    actor, target = container.social.follow(ana.id, ben.id)

    assert actor.following == [ben.id] and actor.following_count == 1
    assert target.followers == [ana.id] and target.follower_count == 1

    notifications = container.notifications.list_for_user(ben.id)
    assert [n.type for n in notifications] == ["follow"]
    assert notifications[0].related_id == ana.id


def test_duplicate_follow_and_self_follow_are_conflicts(container: VestureApp, pair) -> None:
    ana, ben = pair
    container.social.follow(ana.id, ben.id)

    with pytest.raises(Conflict, match="already follow"):
        container.social.follow(ana.id, ben.id)
    with pytest.raises(Conflict, match="cannot follow yourself"):
        container.social.follow(ana.id, ana.id)

    assert container.users.get(ana.id).following_count == 1
    assert container.users.get(ben.id).follower_count == 1


def test_unfollow_restores_counts(container: VestureApp, pair) -> None:
    ana, ben = pair
    container.social.follow(ana.id, ben.id)
    actor, target = container.social.unfollow(ana.id, ben.id)

    assert actor.following == [] and actor.following_count == 0
    assert target.followers == [] and target.follower_count == 0

    with pytest.raises(Conflict):
        container.social.unfollow(ana.id, ben.id)
    with pytest.raises(Conflict, match="cannot unfollow yourself"):
        container.social.unfollow(ana.id, ana.id)


def test_follow_unknown_user_is_not_found(container: VestureApp, pair) -> None:
    ana, _ = pair
    with pytest.raises(NotFound):
        container.social.follow(ana.id, new_object_id())


def test_deleting_a_user_detaches_follow_edges(container: VestureApp, pair) -> None:
    ana, ben = pair
    container.social.follow(ana.id, ben.id)
    container.users.delete(ben.id)

    refreshed = container.users.get(ana.id)
    assert refreshed.following == []
    assert refreshed.following_count == 0


def test_follow_routes(client, register) -> None:
    ana = register("ana")
    ben = register("ben")

    response = client.post(f"/api/users/{ben['id']}/follow", headers=ana["headers"])
    assert response.status_code == 200
    assert response.json()["follower_count"] == 1

    again = client.post(f"/api/users/{ben['id']}/follow", headers=ana["headers"])
    assert again.status_code == 400
    assert again.json() == {"message": "You already follow this user"}

    self_follow = client.post(f"/api/users/{ana['id']}/follow", headers=ana["headers"])
    assert self_follow.status_code == 400

    unfollow = client.post(f"/api/users/{ben['id']}/unfollow", headers=ana["headers"])
    assert unfollow.json()["following_count"] == 0
