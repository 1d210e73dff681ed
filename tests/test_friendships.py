import pytest

from models.friendship import FriendshipStatus, can_transition


def _request(sender, identifier):
    return sender.post("/api/friendships", json={"identifier": identifier})


def test_recipient_accepts_and_requester_cannot(make_user):
    alice = make_user("alice")
    bob = make_user("bob")

    res = _request(alice, "bob")
    assert res.status_code == 201
    friendship_id = res.json()["friendship"]["id"]
    assert res.json()["friendship"]["status"] == "PENDING"

    assert alice.post(f"/api/friendships/{friendship_id}/accept").status_code == 403

    res = bob.patch(f"/api/friendships/{friendship_id}/accept")
    assert res.status_code == 200
    assert res.json()["friendship"]["status"] == "ACCEPTED"

    friends = alice.get("/api/friendships", params={"status": "ACCEPTED"}).json()["friends"]
    assert [f["username"] for f in friends] == ["bob"]
    friends = bob.get("/api/friendships").json()["friends"]
    assert [f["username"] for f in friends] == ["alice"]


def test_answered_request_cannot_be_answered_again(make_user):
    alice = make_user("alice")
    bob = make_user("bob")
    friendship_id = _request(alice, "bob").json()["friendship"]["id"]

    assert bob.post(f"/api/friendships/{friendship_id}/reject").status_code == 200
    assert bob.post(f"/api/friendships/{friendship_id}/accept").status_code == 400


def test_duplicate_request_in_either_direction(make_user):
    alice = make_user("alice")
    bob = make_user("bob")
    _request(alice, "bob")

    res = _request(alice, "bob@example.com")
    assert res.status_code == 400
    assert res.json()["error"] == "Friendship or request already exists"
    assert _request(bob, "alice").status_code == 400


def test_request_errors(make_user):
    alice = make_user("alice")
    assert alice.post("/api/friendships", json={}).status_code == 400
    assert _request(alice, "ghost").status_code == 404
    assert _request(alice, "Alice").status_code == 400


def test_request_accepts_legacy_fields(make_user):
    alice = make_user("alice")
    make_user("bob")
    res = alice.post("/api/friendships", json={"friendEmail": "bob@example.com"})
    assert res.status_code == 201


def test_pending_lists_incoming_only(make_user):
    alice = make_user("alice")
    bob = make_user("bob")
    _request(alice, "bob")

    body = bob.get("/api/friendships/pending").json()
    assert body["total"] == 1
    assert body["requests"][0]["from"]["username"] == "alice"
    assert alice.get("/api/friendships/pending").json()["total"] == 0

    assert alice.get("/api/friendships", params={"sent": "true"}).json()["total"] == 1
    assert bob.get("/api/friendships", params={"sent": "true"}).json()["total"] == 0


def test_invalid_status_filter(make_user):
    alice = make_user("alice")
    assert alice.get("/api/friendships", params={"status": "FOO"}).status_code == 400


def test_block_transitions(make_user):
    alice = make_user("alice")
    bob = make_user("bob")
    carol = make_user("carol")
    friendship_id = _request(alice, "bob").json()["friendship"]["id"]
    bob.post(f"/api/friendships/{friendship_id}/accept")

    assert carol.post(f"/api/friendships/{friendship_id}/block").status_code == 403
    res = alice.post(f"/api/friendships/{friendship_id}/block")
    assert res.status_code == 200
    assert res.json()["friendship"]["status"] == "BLOCKED"
    assert bob.post(f"/api/friendships/{friendship_id}/block").status_code == 400


def test_get_and_delete_friendship(make_user):
    alice = make_user("alice")
    bob = make_user("bob")
    carol = make_user("carol")
    friendship_id = _request(alice, "bob").json()["friendship"]["id"]

    assert bob.get(f"/api/friendships/{friendship_id}").status_code == 200
    assert carol.get(f"/api/friendships/{friendship_id}").status_code == 403
    assert carol.delete(f"/api/friendships/{friendship_id}").status_code == 403
    assert bob.delete(f"/api/friendships/{friendship_id}").status_code == 200
    assert alice.get(f"/api/friendships/{friendship_id}").status_code == 404

    # the pair is free again once the edge is gone
    assert _request(bob, "alice").status_code == 201


@pytest.mark.parametrize("current, target, allowed", [
    (FriendshipStatus.PENDING, FriendshipStatus.ACCEPTED, True),
    (FriendshipStatus.PENDING, FriendshipStatus.REJECTED, True),
    (FriendshipStatus.PENDING, FriendshipStatus.BLOCKED, True),
    (FriendshipStatus.ACCEPTED, FriendshipStatus.BLOCKED, True),
    (FriendshipStatus.ACCEPTED, FriendshipStatus.REJECTED, False),
    (FriendshipStatus.REJECTED, FriendshipStatus.ACCEPTED, False),
    (FriendshipStatus.REJECTED, FriendshipStatus.BLOCKED, False),
    (FriendshipStatus.BLOCKED, FriendshipStatus.ACCEPTED, False),
])
def test_can_transition(current, target, allowed):
    assert can_transition(current, target) is allowed
