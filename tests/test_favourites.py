from conftest import create_file


def test_add_favourite_is_idempotent(make_user):
    alice = make_user("alice")
    file = create_file(alice)

    res = alice.post("/api/favourites", json={"fileId": file["id"]})
    assert res.status_code == 201
    first_id = res.json()["favourite"]["id"]

    res = alice.post("/api/favourites", json={"fileId": file["id"]})
    assert res.status_code == 200
    assert res.json()["favourite"]["id"] == first_id
    assert alice.get("/api/favourites").json()["total"] == 1


def test_add_favourite_errors(make_user):
    alice = make_user("alice")
    bob = make_user("bob")
    file = create_file(alice)

    assert alice.post("/api/favourites", json={}).status_code == 400
    assert alice.post("/api/favourites", json={"fileId": 99999}).status_code == 404
    assert bob.post("/api/favourites", json={"fileId": file["id"]}).status_code == 403


def test_list_favourites_shape(make_user):
    alice = make_user("alice")
    file = create_file(alice, "Starred")
    fav_id = alice.post("/api/favourites", json={"fileId": file["id"]}).json()["favourite"]["id"]

    body = alice.get("/api/favourites").json()
    assert body["total"] == 1
    row = body["files"][0]
    assert row["title"] == "Starred"
    assert row["isFavorite"] is True
    assert row["favouriteId"] == fav_id
    assert row["owner"]["username"] == "alice"


def test_single_favourite_endpoints(make_user):
    alice = make_user("alice")
    bob = make_user("bob")
    file = create_file(alice)
    fav_id = alice.post("/api/favourites", json={"fileId": file["id"]}).json()["favourite"]["id"]

    res = alice.get(f"/api/favourites/{fav_id}")
    assert res.status_code == 200
    assert res.json()["favourite"]["file"]["permission"] == "OWNER"
    assert bob.get(f"/api/favourites/{fav_id}").status_code == 403
    assert alice.get("/api/favourites/99999").status_code == 404
    assert alice.patch(f"/api/favourites/{fav_id}").status_code == 200

    assert bob.delete(f"/api/favourites/{fav_id}").status_code == 403
    res = alice.delete(f"/api/favourites/{fav_id}")
    assert res.status_code == 200
    assert res.json()["fileId"] == file["id"]
    assert alice.get("/api/favourites").json()["total"] == 0


def test_bulk_remove_favourites(make_user):
    alice = make_user("alice")
    a = create_file(alice, "A")
    b = create_file(alice, "B")
    c = create_file(alice, "C")
    for f in (a, b, c):
        alice.post("/api/favourites", json={"fileId": f["id"]})

    res = alice.request("DELETE", "/api/favourites", json={"fileIds": [a["id"], b["id"], 99999]})
    assert res.status_code == 200
    assert res.json()["deletedCount"] == 2
    assert alice.get("/api/favourites").json()["total"] == 1

    res = alice.delete("/api/favourites")
    assert res.json()["deletedCount"] == 1
    assert alice.get("/api/favourites").json()["total"] == 0


def test_concurrent_duplicate_favourite_returns_existing(make_user, monkeypatch):
    import routers.favourite

    alice = make_user("alice")
    file = create_file(alice)
    first = alice.post("/api/favourites", json={"fileId": file["id"]}).json()["favourite"]["id"]

    # the existence check misses, as when two requests run side by side
    monkeypatch.setattr(routers.favourite, "_find_favourite", lambda db, user_id, file_id: None)
    res = alice.post("/api/favourites", json={"fileId": file["id"]})
    assert res.status_code == 200
    assert res.json()["favourite"]["id"] == first
    assert alice.get("/api/favourites").json()["total"] == 1
