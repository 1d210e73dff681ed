from conftest import create_file


def test_create_file_starts_unflagged(make_user):
    alice = make_user("alice")
    res = alice.post("/api/files", json={"title": "  Plan  ", "content": " Body "})
    assert res.status_code == 201
    file = res.json()["file"]
    assert file["title"] == "Plan"
    assert file["content"] == "Body"
    assert file["isFavorite"] is False
    assert file["isTrashed"] is False
    assert file["userId"] == alice.user["id"]


def test_create_file_requires_title_and_content(make_user):
    alice = make_user("alice")
    assert alice.post("/api/files", json={"title": "x"}).status_code == 400
    res = alice.post("/api/files", json={"title": "   ", "content": "body"})
    assert res.status_code == 400
    assert res.json()["error"] == "Title cannot be empty"


def test_list_only_own_files_with_search(make_user):
    alice = make_user("alice")
    bob = make_user("bob")
    create_file(alice, "Groceries", "milk")
    create_file(alice, "Work", "quarterly report")
    create_file(bob, "Bob's", "milk too")

    files = alice.get("/api/files").json()["files"]
    assert {f["title"] for f in files} == {"Groceries", "Work"}

    files = alice.get("/api/files", params={"q": "REPORT"}).json()["files"]
    assert [f["title"] for f in files] == ["Work"]


def test_get_file_access(make_user):
    alice = make_user("alice")
    bob = make_user("bob")
    file = create_file(alice)

    assert alice.get(f"/api/files/{file['id']}").status_code == 200
    assert bob.get(f"/api/files/{file['id']}").status_code == 403
    assert alice.get("/api/files/99999").status_code == 404


def test_update_file(make_user):
    alice = make_user("alice")
    file = create_file(alice)

    res = alice.patch(f"/api/files/{file['id']}", json={"title": "Renamed"})
    assert res.status_code == 200
    assert res.json()["file"]["title"] == "Renamed"
    assert res.json()["file"]["content"] == file["content"]

    assert alice.patch(f"/api/files/{file['id']}", json={"content": "  "}).status_code == 400


def test_delete_file_cascades(make_user):
    alice = make_user("alice")
    bob = make_user("bob")
    file = create_file(alice)
    alice.post("/api/shares", json={"fileId": file["id"], "identifier": "bob"})
    bob.post("/api/favourites", json={"fileId": file["id"]})
    alice.patch(f"/api/files/{file['id']}/trash")

    assert bob.delete(f"/api/files/{file['id']}").status_code == 403
    res = alice.delete(f"/api/files/{file['id']}")
    assert res.status_code == 200

    assert alice.get(f"/api/files/{file['id']}").status_code == 404
    assert bob.get("/api/favourites").json()["total"] == 0
    assert bob.get("/api/shares/with-me").json()["total"] == 0
    assert alice.get("/api/trash").json()["total"] == 0

    actions = [a["action"] for a in alice.get("/api/activities").json()["activities"]]
    assert actions[0] == "FILE_DELETED"


def test_favourite_toggle_twice_restores_state(make_user):
    alice = make_user("alice")
    file = create_file(alice)

    res = alice.patch(f"/api/files/{file['id']}/favorite")
    assert res.json() == {"message": "Added to favorites", "isFavorite": True}
    assert alice.get(f"/api/files/{file['id']}").json()["file"]["isFavorite"] is True

    res = alice.patch(f"/api/files/{file['id']}/favorite")
    assert res.json()["isFavorite"] is False
    assert alice.get(f"/api/files/{file['id']}").json()["file"]["isFavorite"] is False


def test_favourite_toggle_allowed_for_share_recipient(make_user):
    alice = make_user("alice")
    bob = make_user("bob")
    carol = make_user("carol")
    file = create_file(alice)
    alice.post("/api/shares", json={"fileId": file["id"], "identifier": "bob"})

    assert bob.patch(f"/api/files/{file['id']}/favorite").json()["isFavorite"] is True
    assert carol.patch(f"/api/files/{file['id']}/favorite").status_code == 403
    # flags are per user
    assert alice.get(f"/api/files/{file['id']}").json()["file"]["isFavorite"] is False


def test_trash_toggle_owner_only(make_user):
    alice = make_user("alice")
    bob = make_user("bob")
    file = create_file(alice)
    alice.post("/api/shares", json={"fileId": file["id"], "identifier": "bob", "permission": "EDIT"})

    assert bob.patch(f"/api/files/{file['id']}/trash").status_code == 403
    res = alice.patch(f"/api/files/{file['id']}/trash")
    assert res.json() == {"message": "Moved to trash", "isTrashed": True}
    res = alice.patch(f"/api/files/{file['id']}/trash")
    assert res.json()["isTrashed"] is False


def test_recent_merges_owned_and_shared(make_user):
    alice = make_user("alice")
    bob = make_user("bob")
    mine = create_file(bob, "Mine")
    trashed = create_file(bob, "Trashed")
    shared = create_file(alice, "Shared")
    alice.post("/api/shares", json={"fileId": shared["id"], "identifier": "bob", "permission": "EDIT"})
    bob.patch(f"/api/files/{trashed['id']}/trash")

    res = bob.get("/api/files/recent")
    assert res.status_code == 200
    body = res.json()
    by_id = {f["id"]: f for f in body["files"]}
    assert set(by_id) == {mine["id"], shared["id"]}
    assert by_id[mine["id"]]["permission"] == "OWNER"
    assert by_id[shared["id"]]["permission"] == "EDIT"
    assert by_id[shared["id"]]["isShared"] is True
    assert body["pagination"]["total"] == 2
    assert body["pagination"]["hasMore"] is False

    res = bob.get("/api/files/recent", params={"limit": 1})
    assert len(res.json()["files"]) == 1
    assert res.json()["pagination"]["hasMore"] is True
