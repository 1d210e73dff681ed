from conftest import create_file
from db import SessionLocal
from models import Trash


def test_trash_then_empty_then_file_is_gone(make_user):
    alice = make_user("alice")
    file = create_file(alice)

    res = alice.post("/api/trash", json={"fileId": file["id"]})
    assert res.status_code == 201
    assert res.json()["isTrashed"] is True

    res = alice.post("/api/trash/empty")
    assert res.status_code == 200
    assert res.json()["deletedCount"] == 1
    assert res.json()["skippedCount"] == 0

    assert alice.get(f"/api/files/{file['id']}").status_code == 404
    assert alice.get("/api/trash").json()["total"] == 0


def test_move_to_trash_twice_returns_existing(make_user):
    alice = make_user("alice")
    file = create_file(alice)
    first = alice.post("/api/trash", json={"fileId": file["id"]}).json()["trash"]["id"]

    res = alice.post("/api/trash", json={"fileId": file["id"]})
    assert res.status_code == 200
    assert res.json()["trash"]["id"] == first


def test_move_to_trash_requires_owner(make_user):
    alice = make_user("alice")
    bob = make_user("bob")
    file = create_file(alice)
    alice.post("/api/shares", json={"fileId": file["id"], "identifier": "bob"})

    assert bob.post("/api/trash", json={"fileId": file["id"]}).status_code == 403
    assert alice.post("/api/trash", json={}).status_code == 400


def test_empty_trash_skips_files_owned_by_others(make_user):
    alice = make_user("alice")
    bob = make_user("bob")
    mine = create_file(bob, "Mine")
    theirs = create_file(alice, "Theirs")
    bob.patch(f"/api/files/{mine['id']}/trash")

    # the model allows a trash row for a file the user does not own
    db = SessionLocal()
    try:
        db.add(Trash(user_id=bob.user["id"], file_id=theirs["id"]))
        db.commit()
    finally:
        db.close()

    stats = bob.get("/api/trash/empty").json()
    assert stats["totalTrashed"] == 2
    assert stats["deletableFiles"] == 1
    assert stats["canEmpty"] is True

    res = bob.delete("/api/trash/empty")
    body = res.json()
    assert body["deletedCount"] == 1
    assert body["skippedCount"] == 1
    assert body["totalProcessed"] == 2
    assert alice.get(f"/api/files/{theirs['id']}").status_code == 200


def test_empty_trash_when_empty(make_user):
    alice = make_user("alice")
    res = alice.post("/api/trash/empty")
    assert res.json()["message"] == "Trash is already empty"
    assert alice.get("/api/trash/empty").json()["isEmpty"] is True


def test_bulk_delete_and_restore(make_user):
    alice = make_user("alice")
    a = create_file(alice, "A")
    b = create_file(alice, "B")
    c = create_file(alice, "C")
    for f in (a, b, c):
        alice.post("/api/trash", json={"fileId": f["id"]})

    assert alice.request("DELETE", "/api/trash", json={}).status_code == 400

    res = alice.request("DELETE", "/api/trash", json={"fileIds": [a["id"]]})
    assert res.json()["deletedCount"] == 1
    assert alice.get(f"/api/files/{a['id']}").status_code == 404

    res = alice.patch("/api/trash", json={"fileIds": [b["id"]]})
    assert res.json()["restoredCount"] == 1
    assert alice.get(f"/api/files/{b['id']}").json()["file"]["isTrashed"] is False

    res = alice.request("DELETE", "/api/trash", json={"emptyTrash": True})
    assert res.json()["deletedCount"] == 1
    assert alice.get(f"/api/files/{c['id']}").status_code == 404


def test_single_trash_entry(make_user):
    alice = make_user("alice")
    bob = make_user("bob")
    a = create_file(alice, "A")
    b = create_file(alice, "B")
    trash_a = alice.post("/api/trash", json={"fileId": a["id"]}).json()["trash"]["id"]
    trash_b = alice.post("/api/trash", json={"fileId": b["id"]}).json()["trash"]["id"]

    assert alice.get(f"/api/trash/{trash_a}").json()["trash"]["file"]["title"] == "A"
    assert bob.get(f"/api/trash/{trash_a}").status_code == 403
    assert alice.get("/api/trash/99999").status_code == 404

    res = alice.post(f"/api/trash/{trash_a}/restore")
    assert res.status_code == 200
    assert res.json()["fileId"] == a["id"]
    assert "restoredAt" in res.json()

    res = alice.delete(f"/api/trash/{trash_b}")
    assert res.status_code == 200
    assert alice.get(f"/api/files/{b['id']}").status_code == 404
