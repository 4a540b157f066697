"""
Tests for api/training.py: materials, view logging and assignments.
"""
import os

from sqlalchemy.exc import SQLAlchemyError

from conftest import upload_material
from database.database import get_db
from main import app
from utils import config


def test_upload_links(client, manager):
    response = upload_material(
        client, manager["headers"],
        links=["https://example.com/guide.pdf", "https://cdn.example.com/clip.mp4?t=3", "https://example.com/diagram.png"],
    )
    assert response.status_code == 200
    body = response.json()
    assert body["document_urls"] == ["https://example.com/guide.pdf"]
    assert body["video_urls"] == ["https://cdn.example.com/clip.mp4?t=3"]
    assert body["image_urls"] == ["https://example.com/diagram.png"]
    assert body["views"] == 0
    assert body["uploaded_by"] == manager["id"]


def test_upload_files_are_stored(client, manager):
    files = [
        ("files", ("manual.pdf", b"%PDF-1.4 manual", "application/pdf")),
        ("files", ("poster.jpg", b"jpeg-bytes", "image/jpeg")),
    ]
    response = upload_material(client, manager["headers"], links=[], files=files)
    assert response.status_code == 200
    body = response.json()
    assert len(body["document_urls"]) == 1
    assert len(body["image_urls"]) == 1
    assert client.get(body["document_urls"][0]).content == b"%PDF-1.4 manual"


def test_upload_rejects_unknown_file_type(client, manager):
    files = [("files", ("virus.exe", b"MZ", "application/octet-stream"))]
    response = upload_material(client, manager["headers"], links=[], files=files)
    assert response.status_code == 400


def test_upload_needs_content(client, manager):
    response = upload_material(client, manager["headers"], links=[])
    assert response.status_code == 400


def test_upload_validation(client, manager):
    response = client.post(
        "/api/training/materials",
        data={"title": "Ok", "description": "Long enough description", "category": "Safety",
              "links": ["https://example.com/a.pdf"]},
        headers=manager["headers"],
    )
    assert response.status_code == 400

    bad_link = upload_material(client, manager["headers"], links=["ftp://example.com/a.pdf"])
    assert bad_link.status_code == 400

    bad_category = upload_material(client, manager["headers"], category="Cooking")
    assert bad_category.status_code == 422


def test_worker_cannot_upload(client, worker):
    assert upload_material(client, worker["headers"]).status_code == 403


def test_list_and_filter(client, manager, worker):
    upload_material(client, manager["headers"], title="Lockout procedure")
    upload_material(client, manager["headers"], title="Evacuation routes", category="Emergency")

    everything = client.get("/api/training/materials", headers=worker["headers"]).json()
    assert [m["title"] for m in everything] == ["Evacuation routes", "Lockout procedure"]

    emergency = client.get("/api/training/materials", params={"category": "Emergency"}, headers=worker["headers"]).json()
    assert [m["title"] for m in emergency] == ["Evacuation routes"]


def test_delete_material_removes_files(client, manager, worker):
    files = [("files", ("manual.pdf", b"data", "application/pdf"))]
    material = upload_material(client, manager["headers"], links=[], files=files).json()
    url = material["document_urls"][0]
    path = os.path.join(config.UPLOAD_DIR, url[len(config.MEDIA_URL_PREFIX) + 1:])
    assert os.path.exists(path)

    assert client.delete(f"/api/training/materials/{material['id']}", headers=worker["headers"]).status_code == 403
    assert client.delete(f"/api/training/materials/{material['id']}", headers=manager["headers"]).status_code == 200
    assert not os.path.exists(path)
    assert client.get(f"/api/training/materials/{material['id']}", headers=worker["headers"]).status_code == 404


def test_record_view(client, manager, worker):
    material = upload_material(client, manager["headers"]).json()

    first = client.post(f"/api/training/materials/{material['id']}/view", headers=worker["headers"])
    assert first.status_code == 200
    assert first.json()["views"] == 1
    assert first.json()["log"]["material_title"] == material["title"]

    second = client.post(f"/api/training/materials/{material['id']}/view", headers=worker["headers"]).json()
    assert second["views"] == 2

    logs = client.get("/api/training/logs/me", headers=worker["headers"]).json()
    assert len(logs) == 2


def test_view_missing_material(client, worker):
    assert client.post("/api/training/materials/404/view", headers=worker["headers"]).status_code == 404


class TestAssignments:

    def test_view_completes_assignment_exactly_once(self, client, manager, worker):
        material = upload_material(client, manager["headers"]).json()
        assignment = client.post(
            "/api/training/assignments",
            json={"user_id": worker["id"], "material_id": material["id"]},
            headers=manager["headers"],
        ).json()

        first = client.post(f"/api/training/materials/{material['id']}/view", headers=worker["headers"]).json()
        assert first["completed_assignment_ids"] == [assignment["id"]]

        second = client.post(f"/api/training/materials/{material['id']}/view", headers=worker["headers"]).json()
        assert second["completed_assignment_ids"] == []

        mine = client.get("/api/training/assignments/me", headers=worker["headers"]).json()
        assert mine[0]["status"] == "completed"
        assert mine[0]["completed_at"] is not None

    def test_other_users_view_does_not_complete(self, client, manager, worker, other_worker):
        material = upload_material(client, manager["headers"]).json()
        client.post(
            "/api/training/assignments",
            json={"user_id": worker["id"], "material_id": material["id"]},
            headers=manager["headers"],
        )
        client.post(f"/api/training/materials/{material['id']}/view", headers=other_worker["headers"])

        pending = client.get("/api/training/assignments/me", params={"status": "pending"}, headers=worker["headers"])
        assert len(pending.json()) == 1

    def test_duplicate_pending_assignment_rejected(self, client, manager, worker):
        material = upload_material(client, manager["headers"]).json()
        payload = {"user_id": worker["id"], "material_id": material["id"]}
        assert client.post("/api/training/assignments", json=payload, headers=manager["headers"]).status_code == 200
        assert client.post("/api/training/assignments", json=payload, headers=manager["headers"]).status_code == 400

    def test_assignment_needs_exactly_one_target(self, client, manager, worker, quiz):
        material = upload_material(client, manager["headers"]).json()
        both = {"user_id": worker["id"], "material_id": material["id"], "quiz_id": quiz["id"]}
        neither = {"user_id": worker["id"]}
        assert client.post("/api/training/assignments", json=both, headers=manager["headers"]).status_code == 422
        assert client.post("/api/training/assignments", json=neither, headers=manager["headers"]).status_code == 422

    def test_assignment_targets_must_exist(self, client, manager, worker):
        missing_user = {"user_id": 999, "quiz_id": 1}
        missing_material = {"user_id": worker["id"], "material_id": 999}
        missing_quiz = {"user_id": worker["id"], "quiz_id": 999}
        for payload in (missing_user, missing_material, missing_quiz):
            assert client.post("/api/training/assignments", json=payload, headers=manager["headers"]).status_code == 404

    def test_workers_cannot_assign(self, client, worker, quiz):
        response = client.post(
            "/api/training/assignments", json={"user_id": worker["id"], "quiz_id": quiz["id"]}, headers=worker["headers"]
        )
        assert response.status_code == 403
        assert client.get("/api/training/assignments", headers=worker["headers"]).status_code == 403

    def test_manager_lists_team_assignments(self, client, manager, worker, other_worker, quiz):
        for user in (worker, other_worker):
            client.post(
                "/api/training/assignments", json={"user_id": user["id"], "quiz_id": quiz["id"]}, headers=manager["headers"]
            )
        everyone = client.get("/api/training/assignments", headers=manager["headers"]).json()
        assert len(everyone) == 2
        one = client.get("/api/training/assignments", params={"user_id": worker["id"]}, headers=manager["headers"]).json()
        assert [a["user_id"] for a in one] == [worker["id"]]


def test_delete_material_drops_pending_assignments(client, manager, worker, other_worker):
    material = upload_material(client, manager["headers"]).json()
    for user in (worker, other_worker):
        client.post(
            "/api/training/assignments", json={"user_id": user["id"], "material_id": material["id"]},
            headers=manager["headers"]
        )
    client.post(f"/api/training/materials/{material['id']}/view", headers=worker["headers"])

    client.delete(f"/api/training/materials/{material['id']}", headers=manager["headers"])

    assert client.get("/api/training/assignments/me", headers=other_worker["headers"]).json() == []
    kept = client.get("/api/training/assignments/me", headers=worker["headers"]).json()
    assert [a["status"] for a in kept] == ["completed"]

    progress = client.get("/api/analytics/progress/me", headers=other_worker["headers"]).json()
    assert progress["pending_assignments"] == []


def test_failed_save_removes_stored_files(client, session_factory, manager):
    def failing_db():
        db = session_factory()

        def fail():
            raise SQLAlchemyError("database is locked")

        db.commit = fail
        try:
            yield db
        finally:
            db.close()

    folder = os.path.join(config.UPLOAD_DIR, "training", "documents")
    before = set(os.listdir(folder)) if os.path.isdir(folder) else set()

    app.dependency_overrides[get_db] = failing_db
    files = [("files", ("manual.pdf", b"%PDF-1.4 manual", "application/pdf"))]
    response = upload_material(client, manager["headers"], links=[], files=files)
    assert response.status_code == 500

    after = set(os.listdir(folder)) if os.path.isdir(folder) else set()
    assert after == before
