"""
Tests for api/announcements.py
"""
from datetime import datetime, timedelta, timezone


def post(client, headers, **overrides):
    payload = {"title": "Shift change", "content": "Night shift starts at 21:00 from Monday."}
    payload.update(overrides)
    return client.post("/api/announcements/", json=payload, headers=headers)


def test_create_announcement(client, manager):
    response = post(client, manager["headers"], priority="urgent")
    assert response.status_code == 200
    body = response.json()
    assert body["priority"] == "urgent"
    assert body["posted_by"] == manager["id"]
    assert body["posted_at"] is not None
    assert body["read_count"] == 0
    assert body["is_read"] is False


def test_priority_defaults_to_normal(client, manager):
    assert post(client, manager["headers"]).json()["priority"] == "normal"


def test_worker_cannot_post(client, worker):
    assert post(client, worker["headers"]).status_code == 403


def test_newest_first(client, manager, worker):
    post(client, manager["headers"], title="First notice")
    post(client, manager["headers"], title="Second notice")
    titles = [a["title"] for a in client.get("/api/announcements/", headers=worker["headers"]).json()]
    assert titles == ["Second notice", "First notice"]


def test_limit(client, manager, worker):
    for n in range(3):
        post(client, manager["headers"], title=f"Notice {n}")
    response = client.get("/api/announcements/", params={"limit": 2}, headers=worker["headers"])
    assert len(response.json()) == 2


def test_expired_hidden_by_default(client, manager, worker):
    past = (datetime.now(timezone.utc) - timedelta(days=1)).isoformat()
    future = (datetime.now(timezone.utc) + timedelta(days=1)).isoformat()
    post(client, manager["headers"], title="Old news", expires_at=past)
    post(client, manager["headers"], title="Still relevant", expires_at=future)
    post(client, manager["headers"], title="Forever")

    visible = [a["title"] for a in client.get("/api/announcements/", headers=worker["headers"]).json()]
    assert visible == ["Forever", "Still relevant"]

    everything = client.get("/api/announcements/", params={"include_expired": True}, headers=worker["headers"]).json()
    assert len(everything) == 3


def test_update_and_clear_expiry(client, manager, worker):
    future = (datetime.now(timezone.utc) + timedelta(days=1)).isoformat()
    created = post(client, manager["headers"], expires_at=future).json()
    url = f"/api/announcements/{created['id']}"

    assert client.put(url, json={"title": "Nope"}, headers=worker["headers"]).status_code == 403

    updated = client.put(url, json={"title": "Shift change (updated)"}, headers=manager["headers"]).json()
    assert updated["title"] == "Shift change (updated)"
    assert updated["expires_at"] is not None

    cleared = client.put(url, json={"expires_at": None}, headers=manager["headers"]).json()
    assert cleared["expires_at"] is None
    assert cleared["title"] == "Shift change (updated)"


def test_delete(client, manager, worker):
    created = post(client, manager["headers"]).json()
    url = f"/api/announcements/{created['id']}"
    client.post(f"{url}/read", headers=worker["headers"])

    assert client.delete(url, headers=worker["headers"]).status_code == 403
    assert client.delete(url, headers=manager["headers"]).status_code == 200
    assert client.get(url, headers=worker["headers"]).status_code == 404


class TestReadReceipts:

    def test_mark_read_is_idempotent(self, client, manager, worker):
        created = post(client, manager["headers"]).json()
        url = f"/api/announcements/{created['id']}/read"

        first = client.post(url, headers=worker["headers"]).json()
        second = client.post(url, headers=worker["headers"]).json()
        assert first["is_read"] is True
        assert second["read_count"] == 1

    def test_read_state_is_per_user(self, client, manager, worker, other_worker):
        created = post(client, manager["headers"]).json()
        client.post(f"/api/announcements/{created['id']}/read", headers=worker["headers"])

        mine = client.get(f"/api/announcements/{created['id']}", headers=worker["headers"]).json()
        theirs = client.get(f"/api/announcements/{created['id']}", headers=other_worker["headers"]).json()
        assert mine["is_read"] is True
        assert theirs["is_read"] is False
        assert theirs["read_count"] == 1

    def test_read_missing_announcement(self, client, worker):
        assert client.post("/api/announcements/999/read", headers=worker["headers"]).status_code == 404
