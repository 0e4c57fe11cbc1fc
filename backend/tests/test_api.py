"""HTTP API tests through FastAPI's TestClient."""
import pytest
from fastapi.testclient import TestClient

from app.main import create_app

WRITER = {"X-Actor-Id": "director-1", "X-Actor-Role": "Product Director"}


@pytest.fixture
def client(settings, backend):
    app = create_app(settings, backend=backend)
    with TestClient(app) as test_client:
        yield test_client


def _allocation_payload(project, member, pct, sprint=1):
    return {
        "projectId": project.id,
        "productManagerId": member.id,
        "year": 2025,
        "month": 3,
        "sprint": sprint,
        "allocationPercentage": pct,
    }


class TestServiceEndpoints:
    def test_health(self, client):
        assert client.get("/health").json() == {"status": "ok"}

    def test_status(self, client):
        response = client.get("/status")
        assert response.status_code == 200
        assert response.json() == {"isSaving": False, "hasPendingSave": False, "lastSaveError": None}

    def test_current_sprint(self, client):
        body = client.get("/sprints/current").json()
        assert body["sprint"] in (1, 2)
        assert " - S" in body["label"]


class TestActorHeaders:
    def test_write_requires_actor_id(self, client, apollo, bob):
        response = client.post("/allocations", json=_allocation_payload(apollo, bob, 50))
        assert response.status_code == 401

    def test_product_manager_is_read_only(self, client, apollo, bob):
        response = client.post(
            "/allocations",
            json=_allocation_payload(apollo, bob, 50),
            headers={"X-Actor-Id": "pm-1", "X-Actor-Role": "Product Manager"},
        )
        assert response.status_code == 403

    def test_reads_need_no_headers(self, client):
        assert client.get("/members").status_code == 200


class TestMembersAndProjects:
    def test_list_members_sorted_by_name(self, client):
        names = [m["fullName"] for m in client.get("/members").json()]
        assert names == ["Alice Smith", "Bob Jones"]

    def test_create_member(self, client):
        response = client.post(
            "/members",
            json={"fullName": "Carol Diaz", "email": "carol@example.com", "role": "PMO"},
            headers=WRITER,
        )
        assert response.status_code == 201
        assert response.json()["capacity"] == 100

    def test_duplicate_email_conflict(self, client, bob):
        response = client.post(
            "/members",
            json={"fullName": "Other Bob", "email": bob.email, "role": "PMO"},
            headers=WRITER,
        )
        assert response.status_code == 409

    def test_manager_cycle_rejected(self, client, alice, bob):
        assert client.put(f"/members/{bob.id}/manager", json={"managerId": alice.id}, headers=WRITER).status_code == 200
        response = client.put(f"/members/{alice.id}/manager", json={"managerId": bob.id}, headers=WRITER)
        assert response.status_code == 400

    def test_unknown_project_not_found(self, client):
        assert client.get("/projects/missing").status_code == 404

    def test_archived_projects_hidden(self, client, zephyr):
        client.post(f"/projects/{zephyr.id}/archive", headers=WRITER)
        ids = [p["id"] for p in client.get("/projects").json()]
        assert zephyr.id not in ids
        ids = [p["id"] for p in client.get("/projects", params={"include_archived": True}).json()]
        assert zephyr.id in ids


class TestAllocations:
    def test_create_allocation(self, client, backend, apollo, bob):
        response = client.post("/allocations", json=_allocation_payload(apollo, bob, 50), headers=WRITER)
        assert response.status_code == 201
        body = response.json()
        assert body["allocationDays"] == 5.0
        assert body["createdBy"] == "director-1"
        assert body["sprint"] == 1
        assert backend.calls == ["allocations", "history"]

    def test_duplicate_allocation_conflict(self, client, apollo, bob):
        first = client.post("/allocations", json=_allocation_payload(apollo, bob, 50), headers=WRITER).json()
        response = client.post("/allocations", json=_allocation_payload(apollo, bob, 20), headers=WRITER)
        assert response.status_code == 409
        assert response.json()["existingId"] == first["id"]
        assert len(client.get("/allocations").json()) == 1

    def test_unknown_member_not_found(self, client, apollo):
        payload = _allocation_payload(apollo, apollo, 50)
        assert client.post("/allocations", json=payload, headers=WRITER).status_code == 404

    def test_capacity_ceiling_needs_confirmation(self, client, apollo, alice, bob):
        client.post("/allocations", json=_allocation_payload(apollo, alice, 100), headers=WRITER)

        response = client.post("/allocations", json=_allocation_payload(apollo, bob, 60), headers=WRITER)
        assert response.status_code == 409
        detail = response.json()["detail"]
        assert detail["totalPercentage"] == 160
        assert detail["maxCapacityPercentage"] == 150
        assert "exceeds project max capacity" in detail["message"]

        confirmed = client.post(
            "/allocations",
            params={"confirmOverCapacity": "true"},
            json=_allocation_payload(apollo, bob, 60),
            headers=WRITER,
        )
        assert confirmed.status_code == 201

    def test_filters(self, client, apollo, zephyr, bob):
        client.post("/allocations", json=_allocation_payload(apollo, bob, 40), headers=WRITER)
        client.post("/allocations", json=_allocation_payload(zephyr, bob, 25, sprint=2), headers=WRITER)

        assert len(client.get("/allocations", params={"memberId": bob.id}).json()) == 2
        assert len(client.get("/allocations", params={"sprint": 2}).json()) == 1
        only = client.get("/allocations", params={"projectId": apollo.id}).json()
        assert [a["allocationPercentage"] for a in only] == [40]

    def test_update_recomputes_days(self, client, apollo, bob):
        created = client.post("/allocations", json=_allocation_payload(apollo, bob, 50), headers=WRITER).json()
        response = client.patch(f"/allocations/{created['id']}", json={"allocationPercentage": 33}, headers=WRITER)
        assert response.status_code == 200
        assert response.json()["allocationDays"] == 3.3

    def test_update_into_occupied_slot_conflicts(self, client, apollo, zephyr, bob):
        client.post("/allocations", json=_allocation_payload(apollo, bob, 40), headers=WRITER)
        other = client.post("/allocations", json=_allocation_payload(zephyr, bob, 40), headers=WRITER).json()
        response = client.patch(f"/allocations/{other['id']}", json={"projectId": apollo.id}, headers=WRITER)
        assert response.status_code == 409

    def test_update_missing_not_found(self, client):
        response = client.patch("/allocations/missing", json={"comment": "x"}, headers=WRITER)
        assert response.status_code == 404

    def test_delete_and_history(self, client, apollo, bob):
        created = client.post("/allocations", json=_allocation_payload(apollo, bob, 50), headers=WRITER).json()
        client.patch(f"/allocations/{created['id']}", json={"comment": "half time"}, headers=WRITER)

        assert client.delete(f"/allocations/{created['id']}", headers=WRITER).json() == {"ok": True, "deleted": True}
        assert client.delete(f"/allocations/{created['id']}", headers=WRITER).json() == {"ok": True, "deleted": False}

        history = client.get("/history", params={"allocationId": created["id"]}).json()
        assert [h["changeType"] for h in history] == ["deleted", "updated", "created"]
        assert history[1]["newValue"]["comment"] == "half time"

    def test_export_csv(self, client, apollo, zephyr, alice, bob):
        client.post("/allocations", json=_allocation_payload(apollo, alice, 100), headers=WRITER)
        client.post("/allocations", json=_allocation_payload(apollo, bob, 40), headers=WRITER)
        client.post("/allocations", json=_allocation_payload(zephyr, bob, 25, sprint=2), headers=WRITER)

        response = client.get(
            "/allocations/export", params={"year": 2025, "month": 3, "sprint": 1, "count": 2}
        )
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        assert "capacity-overview-2025-03-s1.csv" in response.headers["content-disposition"]
        assert response.text.splitlines() == [
            "Customer,Project,Max Capacity (%),2025 - March - S1,,,2025 - March - S2,,",
            ",,,Total,Alice Smith,Bob Jones,Total,Alice Smith,Bob Jones",
            "Acme,Apollo,150,140%,100%,40%,-,-,-",
            "Globex,Zephyr,-,-,-,-,25%,-,25%",
        ]

    def test_export_needs_complete_sprint(self, client):
        assert client.get("/allocations/export", params={"year": 2025}).status_code == 422


class TestSprintPlanAndCapacity:
    def test_pin_projects(self, client, apollo, zephyr):
        response = client.put(
            "/sprints/2025/3/1/projects",
            json={"projectIds": [apollo.id, zephyr.id, apollo.id]},
            headers=WRITER,
        )
        assert response.json() == {"key": "2025-3-1", "projectIds": [apollo.id, zephyr.id]}
        assert client.get("/sprints/2025/3/1/projects").json()["projectIds"] == [apollo.id, zephyr.id]

    def test_invalid_sprint_rejected(self, client):
        assert client.get("/sprints/2025/3/3/projects").status_code == 422

    def test_role_gaps(self, client, apollo, bob):
        client.put(
            f"/projects/{apollo.id}/requirements/2025/3/1",
            json={"requirements": {"Product Manager": 100}},
            headers=WRITER,
        )
        client.post("/allocations", json=_allocation_payload(apollo, bob, 40), headers=WRITER)

        gaps = client.get(
            f"/capacity/projects/{apollo.id}/gaps", params={"year": 2025, "month": 3, "sprint": 1}
        ).json()
        assert gaps == [{"role": "Product Manager", "required": 100.0, "allocated": 40.0}]

    def test_member_capacity(self, client, apollo, bob):
        client.post("/allocations", json=_allocation_payload(apollo, bob, 40), headers=WRITER)
        loads = client.get(
            "/capacity/members",
            params={"year": 2025, "month": 3, "sprint": 1, "under": 70, "over": 100, "mode": "absolute"},
        ).json()
        by_id = {load["memberId"]: load for load in loads}
        assert by_id[bob.id]["totalPercentage"] == 40
        assert by_id[bob.id]["classification"] == "under"

    def test_partial_sprint_params_rejected(self, client):
        assert client.get("/capacity/members", params={"year": 2025}).status_code == 422

    def test_overview_and_alerts(self, client, apollo, zephyr):
        overview = client.get("/capacity/overview").json()
        assert len(overview) == 3
        alerts = {p["projectId"] for p in client.get("/capacity/alerts").json()}
        assert alerts == {apollo.id, zephyr.id}


class TestBackups:
    def test_list_backups_empty_for_stores_without_snapshots(self, client):
        assert client.get("/backups").json() == {"backups": []}

    def test_restore_unknown_backup_not_found(self, client):
        response = client.post("/backups/database.backup.1.json/restore", headers=WRITER)
        assert response.status_code == 404

    def test_restore_requires_writer(self, client):
        assert client.post("/backups/database.backup.1.json/restore").status_code == 401
