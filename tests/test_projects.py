"""Tests for project listing, scoping and wizard submission."""

import pytest
from fastapi import HTTPException

from slf_backend.modules.projects.schemas import ProjectWizardData
from slf_backend.modules.projects.service import ProjectService
from slf_backend.modules.projects import wizard


@pytest.fixture
def wizard_data():
    return ProjectWizardData(
        name="Ruko Blok A",
        application_category="PBG",
        application_type="PBG_BARU",
        client_id="client-1",
        project_lead_id="lead-1",
        location="Jl. Merdeka 10",
        city="Bandung",
        phases=wizard.default_phases("PBG"),
        inspectors=["insp-1", "insp-2"],
    )


@pytest.fixture
def seeded_db(fake_db):
    fake_db.seed(
        "clients",
        {"id": "client-1", "name": "PT Maju Jaya", "city": "Bandung"},
        {"id": "client-2", "name": "CV Sentosa", "city": "Surabaya"},
    )
    fake_db.seed(
        "projects",
        {"id": "p1", "name": "Gedung A", "client_id": "client-1", "city": "Bandung",
         "status": "draft", "application_type": "SLF_BARU", "created_at": "2024-01-01T00:00:00Z"},
        {"id": "p2", "name": "Gudang B", "client_id": "client-2", "city": "Surabaya",
         "status": "completed", "application_type": "PBG_BARU", "created_at": "2024-02-01T00:00:00Z"},
        {"id": "p3", "name": "Hotel C", "client_id": "missing", "city": "Bali",
         "status": "draft", "application_type": "SLF_PERPANJANGAN", "created_at": "2024-03-01T00:00:00Z"},
    )
    return fake_db


class TestCreateProject:
    def test_creates_project_phases_and_team(self, fake_db, wizard_data):
        project = ProjectService(fake_db).create_project(wizard_data, "admin-1")

        assert project.status == "draft"
        assert project.estimated_duration == 45
        assert project.created_by == "admin-1"

        phases = sorted(fake_db.rows("project_phases"), key=lambda p: p["order_index"])
        assert [p["status"] for p in phases] == ["in_progress", "pending", "pending", "pending", "pending"]
        assert all(p["project_id"] == project.id for p in phases)

        team = fake_db.rows("project_teams")
        assert [(t["user_id"], t["role"]) for t in team] == [
            ("lead-1", "project_lead"), ("insp-1", "inspector"), ("insp-2", "inspector"),
        ]

    def test_phase_failure_does_not_roll_back(self, fake_db, wizard_data):
        fake_db.fail_on.add(("project_phases", "insert"))

        project = ProjectService(fake_db).create_project(wizard_data, "admin-1")

        assert project.id
        assert len(fake_db.rows("projects")) == 1
        assert fake_db.rows("project_phases") == []
        assert len(fake_db.rows("project_teams")) == 3

    def test_invalid_wizard_data_is_rejected(self, fake_db):
        with pytest.raises(HTTPException) as exc:
            ProjectService(fake_db).create_project(ProjectWizardData(name="Ok Name"), "admin-1")

        assert exc.value.status_code == 422
        assert exc.value.detail["step"] == wizard.STEP_DETAILS
        assert "client_id" in exc.value.detail["errors"]
        assert fake_db.rows("projects") == []


class TestListProjects:
    def test_joins_client_name_with_fallback(self, seeded_db):
        projects = ProjectService(seeded_db).list_projects()

        assert [p.id for p in projects] == ["p3", "p2", "p1"]
        assert {p.id: p.client_name for p in projects} == {"p1": "PT Maju Jaya", "p2": "CV Sentosa", "p3": "-"}

    def test_search_matches_client_name(self, seeded_db):
        projects = ProjectService(seeded_db).list_projects(search="maju")
        assert [p.id for p in projects] == ["p1"]

    def test_category_filter_matches_subtypes(self, seeded_db):
        projects = ProjectService(seeded_db).list_projects(application_type="SLF")
        assert sorted(p.id for p in projects) == ["p1", "p3"]

    def test_empty_scope_returns_nothing(self, seeded_db):
        assert ProjectService(seeded_db).list_projects(accessible_project_ids=[]) == []


class TestProjectRoutes:
    def test_requires_session(self, test_client):
        response = test_client.get("/api/v1/projects")

        assert response.status_code == 401
        assert response.json()["detail"]["redirect_to"] == "/login"

    def test_client_sees_only_own_projects(self, test_client, seeded_db, login_as):
        login_as("client", client_id="client-2")

        response = test_client.get("/api/v1/projects")

        assert response.status_code == 200
        assert [p["id"] for p in response.json()] == ["p2"]

    def test_project_lead_sees_led_and_assigned_projects(self, test_client, seeded_db, login_as):
        seeded_db.tables["projects"][0]["project_lead_id"] = "lead-9"
        seeded_db.seed("project_teams", {"id": "t1", "project_id": "p3", "user_id": "lead-9", "role": "project_lead"})
        login_as("project_lead", user_id="lead-9")

        response = test_client.get("/api/v1/projects")

        assert sorted(p["id"] for p in response.json()) == ["p1", "p3"]

    def test_admin_team_sees_only_assigned_projects(self, test_client, seeded_db, login_as):
        seeded_db.seed("project_teams", {"id": "t1", "project_id": "p1", "user_id": "at-1", "role": "admin_team"})
        login_as("admin_team", user_id="at-1")

        listed = test_client.get("/api/v1/projects")
        foreign = test_client.get("/api/v1/projects/p2")

        assert [p["id"] for p in listed.json()] == ["p1"]
        assert foreign.status_code == 403

    def test_inspector_cannot_open_foreign_project(self, test_client, seeded_db, login_as):
        login_as("inspector")

        response = test_client.get("/api/v1/projects/p1")

        assert response.status_code == 403
        assert response.json()["detail"]["redirect_to"] == "/dashboard"

    def test_only_admin_lead_creates_projects(self, test_client, seeded_db, login_as):
        login_as("drafter")
        response = test_client.post("/api/v1/projects", json={"name": "X"})
        assert response.status_code == 403

    def test_wizard_validate_reports_next_step(self, test_client, login_as):
        login_as("admin_lead")

        response = test_client.post("/api/v1/projects/wizard/validate", json={
            "step": 1,
            "data": {"client_id": "client-1"},
        })

        body = response.json()
        assert response.status_code == 200
        assert body["valid"] is True
        assert body["next_step"] == 2
        assert body["errors"] == {}

    def test_wizard_phases_endpoint(self, test_client, login_as):
        login_as("admin_lead")
        response = test_client.get("/api/v1/projects/wizard/phases", params={"application_type": "SLF_BARU"})
        assert [p["duration"] for p in response.json()] == [7, 5, 10, 7, 14]

    def test_project_detail_includes_team(self, test_client, seeded_db, login_as):
        seeded_db.seed("profiles", {"id": "insp-1", "full_name": "Budi", "email": "budi@test.com", "specialization": "struktur"})
        seeded_db.seed("project_teams", {"id": "t1", "project_id": "p1", "user_id": "insp-1", "role": "inspector"})
        login_as("head_consultant")

        response = test_client.get("/api/v1/projects/p1")

        body = response.json()
        assert response.status_code == 200
        assert body["client_name"] == "PT Maju Jaya"
        assert body["team"][0]["full_name"] == "Budi"
        assert body["team"][0]["role_label"] == "Inspector"

    def test_update_status_validates_enum(self, test_client, seeded_db, login_as):
        login_as("admin_lead")

        bad = test_client.put("/api/v1/projects/p1/status", json={"status": "delayed"})
        good = test_client.put("/api/v1/projects/p1/status", json={"status": "submitted"})

        assert bad.status_code == 422
        assert good.status_code == 200
        assert good.json()["status_label"] == "Submitted"
