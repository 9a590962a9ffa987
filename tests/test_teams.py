"""Tests for project teams and member performance."""

import pytest
from fastapi import HTTPException

from slf_backend.modules.teams.schemas import TeamMemberCreate
from slf_backend.modules.teams.service import TeamService


@pytest.fixture
def teams_db(fake_db):
    fake_db.seed(
        "projects",
        {"id": "p1", "name": "Gedung A", "status": "completed", "project_lead_id": "lead-1", "created_at": "2024-01-01T00:00:00Z"},
        {"id": "p2", "name": "Gudang B", "status": "inspection_scheduled", "created_at": "2024-02-01T00:00:00Z"},
    )
    fake_db.seed(
        "profiles",
        {"id": "lead-1", "full_name": "Rina", "email": "rina@test.com", "role": "project_lead"},
        {"id": "insp-1", "full_name": "Budi", "email": "budi@test.com", "specialization": "struktur", "role": "inspector"},
    )
    fake_db.seed(
        "project_teams",
        {"id": "t1", "project_id": "p1", "user_id": "lead-1", "role": "project_lead", "created_at": "2024-01-01T00:00:00Z"},
        {"id": "t2", "project_id": "p2", "user_id": "insp-1", "role": "inspector", "created_at": "2024-02-01T00:00:00Z"},
        {"id": "t3", "project_id": "p2", "user_id": "lead-1", "role": "project_lead", "created_at": "2024-02-02T00:00:00Z"},
    )
    return fake_db


def test_list_members_with_roles_and_filters(teams_db):
    service = TeamService(teams_db)

    result = service.list_members()

    assert result.roles == ["inspector", "project_lead"]
    assert [m.id for m in result.members] == ["t3", "t2", "t1"]
    assert result.members[1].role_label == "Inspector"
    assert result.members[1].project_name == "Gudang B"
    assert [m.id for m in service.list_members(search="struktur").members] == ["t2"]
    assert [m.id for m in service.list_members(role="project_lead", project_id="p1").members] == ["t1"]


def test_duplicate_member_rejected(teams_db):
    with pytest.raises(HTTPException) as exc:
        TeamService(teams_db).add_member(TeamMemberCreate(project_id="p2", user_id="insp-1", role="inspector"))
    assert exc.value.status_code == 400


def test_add_member(teams_db):
    member = TeamService(teams_db).add_member(TeamMemberCreate(project_id="p1", user_id="insp-1", role="inspector"))
    assert member.role_label == "Inspector"
    assert len(teams_db.rows("project_teams")) == 4


def test_performance_counts_per_status(teams_db):
    performance = TeamService(teams_db).get_performance("lead-1")

    assert performance.total_projects == 2
    assert performance.status_counts == {"inspection_scheduled": 1, "completed": 1}
    assert performance.completed_projects == 1
    assert performance.active_projects == 1
    assert performance.role_label == "Team Leader"


def test_performance_is_head_consultant_only(test_client, teams_db, login_as):
    login_as("admin_lead")
    assert test_client.get("/api/v1/teams/lead-1/performance").status_code == 403

    login_as("head_consultant")
    response = test_client.get("/api/v1/teams/lead-1/performance")
    assert response.status_code == 200
    assert response.json()["total_projects"] == 2
