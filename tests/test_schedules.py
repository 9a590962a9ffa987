"""Tests for schedules."""

import pytest
from fastapi import HTTPException

from slf_backend.modules.schedules.schemas import ScheduleUpdate
from slf_backend.modules.schedules.service import ScheduleService


def _seed(fake_db):
    fake_db.seed("projects", {"id": "p1", "name": "Gedung A"})
    fake_db.seed("profiles", {"id": "insp-1", "full_name": "Budi"})
    fake_db.seed(
        "schedules",
        {"id": "s1", "project_id": "p1", "title": "Inspeksi struktur", "schedule_type": "inspection",
         "schedule_date": "2099-01-01T09:00:00Z", "status": "scheduled", "assigned_to": "insp-1",
         "created_by": "admin-1"},
        {"id": "s2", "project_id": "p1", "title": "Rapat klien", "schedule_type": "meeting",
         "schedule_date": "2020-01-01T09:00:00Z", "status": "completed", "created_by": "admin-1"},
    )


def test_list_joins_names_and_stats(fake_db):
    _seed(fake_db)

    result = ScheduleService(fake_db).list_schedules()

    assert [s.id for s in result.schedules] == ["s2", "s1"]
    assert result.schedules[1].assignee_name == "Budi"
    assert result.schedules[0].assignee_name == "-"
    assert result.schedules[1].project_name == "Gedung A"
    assert result.stats.model_dump() == {"total": 2, "upcoming": 1, "inspections": 1, "meetings": 1}


def test_filters(fake_db):
    _seed(fake_db)
    service = ScheduleService(fake_db)

    assert [s.id for s in service.list_schedules(search="gedung a", schedule_type="meeting").schedules] == ["s2"]
    assert [s.id for s in service.list_schedules(status="scheduled").schedules] == ["s1"]
    assert [s.id for s in service.list_schedules(upcoming_only=True).schedules] == ["s1"]


def test_update_keeps_creator(fake_db):
    _seed(fake_db)

    updated = ScheduleService(fake_db).update_schedule("s2", ScheduleUpdate(title="Rapat ulang"))

    assert updated.title == "Rapat ulang"
    assert updated.created_by == "admin-1"


def test_assignee_lookup_failure_is_reported(fake_db):
    _seed(fake_db)
    fake_db.fail_on.add(("profiles", "select"))

    with pytest.raises(HTTPException) as exc:
        ScheduleService(fake_db).update_schedule("s1", ScheduleUpdate(title="Inspeksi ulang"))

    assert exc.value.status_code == 500
    assert exc.value.detail == "Gagal memperbarui jadwal"


def test_create_route_sets_creator(test_client, fake_db, login_as):
    _seed(fake_db)
    fake_db.seed("project_teams", {"id": "t1", "project_id": "p1", "user_id": "at-1", "role": "admin_team"})
    login_as("admin_team", user_id="at-1")

    response = test_client.post("/api/v1/schedules", json={
        "project_id": "p1",
        "title": "Site visit",
        "schedule_type": "site_visit",
        "schedule_date": "2099-05-01T08:00:00Z",
    })

    assert response.status_code == 201
    assert response.json()["created_by"] == "at-1"
    assert response.json()["status"] == "scheduled"


def test_inspector_cannot_manage_schedules(test_client, fake_db, login_as):
    login_as("inspector")
    response = test_client.delete("/api/v1/schedules/s1")
    assert response.status_code == 403


def test_admin_team_cannot_schedule_unassigned_project(test_client, fake_db, login_as):
    _seed(fake_db)
    login_as("admin_team", user_id="at-2")

    response = test_client.post("/api/v1/schedules", json={
        "project_id": "p1",
        "title": "Site visit",
        "schedule_type": "site_visit",
        "schedule_date": "2099-05-01T08:00:00Z",
    })

    assert response.status_code == 403
