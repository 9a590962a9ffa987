"""Tests for session resolution, navigation redirects and service endpoints."""


def test_health(test_client):
    response = test_client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


def test_me_resolves_profile_role(test_client, fake_db):
    fake_db.auth.add_session("token-1", "u1", "lead@test.com")
    fake_db.seed("profiles", {"id": "u1", "role": "admin_lead", "full_name": "Sari"})

    response = test_client.get("/api/v1/auth/me", headers={"Authorization": "Bearer token-1"})

    body = response.json()
    assert response.status_code == 200
    assert body["role"] == "admin_lead"
    assert body["role_label"] == "Admin Lead"
    assert body["dashboard_path"] == "/dashboard/admin-lead"
    assert body["profile"]["full_name"] == "Sari"


def test_missing_profile_defaults_to_client(test_client, fake_db):
    fake_db.auth.add_session("token-2", "u2", "new@test.com")

    response = test_client.get("/api/v1/auth/me", headers={"Authorization": "Bearer token-2"})

    assert response.json()["role"] == "client"
    assert response.json()["dashboard_path"] == "/dashboard/client"


def test_invalid_token_redirects_to_login(test_client):
    response = test_client.get("/api/v1/auth/me", headers={"Authorization": "Bearer expired"})

    assert response.status_code == 401
    assert response.json()["detail"]["redirect_to"] == "/login"


def test_redirect_without_session(test_client):
    response = test_client.get("/api/v1/auth/redirect", params={"path": "/dashboard/admin-lead/projects"})
    assert response.json()["redirect_to"] == "/login"

    response = test_client.get("/api/v1/auth/redirect", params={"path": "/"})
    assert response.json()["redirect_to"] is None


def test_redirect_to_own_dashboard(test_client, fake_db):
    fake_db.auth.add_session("token-3", "u3", "client@test.com")
    fake_db.seed("profiles", {"id": "u3", "role": "client"})
    headers = {"Authorization": "Bearer token-3"}

    foreign = test_client.get("/api/v1/auth/redirect", params={"path": "/dashboard/admin-lead"}, headers=headers)
    own = test_client.get("/api/v1/auth/redirect", params={"path": "/dashboard/client/documents"}, headers=headers)

    assert foreign.json()["redirect_to"] == "/dashboard/client"
    assert own.json()["redirect_to"] is None


def test_roles_excludes_superadmin(test_client):
    values = [r["value"] for r in test_client.get("/api/v1/auth/roles").json()]
    assert "superadmin" not in values
    assert "project_lead" in values
