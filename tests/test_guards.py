"""Tests for role helpers and the dashboard navigation guard."""

import pytest

from slf_backend.core.guards import (
    normalize_role, role_label, dashboard_path, url_segment_to_role,
    resolve_redirect, check_role_access, has_permission,
)


class TestRoleHelpers:
    def test_missing_role_defaults_to_client(self):
        assert normalize_role(None) == "client"
        assert normalize_role("   ") == "client"

    def test_role_is_trimmed_and_lowercased(self):
        assert normalize_role(" Admin Lead ") == "admin_lead"

    def test_team_leader_alias_maps_to_project_lead(self):
        assert normalize_role("team_leader") == "project_lead"

    def test_role_labels(self):
        assert role_label("project_lead") == "Team Leader"
        assert role_label(None) == "N/A"
        assert role_label("site_manager") == "Site Manager"

    def test_dashboard_paths(self):
        assert dashboard_path("project_lead") == "/dashboard/team-leader"
        assert dashboard_path("admin_lead") == "/dashboard/admin-lead"
        assert dashboard_path("unknown_role") == "/dashboard/client"

    def test_url_segments_resolve_to_roles(self):
        assert url_segment_to_role("team-leader") == "project_lead"
        assert url_segment_to_role("project-lead") == "project_lead"
        assert url_segment_to_role("head-consultant") == "head_consultant"


class TestResolveRedirect:
    def test_unauthenticated_dashboard_goes_to_login(self):
        assert resolve_redirect("/dashboard/admin-lead/projects", None, False) == "/login"
        assert resolve_redirect("/dashboard", None, False) == "/login"

    def test_unauthenticated_public_page_is_allowed(self):
        assert resolve_redirect("/", None, False) is None
        assert resolve_redirect("/login", None, False) is None

    @pytest.mark.parametrize("path", ["/", "/dashboard", "/dashboard/"])
    def test_authenticated_root_goes_to_own_dashboard(self, path):
        assert resolve_redirect(path, "inspector", True) == "/dashboard/inspector"

    def test_other_roles_dashboard_root_redirects_home(self):
        assert resolve_redirect("/dashboard/admin-lead", "drafter", True) == "/dashboard/drafter"
        assert resolve_redirect("/dashboard/project-lead", "client", True) == "/dashboard/client"

    def test_own_dashboard_and_subpages_are_allowed(self):
        assert resolve_redirect("/dashboard/team-leader", "project_lead", True) is None
        assert resolve_redirect("/dashboard/client/upload", "client", True) is None


class TestAccessChecks:
    def test_empty_allowed_roles_admits_everyone(self):
        assert check_role_access("client", [])

    def test_superadmin_passes_every_guard(self):
        assert check_role_access("superadmin", ["head_consultant"])
        assert has_permission("superadmin", "payments:verify")

    def test_role_mismatch_is_denied(self):
        assert not check_role_access("inspector", ["admin_lead", "admin_team"])

    def test_alias_satisfies_guard(self):
        assert check_role_access("team_leader", ["project_lead"])

    def test_payment_verification_is_admin_lead_only(self):
        assert has_permission("admin_lead", "payments:verify")
        assert not has_permission("admin_team", "payments:verify")
        assert not has_permission("client", "payments:verify")

    def test_unknown_permission_only_for_superadmin(self):
        assert not has_permission("admin_lead", "reports:publish")
