"""Tests for the project creation wizard steps."""

import pytest

from slf_backend.modules.projects import wizard


@pytest.fixture
def complete_data():
    return {
        "name": "Gedung Kantor Sudirman",
        "application_category": "SLF",
        "application_type": "SLF_BARU",
        "location": "Jl. Sudirman No. 1",
        "city": "Jakarta",
        "client_id": "client-1",
        "project_lead_id": "lead-1",
        "phases": wizard.default_phases("SLF_BARU"),
        "inspectors": [],
    }


class TestStepValidation:
    def test_details_step_requires_fields(self):
        errors = wizard.validate_step(wizard.STEP_DETAILS, {"name": "ab"})
        assert set(errors) == {"name", "application_category", "application_type", "location", "city"}

    def test_application_type_must_belong_to_category(self, complete_data):
        complete_data["application_type"] = "PBG_BARU"
        errors = wizard.validate_step(wizard.STEP_DETAILS, complete_data)
        assert errors == {"application_type": "Jenis permohonan tidak sesuai kategori"}

    def test_client_step(self):
        assert wizard.validate_step(wizard.STEP_CLIENT, {}) == {"client_id": "Pilih klien"}
        assert wizard.validate_step(wizard.STEP_CLIENT, {"client_id": "c"}) == {}

    def test_timeline_needs_a_phase(self):
        assert "phases" in wizard.validate_step(wizard.STEP_TIMELINE, {"phases": []})

    def test_team_step_needs_project_lead(self):
        assert "project_lead_id" in wizard.validate_step(wizard.STEP_TEAM, {})

    def test_unknown_step_raises(self):
        with pytest.raises(ValueError):
            wizard.validate_step(7, {})

    def test_complete_data_is_valid(self, complete_data):
        assert wizard.validate_all(complete_data) == {}
        assert wizard.first_invalid_step(complete_data) is None


class TestNavigation:
    def test_next_step_blocked_when_invalid(self):
        assert wizard.next_step(wizard.STEP_DETAILS, {}) == wizard.STEP_DETAILS

    def test_next_step_advances_and_clamps(self, complete_data):
        assert wizard.next_step(wizard.STEP_DETAILS, complete_data) == wizard.STEP_CLIENT
        assert wizard.next_step(wizard.LAST_STEP, complete_data) == wizard.LAST_STEP

    def test_prev_step_clamps_at_zero(self):
        assert wizard.prev_step(0) == 0
        assert wizard.prev_step(2) == 1

    def test_first_invalid_step(self, complete_data):
        complete_data["client_id"] = None
        assert wizard.first_invalid_step(complete_data) == wizard.STEP_CLIENT


class TestPhases:
    def test_default_phase_durations(self):
        assert [p["duration"] for p in wizard.default_phases("SLF_PERPANJANGAN")] == [7, 5, 10, 7, 14]
        assert [p["duration"] for p in wizard.default_phases("PBG_BARU")] == [7, 10, 7, 14, 7]

    def test_default_phases_are_copies(self):
        phases = wizard.default_phases("SLF")
        phases[0]["duration"] = 99
        assert wizard.default_phases("SLF")[0]["duration"] == 7

    @pytest.mark.parametrize("raw, expected", [("3", 3), (0, 1), (-4, 1), ("abc", 1), (None, 1), (12, 12)])
    def test_coerce_duration(self, raw, expected):
        assert wizard.coerce_duration(raw) == expected

    def test_total_duration(self):
        assert wizard.total_duration([{"name": "a", "duration": "2"}, {"name": "b", "duration": 0}]) == 3
        assert wizard.total_duration(wizard.default_phases("SLF")) == 43
