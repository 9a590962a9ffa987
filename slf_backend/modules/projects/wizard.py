"""
Project creation wizard.

Four fixed steps (details, client, timeline, team). Each step has a static
validity predicate that returns a field -> message map; an empty map means the
step may be left. Submission only happens once every step is valid.
"""

import copy
from typing import Any, Dict, List, Optional

from slf_backend.config.workflow_config import (
    APPLICATION_CATEGORIES, APPLICATION_TYPES, DEFAULT_PHASES, category_of
)

STEP_DETAILS = 0
STEP_CLIENT = 1
STEP_TIMELINE = 2
STEP_TEAM = 3

STEPS = [
    "Detail Proyek",
    "Pilih Klien",
    "Timeline",
    "Tim Proyek",
]

LAST_STEP = len(STEPS) - 1
MIN_NAME_LENGTH = 3


def default_phases(application_type: Optional[str]) -> List[Dict[str, Any]]:
    """Default timeline for an application type; anything that is not SLF gets the PBG phases."""
    category = category_of(application_type)
    if category is None and application_type and str(application_type).startswith("SLF"):
        category = "SLF"
    return copy.deepcopy(DEFAULT_PHASES["SLF" if category == "SLF" else "PBG"])


def coerce_duration(value: Any) -> int:
    try:
        duration = int(value)
    except (TypeError, ValueError):
        return 1
    return duration if duration >= 1 else 1


def normalize_phases(phases: Optional[List[Dict[str, Any]]]) -> List[Dict[str, Any]]:
    normalized = []
    for index, phase in enumerate(phases or []):
        item = dict(phase)
        item.setdefault("phase", index + 1)
        item["duration"] = coerce_duration(item.get("duration"))
        normalized.append(item)
    return normalized


def total_duration(phases: Optional[List[Dict[str, Any]]]) -> int:
    return sum(p["duration"] for p in normalize_phases(phases))


def _validate_details(data: Dict[str, Any]) -> Dict[str, str]:
    errors = {}
    name = (data.get("name") or "").strip()
    if len(name) < MIN_NAME_LENGTH:
        errors["name"] = "Nama proyek minimal 3 karakter"
    category = data.get("application_category")
    if not category:
        errors["application_category"] = "Pilih kategori permohonan"
    elif category not in APPLICATION_CATEGORIES:
        errors["application_category"] = "Kategori permohonan tidak valid"
    application_type = data.get("application_type")
    if not application_type:
        errors["application_type"] = "Pilih jenis permohonan"
    elif category in APPLICATION_TYPES and application_type not in APPLICATION_TYPES[category]:
        errors["application_type"] = "Jenis permohonan tidak sesuai kategori"
    if not data.get("location"):
        errors["location"] = "Lokasi harus diisi"
    if not data.get("city"):
        errors["city"] = "Kota harus diisi"
    return errors


def _validate_client(data: Dict[str, Any]) -> Dict[str, str]:
    if not data.get("client_id"):
        return {"client_id": "Pilih klien"}
    return {}


def _validate_timeline(data: Dict[str, Any]) -> Dict[str, str]:
    if not data.get("phases"):
        return {"phases": "Timeline proyek harus memiliki minimal satu fase"}
    return {}


def _validate_team(data: Dict[str, Any]) -> Dict[str, str]:
    if not data.get("project_lead_id"):
        return {"project_lead_id": "Pilih Project Lead"}
    return {}


_VALIDATORS = {
    STEP_DETAILS: _validate_details,
    STEP_CLIENT: _validate_client,
    STEP_TIMELINE: _validate_timeline,
    STEP_TEAM: _validate_team,
}


def validate_step(step: int, data: Dict[str, Any]) -> Dict[str, str]:
    if step not in _VALIDATORS:
        raise ValueError(f"Unknown wizard step: {step}")
    return _VALIDATORS[step](data)


def validate_all(data: Dict[str, Any]) -> Dict[str, str]:
    """Errors from every step merged into one map"""
    errors: Dict[str, str] = {}
    for step in range(len(STEPS)):
        errors.update(validate_step(step, data))
    return errors


def first_invalid_step(data: Dict[str, Any]) -> Optional[int]:
    for step in range(len(STEPS)):
        if validate_step(step, data):
            return step
    return None


def next_step(current: int, data: Dict[str, Any]) -> int:
    """Advance only when the current step validates; clamped to the last step"""
    if validate_step(current, data):
        return current
    return min(current + 1, LAST_STEP)


def prev_step(current: int) -> int:
    return max(current - 1, 0)
