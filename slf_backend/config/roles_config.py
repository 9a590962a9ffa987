"""
Roles and Access Configuration
Defines the staff/client roles, their display labels and dashboard paths,
and the access matrix that maps module actions to the roles allowed to use them.
"""

SUPERADMIN = "superadmin"
HEAD_CONSULTANT = "head_consultant"
ADMIN_LEAD = "admin_lead"
ADMIN_TEAM = "admin_team"
PROJECT_LEAD = "project_lead"
INSPECTOR = "inspector"
DRAFTER = "drafter"
CLIENT = "client"

# Database role -> metadata. project_lead is shown as "Team Leader" in the UI.
ROLES = {
    SUPERADMIN: {
        "label": "Super Admin",
        "url_segment": "superadmin",
        "description": "Administrator sistem dengan akses penuh",
        "selectable": False,
    },
    HEAD_CONSULTANT: {
        "label": "Head Consultant",
        "url_segment": "head-consultant",
        "description": "Kepala konsultan",
        "selectable": True,
    },
    ADMIN_LEAD: {
        "label": "Admin Lead",
        "url_segment": "admin-lead",
        "description": "Lead administrator dengan akses terbatas",
        "selectable": True,
    },
    ADMIN_TEAM: {
        "label": "Admin Team",
        "url_segment": "admin-team",
        "description": "Anggota tim admin",
        "selectable": True,
    },
    PROJECT_LEAD: {
        "label": "Team Leader",
        "url_segment": "team-leader",
        "description": "Lead proyek",
        "selectable": True,
    },
    INSPECTOR: {
        "label": "Inspector",
        "url_segment": "inspector",
        "description": "Melakukan inspeksi dan pemeriksaan teknis",
        "selectable": True,
    },
    DRAFTER: {
        "label": "Drafter",
        "url_segment": "drafter",
        "description": "Pembuat draft",
        "selectable": True,
    },
    CLIENT: {
        "label": "Klien",
        "url_segment": "client",
        "description": "Melihat laporan dan mengelola aset",
        "selectable": True,
    },
}

# UI aliases accepted on input
ROLE_ALIASES = {
    "team_leader": PROJECT_LEAD,
}

# URL segments that are not the canonical one but still resolve to a role
LEGACY_URL_SEGMENTS = {
    "project-lead": PROJECT_LEAD,
}

DEFAULT_ROLE = CLIENT

ADMIN_ROLES = [SUPERADMIN, ADMIN_LEAD, ADMIN_TEAM]
MANAGEMENT_ROLES = [SUPERADMIN, HEAD_CONSULTANT, ADMIN_LEAD, ADMIN_TEAM]
TEAM_ROLES = [PROJECT_LEAD, INSPECTOR, DRAFTER, ADMIN_TEAM]

USER_STATUSES = ["pending", "approved", "rejected", "suspended"]

INSPECTOR_SPECIALIZATIONS = {
    "struktur": "Struktur",
    "arsitektur": "Arsitektur",
    "mep": "MEP",
}

# Module actions and the roles allowed to perform them (superadmin always passes).
ACCESS_MATRIX = {
    "profiles": {
        "read": MANAGEMENT_ROLES + [PROJECT_LEAD],
        "manage": [SUPERADMIN],
    },
    "clients": {
        "read": MANAGEMENT_ROLES + [PROJECT_LEAD],
        "create": [ADMIN_LEAD, ADMIN_TEAM],
        "update": [ADMIN_LEAD, ADMIN_TEAM],
        "delete": [ADMIN_LEAD],
    },
    "projects": {
        "read": list(ROLES.keys()),
        "create": [ADMIN_LEAD],
        "update": [ADMIN_LEAD, HEAD_CONSULTANT, PROJECT_LEAD],
    },
    "teams": {
        "read": MANAGEMENT_ROLES + [PROJECT_LEAD],
        "manage": [ADMIN_LEAD, HEAD_CONSULTANT],
    },
    "documents": {
        "read": list(ROLES.keys()),
        "upload": [CLIENT, DRAFTER, INSPECTOR, ADMIN_TEAM, ADMIN_LEAD],
        "verify": [ADMIN_LEAD, ADMIN_TEAM, HEAD_CONSULTANT],
    },
    "payments": {
        "read": [ADMIN_LEAD, ADMIN_TEAM, HEAD_CONSULTANT, CLIENT],
        "upload": [CLIENT],
        "verify": [ADMIN_LEAD],
    },
    "schedules": {
        "read": list(ROLES.keys()),
        "manage": [ADMIN_LEAD, ADMIN_TEAM, PROJECT_LEAD],
    },
    "timeline": {
        "read": list(ROLES.keys()),
    },
    "messages": {
        "read": list(ROLES.keys()),
        "send": list(ROLES.keys()),
    },
}


def get_access_matrix():
    """
    Returns a flat mapping of permission name to allowed roles.
    Format: {"payments:verify": ["superadmin", "admin_lead"], ...}
    Superadmin is prepended to every entry.
    """
    matrix = {}
    for module_name, actions in ACCESS_MATRIX.items():
        for action, roles in actions.items():
            allowed = [SUPERADMIN] + [r for r in roles if r != SUPERADMIN]
            matrix[f"{module_name}:{action}"] = allowed
    return matrix


def get_selectable_roles():
    """Roles offered in registration and role-change pickers (superadmin excluded)."""
    return [
        {"value": role, "label": meta["label"], "description": meta["description"]}
        for role, meta in ROLES.items()
        if meta["selectable"]
    ]


ACCESS = get_access_matrix()
