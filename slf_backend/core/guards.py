"""
Role helpers and the dashboard navigation guard.
Pure functions; no Supabase access here so they can be reused by dependencies and routes.
"""

from typing import Iterable, Optional
from slf_backend.config.roles_config import (
    ROLES, ROLE_ALIASES, LEGACY_URL_SEGMENTS, DEFAULT_ROLE, SUPERADMIN, ACCESS
)

LOGIN_PATH = "/login"
DASHBOARD_ROOT = "/dashboard"


def normalize_role(raw_role: Optional[str]) -> str:
    """Normalize a role read from profiles: trim, lowercase, spaces to underscores. Missing -> client."""
    if not raw_role or not str(raw_role).strip():
        return DEFAULT_ROLE
    role = "_".join(str(raw_role).strip().lower().split())
    return ROLE_ALIASES.get(role, role)


def role_label(role: Optional[str]) -> str:
    if not role:
        return "N/A"
    key = ROLE_ALIASES.get(role.lower(), role.lower())
    if key in ROLES:
        return ROLES[key]["label"]
    return " ".join(part.capitalize() for part in role.split("_"))


def dashboard_path(role: Optional[str]) -> str:
    """Dashboard root for a role; unknown roles land on the client dashboard."""
    key = normalize_role(role)
    meta = ROLES.get(key) or ROLES[DEFAULT_ROLE]
    return f"{DASHBOARD_ROOT}/{meta['url_segment']}"


def url_segment_to_role(segment: Optional[str]) -> Optional[str]:
    if not segment:
        return None
    for role, meta in ROLES.items():
        if meta["url_segment"] == segment:
            return role
    if segment in LEGACY_URL_SEGMENTS:
        return LEGACY_URL_SEGMENTS[segment]
    return segment.replace("-", "_")


def _role_dashboard_roots():
    roots = {f"{DASHBOARD_ROOT}/{meta['url_segment']}" for meta in ROLES.values()}
    roots.update(f"{DASHBOARD_ROOT}/{segment}" for segment in LEGACY_URL_SEGMENTS)
    return roots


def resolve_redirect(pathname: str, role: Optional[str], authenticated: bool) -> Optional[str]:
    """
    Decide where a navigation to `pathname` must be redirected, or None to let it through.

    Unauthenticated users are only bounced from the dashboard area. Authenticated users
    hitting the landing page (or the bare dashboard) go to their own dashboard, and
    visiting another role's dashboard root sends them back to their own.
    """
    path = pathname.rstrip("/") or "/"
    if not authenticated:
        if path == DASHBOARD_ROOT or path.startswith(DASHBOARD_ROOT + "/"):
            return LOGIN_PATH
        return None

    target = dashboard_path(role)
    if path in ("/", DASHBOARD_ROOT):
        return target
    if path != target and path in _role_dashboard_roots():
        return target
    return None


def check_role_access(role: Optional[str], allowed_roles: Iterable[str]) -> bool:
    """True if `role` satisfies the page's allowed roles. Empty list means any signed-in role."""
    allowed = {normalize_role(r) for r in allowed_roles}
    if not allowed:
        return True
    current = normalize_role(role)
    if current == SUPERADMIN:
        return True
    return current in allowed


def has_permission(role: Optional[str], permission: str) -> bool:
    return normalize_role(role) in ACCESS.get(permission, [SUPERADMIN])
