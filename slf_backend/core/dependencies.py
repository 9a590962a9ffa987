"""
Core dependencies for route protection and role checking
"""

from fastapi import Depends, HTTPException, Request, Security, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from slf_backend.database.supabase_client import get_supabase
from slf_backend.modules.auth.service import AuthService
from slf_backend.core.guards import check_role_access, has_permission, LOGIN_PATH, DASHBOARD_ROOT
from slf_backend.config.roles_config import (
    SUPERADMIN, ADMIN_LEAD, HEAD_CONSULTANT, PROJECT_LEAD, CLIENT
)
from supabase import Client
from typing import Any, Dict, List, Optional
import logging

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)

# Roles that see every project without team membership
PROJECT_WIDE_ROLES = {SUPERADMIN, ADMIN_LEAD, HEAD_CONSULTANT}


def _get_request_cache(request: Request) -> Dict[str, Any]:
    """Return request-scoped cache for access data (accessible project ids)."""
    if not hasattr(request.state, "access_cache"):
        request.state.access_cache = {}
    return request.state.access_cache


def get_auth_service(supabase: Client = Depends(get_supabase)) -> AuthService:
    return AuthService(supabase)


def unauthenticated(detail: str = "Silakan login terlebih dahulu") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail={"message": detail, "redirect_to": LOGIN_PATH},
        headers={"WWW-Authenticate": "Bearer"},
    )


def forbidden(detail: str = "Anda tidak memiliki akses ke halaman ini") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_403_FORBIDDEN,
        detail={"message": detail, "redirect_to": DASHBOARD_ROOT},
    )


def get_current_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(security)
) -> str:
    """Extract JWT token from Authorization header"""
    if credentials is None or not credentials.credentials:
        raise unauthenticated()
    return credentials.credentials


def get_current_user(
    token: str = Depends(get_current_token),
    auth_service: AuthService = Depends(get_auth_service)
) -> dict:
    """Current auth user merged with profile and normalized role"""
    try:
        return auth_service.resolve_user(token)
    except HTTPException as e:
        if e.status_code == status.HTTP_401_UNAUTHORIZED:
            raise unauthenticated(e.detail if isinstance(e.detail, str) else "Sesi tidak valid")
        raise


def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(security),
    auth_service: AuthService = Depends(get_auth_service)
) -> Optional[dict]:
    """Like get_current_user, but returns None instead of failing when there is no valid session."""
    if credentials is None or not credentials.credentials:
        return None
    try:
        return auth_service.resolve_user(credentials.credentials)
    except HTTPException:
        return None


def is_super_user(user_data: dict) -> bool:
    return user_data.get("role") == SUPERADMIN


def require_role(*allowed_roles: str):
    """Factory for the role-gated page guard: 401 -> /login without a session, 403 -> /dashboard on role mismatch."""
    def check_role(user_data: dict = Depends(get_current_user)) -> dict:
        if not check_role_access(user_data.get("role"), allowed_roles):
            logger.info(
                "Role %s denied; required one of %s", user_data.get("role"), ", ".join(allowed_roles)
            )
            raise forbidden()
        return user_data
    return check_role


def require_permission(required_permission: str):
    """Factory function to create permission check dependency backed by the access matrix"""
    def check_permission(user_data: dict = Depends(get_current_user)) -> dict:
        if not has_permission(user_data.get("role"), required_permission):
            raise forbidden(f"Akses ditolak. Dibutuhkan: {required_permission}")
        return user_data
    return check_permission


def get_access_cache(request: Request) -> Dict[str, Any]:
    return _get_request_cache(request)


def get_accessible_project_ids(
    user_data: dict, supabase: Client, cache: Optional[Dict[str, Any]] = None
) -> Optional[List[str]]:
    """
    Project ids the user may see, or None when the role sees every project.
    project_lead: projects they lead or are on the team of; client: projects of their client_id;
    other staff: projects they are on the team of.
    """
    if user_data.get("role") in PROJECT_WIDE_ROLES:
        return None
    if cache is not None and "project_ids" in cache:
        return cache["project_ids"]
    user_id = user_data["id"]
    ids = set()
    try:
        if user_data.get("role") == CLIENT:
            if user_data.get("client_id"):
                result = supabase.table("projects")\
                    .select("id")\
                    .eq("client_id", user_data["client_id"])\
                    .execute()
                ids.update(p["id"] for p in (result.data or []))
        else:
            team_result = supabase.table("project_teams")\
                .select("project_id")\
                .eq("user_id", user_id)\
                .execute()
            ids.update(t["project_id"] for t in (team_result.data or []))
            if user_data.get("role") == PROJECT_LEAD:
                lead_result = supabase.table("projects")\
                    .select("id")\
                    .eq("project_lead_id", user_id)\
                    .execute()
                ids.update(p["id"] for p in (lead_result.data or []))
    except Exception as e:
        logger.error(f"Error getting accessible project ids: {e}")
        raise HTTPException(status_code=500, detail="Gagal memuat akses proyek")
    project_ids = sorted(ids)
    if cache is not None:
        cache["project_ids"] = project_ids
    return project_ids


def check_project_access(project_id: str, user_data: dict, supabase: Client) -> dict:
    """403 unless the project is within the user's accessible projects"""
    accessible = get_accessible_project_ids(user_data, supabase)
    if accessible is not None and project_id not in accessible:
        raise forbidden("Anda tidak memiliki akses ke proyek ini")
    return user_data
