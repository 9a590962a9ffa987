from fastapi import APIRouter, Depends, HTTPException, status
from slf_backend.database.supabase_client import get_supabase, get_service_supabase
from slf_backend.modules.profiles.schemas import (
    ProfileUpdate, ProfileResponse, ProfileRoleUpdate, ProfileStatusUpdate
)
from slf_backend.modules.profiles.service import ProfileService
from slf_backend.core.dependencies import require_permission, get_current_user, is_super_user
from supabase import Client
from typing import List, Dict, Optional

router = APIRouter(prefix="/profiles", tags=["profiles"])


def get_profile_service(supabase: Client = Depends(get_supabase)) -> ProfileService:
    return ProfileService(supabase)


def get_admin_profile_service(supabase: Client = Depends(get_service_supabase)) -> ProfileService:
    """Role and status changes go through the service-role client"""
    return ProfileService(supabase)


@router.get("", response_model=List[ProfileResponse])
async def list_profiles(
    role: Optional[str] = None,
    exclude_clients: bool = False,
    search: Optional[str] = None,
    user_data: Dict = Depends(require_permission("profiles:read")),
    service: ProfileService = Depends(get_profile_service)
):
    """List profiles (staff pickers use exclude_clients=true)"""
    return service.list_profiles(role=role, exclude_clients=exclude_clients, search=search)


@router.get("/{profile_id}", response_model=ProfileResponse)
async def get_profile(
    profile_id: str,
    user_data: Dict = Depends(get_current_user),
    service: ProfileService = Depends(get_profile_service)
):
    """Get a profile (own profile, or any profile for staff with profiles:read)"""
    if profile_id != user_data["id"]:
        require_permission("profiles:read")(user_data)
    return service.get_profile(profile_id)


@router.put("/{profile_id}", response_model=ProfileResponse)
async def update_profile(
    profile_id: str,
    profile_data: ProfileUpdate,
    user_data: Dict = Depends(get_current_user),
    service: ProfileService = Depends(get_profile_service)
):
    """Update own profile (superadmin may update anyone)"""
    if profile_id != user_data["id"] and not is_super_user(user_data):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Hanya dapat mengubah profil sendiri")
    return service.update_profile(profile_id, profile_data)


@router.put("/{profile_id}/role", response_model=ProfileResponse)
async def set_profile_role(
    profile_id: str,
    body: ProfileRoleUpdate,
    user_data: Dict = Depends(require_permission("profiles:manage")),
    service: ProfileService = Depends(get_admin_profile_service)
):
    return service.set_role(profile_id, body.role)


@router.put("/{profile_id}/status", response_model=ProfileResponse)
async def set_profile_status(
    profile_id: str,
    body: ProfileStatusUpdate,
    user_data: Dict = Depends(require_permission("profiles:manage")),
    service: ProfileService = Depends(get_admin_profile_service)
):
    """Approve, reject or suspend a user account"""
    return service.set_status(profile_id, body.status)
