from fastapi import APIRouter, Depends
from slf_backend.database.supabase_client import get_supabase
from slf_backend.modules.teams.schemas import (
    TeamMemberCreate, TeamMemberResponse, TeamListResponse, MemberPerformance
)
from slf_backend.modules.teams.service import TeamService
from slf_backend.core.dependencies import (
    require_permission, require_role, get_access_cache, get_accessible_project_ids, check_project_access
)
from slf_backend.config.roles_config import HEAD_CONSULTANT
from supabase import Client
from typing import Dict, Optional

router = APIRouter(prefix="/teams", tags=["teams"])


def get_team_service(supabase: Client = Depends(get_supabase)) -> TeamService:
    return TeamService(supabase)


@router.get("", response_model=TeamListResponse)
async def list_team_members(
    search: Optional[str] = None,
    role: Optional[str] = None,
    project_id: Optional[str] = None,
    user_data: Dict = Depends(require_permission("teams:read")),
    service: TeamService = Depends(get_team_service),
    supabase: Client = Depends(get_supabase),
    cache: Dict = Depends(get_access_cache)
):
    accessible = get_accessible_project_ids(user_data, supabase, cache)
    return service.list_members(
        accessible_project_ids=accessible,
        search=search,
        role=role,
        project_id=project_id,
    )


@router.post("", response_model=TeamMemberResponse, status_code=201)
async def add_team_member(
    member: TeamMemberCreate,
    user_data: Dict = Depends(require_permission("teams:manage")),
    service: TeamService = Depends(get_team_service),
    supabase: Client = Depends(get_supabase)
):
    check_project_access(member.project_id, user_data, supabase)
    return service.add_member(member)


@router.delete("/{member_id}", status_code=204)
async def remove_team_member(
    member_id: str,
    user_data: Dict = Depends(require_permission("teams:manage")),
    service: TeamService = Depends(get_team_service),
    supabase: Client = Depends(get_supabase)
):
    member = service.get_member(member_id)
    check_project_access(member["project_id"], user_data, supabase)
    service.remove_member(member_id)
    return None


@router.get("/{user_id}/performance", response_model=MemberPerformance)
async def get_member_performance(
    user_id: str,
    user_data: Dict = Depends(require_role(HEAD_CONSULTANT)),
    service: TeamService = Depends(get_team_service)
):
    """Head consultant view of one team member's projects"""
    return service.get_performance(user_id)
