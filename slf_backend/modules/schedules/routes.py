from fastapi import APIRouter, Depends
from slf_backend.database.supabase_client import get_supabase
from slf_backend.modules.schedules.schemas import (
    ScheduleCreate, ScheduleUpdate, ScheduleResponse, ScheduleListResponse
)
from slf_backend.modules.schedules.service import ScheduleService
from slf_backend.core.dependencies import (
    require_permission, get_access_cache, get_accessible_project_ids, check_project_access
)
from supabase import Client
from typing import Dict, Optional

router = APIRouter(prefix="/schedules", tags=["schedules"])


def get_schedule_service(supabase: Client = Depends(get_supabase)) -> ScheduleService:
    return ScheduleService(supabase)


@router.get("", response_model=ScheduleListResponse)
async def list_schedules(
    search: Optional[str] = None,
    schedule_type: Optional[str] = None,
    status: Optional[str] = None,
    upcoming_only: bool = False,
    user_data: Dict = Depends(require_permission("schedules:read")),
    service: ScheduleService = Depends(get_schedule_service),
    supabase: Client = Depends(get_supabase),
    cache: Dict = Depends(get_access_cache)
):
    accessible = get_accessible_project_ids(user_data, supabase, cache)
    return service.list_schedules(
        accessible_project_ids=accessible,
        search=search,
        schedule_type=schedule_type,
        status=status,
        upcoming_only=upcoming_only,
    )


@router.post("", response_model=ScheduleResponse, status_code=201)
async def create_schedule(
    schedule_data: ScheduleCreate,
    user_data: Dict = Depends(require_permission("schedules:manage")),
    service: ScheduleService = Depends(get_schedule_service),
    supabase: Client = Depends(get_supabase)
):
    check_project_access(schedule_data.project_id, user_data, supabase)
    return service.create_schedule(schedule_data, user_data["id"])


@router.get("/{schedule_id}", response_model=ScheduleResponse)
async def get_schedule(
    schedule_id: str,
    user_data: Dict = Depends(require_permission("schedules:read")),
    service: ScheduleService = Depends(get_schedule_service),
    supabase: Client = Depends(get_supabase)
):
    schedule = service.get_schedule(schedule_id)
    if schedule.project_id:
        check_project_access(schedule.project_id, user_data, supabase)
    return schedule


@router.put("/{schedule_id}", response_model=ScheduleResponse)
async def update_schedule(
    schedule_id: str,
    schedule_data: ScheduleUpdate,
    user_data: Dict = Depends(require_permission("schedules:manage")),
    service: ScheduleService = Depends(get_schedule_service),
    supabase: Client = Depends(get_supabase)
):
    existing = service.get_schedule(schedule_id)
    if existing.project_id:
        check_project_access(existing.project_id, user_data, supabase)
    return service.update_schedule(schedule_id, schedule_data)


@router.delete("/{schedule_id}", status_code=204)
async def delete_schedule(
    schedule_id: str,
    user_data: Dict = Depends(require_permission("schedules:manage")),
    service: ScheduleService = Depends(get_schedule_service),
    supabase: Client = Depends(get_supabase)
):
    existing = service.get_schedule(schedule_id)
    if existing.project_id:
        check_project_access(existing.project_id, user_data, supabase)
    service.delete_schedule(schedule_id)
    return None
