from fastapi import APIRouter, Depends
from slf_backend.database.supabase_client import get_supabase
from slf_backend.modules.timeline.schemas import TimelineResponse
from slf_backend.modules.timeline.service import TimelineService
from slf_backend.core.dependencies import require_permission, get_access_cache, get_accessible_project_ids
from supabase import Client
from typing import Dict, Optional

router = APIRouter(prefix="/timeline", tags=["timeline"])


def get_timeline_service(supabase: Client = Depends(get_supabase)) -> TimelineService:
    return TimelineService(supabase)


@router.get("", response_model=TimelineResponse)
async def get_timeline(
    search: Optional[str] = None,
    project_id: Optional[str] = None,
    status: Optional[str] = None,
    user_data: Dict = Depends(require_permission("timeline:read")),
    service: TimelineService = Depends(get_timeline_service),
    supabase: Client = Depends(get_supabase),
    cache: Dict = Depends(get_access_cache)
):
    """Project status, schedule and document events, newest first"""
    accessible = get_accessible_project_ids(user_data, supabase, cache)
    return service.get_timeline(
        accessible_project_ids=accessible,
        search=search,
        project_id=project_id if project_id != "all" else None,
        status=status,
    )
