from supabase import Client
from slf_backend.modules.timeline.schemas import TimelineEvent, TimelineResponse
from slf_backend.modules.timeline.builder import build_timeline, filter_events
from typing import List, Optional
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)


class TimelineService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def get_timeline(
        self,
        accessible_project_ids: Optional[List[str]] = None,
        search: Optional[str] = None,
        project_id: Optional[str] = None,
        status: Optional[str] = None,
    ) -> TimelineResponse:
        """Merged project, schedule and document activity for the projects the caller can see"""
        scope = accessible_project_ids
        if project_id:
            scope = [project_id] if scope is None or project_id in scope else []
        if scope is not None and not scope:
            return TimelineResponse(events=[], projects=[])

        try:
            projects_query = self.supabase.table("projects").select("id, name, status, created_at")
            schedules_query = self.supabase.table("schedules").select("*")
            documents_query = self.supabase.table("documents").select("*")
            if scope is not None:
                projects_query = projects_query.in_("id", scope)
                schedules_query = schedules_query.in_("project_id", scope)
                documents_query = documents_query.in_("project_id", scope)
            projects = projects_query.order("created_at", desc=True).execute().data or []
            schedules = schedules_query.order("schedule_date", desc=True).execute().data or []
            documents = documents_query.order("created_at", desc=True).execute().data or []
        except Exception as e:
            logger.error(f"Error fetching timeline data: {e}")
            raise HTTPException(status_code=500, detail="Gagal memuat data timeline")

        events = filter_events(
            build_timeline(projects, schedules, documents),
            search=search,
            project_id=project_id,
            status=status,
        )
        return TimelineResponse(
            events=[TimelineEvent(**e) for e in events],
            projects=[{"id": p["id"], "name": p.get("name")} for p in projects],
        )
