from supabase import Client
from slf_backend.modules.schedules.schemas import (
    ScheduleCreate, ScheduleUpdate, ScheduleResponse, ScheduleStats, ScheduleListResponse
)
from slf_backend.core.filters import matches_search, matches_filter, index_by_id, parse_timestamp
from typing import Any, Dict, List, Optional
from fastapi import HTTPException
from datetime import datetime, timezone
import logging

logger = logging.getLogger(__name__)

SCHEDULE_SELECT = "*, projects (id, name)"


def is_upcoming(schedule: ScheduleResponse, now: Optional[datetime] = None) -> bool:
    when = parse_timestamp(schedule.schedule_date)
    if when is None:
        return False
    if when.tzinfo is None:
        when = when.replace(tzinfo=timezone.utc)
    return when > (now or datetime.now(timezone.utc)) and schedule.status != "completed"


class ScheduleService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def _assignee_names(self, rows: List[Dict[str, Any]]) -> Dict[str, str]:
        ids = sorted({s["assigned_to"] for s in rows if s.get("assigned_to")})
        if not ids:
            return {}
        profiles = self.supabase.table("profiles").select("id, full_name").in_("id", ids).execute()
        return {pid: p.get("full_name") for pid, p in index_by_id(profiles.data).items()}

    def _to_response(self, row: Dict[str, Any], assignees: Dict[str, str]) -> ScheduleResponse:
        project = row.get("projects") or {}
        data = {k: v for k, v in row.items() if k != "projects"}
        return ScheduleResponse(
            **data,
            project_name=project.get("name") or "-",
            assignee_name=assignees.get(row.get("assigned_to")) or "-",
        )

    def list_schedules(
        self,
        accessible_project_ids: Optional[List[str]] = None,
        search: Optional[str] = None,
        schedule_type: Optional[str] = None,
        status: Optional[str] = None,
        upcoming_only: bool = False,
    ) -> ScheduleListResponse:
        """Schedules by date ascending with project and assignee names; stats cover the unfiltered list"""
        if accessible_project_ids is not None and not accessible_project_ids:
            return ScheduleListResponse(schedules=[], stats=ScheduleStats())
        try:
            query = self.supabase.table("schedules").select(SCHEDULE_SELECT)
            if accessible_project_ids is not None:
                query = query.in_("project_id", accessible_project_ids)
            rows = query.order("schedule_date").execute().data or []
            assignees = self._assignee_names(rows)
        except Exception as e:
            logger.error(f"Error fetching schedules: {e}")
            raise HTTPException(status_code=500, detail="Gagal memuat jadwal")

        schedules = [self._to_response(row, assignees) for row in rows]
        now = datetime.now(timezone.utc)
        stats = ScheduleStats(
            total=len(schedules),
            upcoming=sum(1 for s in schedules if is_upcoming(s, now)),
            inspections=sum(1 for s in schedules if s.schedule_type == "inspection"),
            meetings=sum(1 for s in schedules if s.schedule_type == "meeting"),
        )
        filtered = [
            s for s in schedules
            if matches_search(search, s.title, s.project_name)
            and matches_filter(s.schedule_type, schedule_type)
            and matches_filter(s.status, status)
            and (not upcoming_only or is_upcoming(s, now))
        ]
        return ScheduleListResponse(schedules=filtered, stats=stats)

    def get_schedule(self, schedule_id: str) -> ScheduleResponse:
        try:
            result = self.supabase.table("schedules")\
                .select(SCHEDULE_SELECT)\
                .eq("id", schedule_id)\
                .maybe_single()\
                .execute()
            if not result or not result.data:
                raise HTTPException(status_code=404, detail="Jadwal tidak ditemukan")
            return self._to_response(result.data, self._assignee_names([result.data]))
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error fetching schedule {schedule_id}: {e}")
            raise HTTPException(status_code=500, detail="Gagal memuat jadwal")

    def create_schedule(self, schedule_data: ScheduleCreate, user_id: str) -> ScheduleResponse:
        insert_data = schedule_data.model_dump(mode="json")
        insert_data["created_by"] = user_id
        try:
            result = self.supabase.table("schedules").insert(insert_data).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Gagal membuat jadwal")
            assignees = self._assignee_names(result.data)
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error creating schedule: {e}")
            raise HTTPException(status_code=500, detail="Gagal membuat jadwal")
        logger.info(f"Schedule created: {result.data[0].get('id')} by {user_id}")
        return self._to_response(result.data[0], assignees)

    def update_schedule(self, schedule_id: str, schedule_data: ScheduleUpdate) -> ScheduleResponse:
        # created_by is never part of the update payload, so the original creator is kept
        update_data = schedule_data.model_dump(mode="json", exclude_none=True)
        if not update_data:
            return self.get_schedule(schedule_id)
        try:
            result = self.supabase.table("schedules")\
                .update(update_data)\
                .eq("id", schedule_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Jadwal tidak ditemukan")
            assignees = self._assignee_names(result.data)
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error updating schedule {schedule_id}: {e}")
            raise HTTPException(status_code=500, detail="Gagal memperbarui jadwal")
        return self._to_response(result.data[0], assignees)

    def delete_schedule(self, schedule_id: str) -> bool:
        try:
            result = self.supabase.table("schedules").delete().eq("id", schedule_id).execute()
        except Exception as e:
            logger.error(f"Error deleting schedule {schedule_id}: {e}")
            raise HTTPException(status_code=500, detail="Gagal menghapus jadwal")
        if not result.data:
            raise HTTPException(status_code=404, detail="Jadwal tidak ditemukan")
        return True
