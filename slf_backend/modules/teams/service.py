from supabase import Client
from slf_backend.modules.teams.schemas import (
    TeamMemberCreate, TeamMemberResponse, TeamListResponse, MemberPerformance
)
from slf_backend.core.filters import matches_search, matches_filter
from slf_backend.core.guards import role_label
from typing import Any, Dict, List, Optional
from fastapi import HTTPException
from collections import Counter
import logging

logger = logging.getLogger(__name__)

TEAM_SELECT = "*, profiles:user_id (id, full_name, email, phone_number, specialization, role)"

COMPLETED_STATUSES = ("completed", "slf_issued")
CLOSED_STATUSES = ("completed", "cancelled", "slf_issued")


def to_member_response(row: Dict[str, Any], project_names: Dict[str, str]) -> TeamMemberResponse:
    profile = row.get("profiles") or {}
    data = {k: v for k, v in row.items() if k != "profiles"}
    return TeamMemberResponse(
        **data,
        project_name=project_names.get(row.get("project_id")) or "Proyek Tidak Dikenal",
        role_label=role_label(row.get("role")),
        full_name=profile.get("full_name") or "N/A",
        email=profile.get("email"),
        phone=profile.get("phone_number"),
        specialization=profile.get("specialization"),
        profile_role=profile.get("role"),
    )


class TeamService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def list_members(
        self,
        accessible_project_ids: Optional[List[str]] = None,
        search: Optional[str] = None,
        role: Optional[str] = None,
        project_id: Optional[str] = None,
    ) -> TeamListResponse:
        """Team rows across projects; `roles` lists the distinct roles present before filtering"""
        if accessible_project_ids is not None and not accessible_project_ids:
            return TeamListResponse(members=[], roles=[], projects=[])
        try:
            projects_query = self.supabase.table("projects").select("id, name")
            team_query = self.supabase.table("project_teams").select(TEAM_SELECT)
            if accessible_project_ids is not None:
                projects_query = projects_query.in_("id", accessible_project_ids)
                team_query = team_query.in_("project_id", accessible_project_ids)
            projects = projects_query.order("created_at", desc=True).execute().data or []
            rows = team_query.order("created_at", desc=True).execute().data or []
        except Exception as e:
            logger.error(f"Error fetching team data: {e}")
            raise HTTPException(status_code=500, detail="Gagal memuat data tim")

        project_names = {p["id"]: p.get("name") for p in projects}
        members = [to_member_response(row, project_names) for row in rows]
        roles = sorted({m.role for m in members if m.role})
        filtered = [
            m for m in members
            if matches_search(search, m.full_name, m.email, m.specialization, m.project_name)
            and matches_filter(m.role, role)
            and matches_filter(m.project_id, project_id)
        ]
        return TeamListResponse(members=filtered, roles=roles, projects=projects)

    def add_member(self, member: TeamMemberCreate) -> TeamMemberResponse:
        try:
            existing = self.supabase.table("project_teams")\
                .select("id")\
                .eq("project_id", member.project_id)\
                .eq("user_id", member.user_id)\
                .eq("role", member.role)\
                .execute()
            if existing.data:
                raise HTTPException(status_code=400, detail="Anggota sudah terdaftar di tim proyek ini")
            result = self.supabase.table("project_teams").insert(member.model_dump()).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Gagal menambahkan anggota tim")
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error adding team member {member.user_id} to {member.project_id}: {e}")
            raise HTTPException(status_code=500, detail="Gagal menambahkan anggota tim")
        logger.info(f"Team member added: {member.user_id} as {member.role} on {member.project_id}")
        return to_member_response(result.data[0], {})

    def get_member(self, member_id: str) -> Dict[str, Any]:
        try:
            result = self.supabase.table("project_teams")\
                .select("*")\
                .eq("id", member_id)\
                .maybe_single()\
                .execute()
        except Exception as e:
            logger.error(f"Error fetching team member {member_id}: {e}")
            raise HTTPException(status_code=500, detail="Gagal memuat data tim")
        if not result or not result.data:
            raise HTTPException(status_code=404, detail="Anggota tim tidak ditemukan")
        return result.data

    def remove_member(self, member_id: str) -> bool:
        try:
            result = self.supabase.table("project_teams").delete().eq("id", member_id).execute()
        except Exception as e:
            logger.error(f"Error removing team member {member_id}: {e}")
            raise HTTPException(status_code=500, detail="Gagal menghapus anggota tim")
        if not result.data:
            raise HTTPException(status_code=404, detail="Anggota tim tidak ditemukan")
        return True

    def get_performance(self, user_id: str) -> MemberPerformance:
        """Projects a staff member leads or is assigned to, with counts per project status"""
        try:
            profile = self.supabase.table("profiles")\
                .select("id, full_name, role")\
                .eq("id", user_id)\
                .maybe_single()\
                .execute()
            if not profile or not profile.data:
                raise HTTPException(status_code=404, detail="Pengguna tidak ditemukan")
            assignments = self.supabase.table("project_teams")\
                .select("project_id")\
                .eq("user_id", user_id)\
                .execute()
            led = self.supabase.table("projects")\
                .select("id")\
                .eq("project_lead_id", user_id)\
                .execute()
            project_ids = sorted(
                {a["project_id"] for a in (assignments.data or [])} | {p["id"] for p in (led.data or [])}
            )
            projects = []
            if project_ids:
                projects = self.supabase.table("projects")\
                    .select("id, name, status, application_type, created_at")\
                    .in_("id", project_ids)\
                    .order("created_at", desc=True)\
                    .execute().data or []
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error loading performance for {user_id}: {e}")
            raise HTTPException(status_code=500, detail="Gagal memuat data performa")

        counts = Counter(p.get("status") or "draft" for p in projects)
        return MemberPerformance(
            user_id=user_id,
            full_name=profile.data.get("full_name"),
            role=profile.data.get("role"),
            role_label=role_label(profile.data.get("role")),
            projects=projects,
            status_counts=dict(counts),
            total_projects=len(projects),
            active_projects=sum(n for s, n in counts.items() if s not in CLOSED_STATUSES),
            completed_projects=sum(n for s, n in counts.items() if s in COMPLETED_STATUSES),
        )
