from supabase import Client
from slf_backend.modules.projects.schemas import (
    ProjectWizardData, ProjectResponse, ProjectDetailResponse, ProjectUpdate, WizardOptionsResponse
)
from slf_backend.modules.projects import wizard
from slf_backend.core.filters import matches_search, matches_filter
from slf_backend.core.guards import role_label
from slf_backend.config.workflow_config import (
    APPLICATION_CATEGORIES, category_of, project_status_label
)
from slf_backend.config.roles_config import PROJECT_LEAD, INSPECTOR
from typing import Any, Dict, List, Optional
from fastapi import HTTPException
from datetime import datetime, timezone
import logging

logger = logging.getLogger(__name__)


def to_project_response(row: Dict[str, Any], client_name: Optional[str] = None) -> ProjectResponse:
    return ProjectResponse(**{
        **row,
        "client_name": client_name or "-",
        "status": row.get("status") or "draft",
        "status_label": project_status_label(row.get("status") or "draft"),
    })


def matches_application_type(application_type: Optional[str], selected: Optional[str]) -> bool:
    """Equality filter where the bare category (SLF/PBG) also matches its subtypes"""
    if selected in APPLICATION_CATEGORIES:
        return category_of(application_type) == selected
    return matches_filter(application_type, selected)


class ProjectService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def _client_names(self) -> Dict[str, str]:
        result = self.supabase.table("clients").select("id, name").execute()
        return {c["id"]: c.get("name") for c in (result.data or [])}

    def list_projects(
        self,
        accessible_project_ids: Optional[List[str]] = None,
        search: Optional[str] = None,
        status: Optional[str] = None,
        application_type: Optional[str] = None,
    ) -> List[ProjectResponse]:
        """Projects (newest first) joined with client names, then searched and filtered in memory"""
        if accessible_project_ids is not None and not accessible_project_ids:
            return []
        try:
            query = self.supabase.table("projects").select("*")
            if accessible_project_ids is not None:
                query = query.in_("id", accessible_project_ids)
            result = query.order("created_at", desc=True).execute()
            client_names = self._client_names()
        except Exception as e:
            logger.error(f"Error fetching projects: {e}")
            raise HTTPException(status_code=500, detail="Gagal memuat data proyek")

        projects = []
        for row in result.data or []:
            client_name = client_names.get(row.get("client_id"))
            if not matches_search(search, row.get("name"), client_name, row.get("city")):
                continue
            if not matches_filter(row.get("status"), status):
                continue
            if not matches_application_type(row.get("application_type"), application_type):
                continue
            projects.append(to_project_response(row, client_name))
        return projects

    def _get_project_row(self, project_id: str) -> Dict[str, Any]:
        try:
            result = self.supabase.table("projects")\
                .select("*")\
                .eq("id", project_id)\
                .maybe_single()\
                .execute()
        except Exception as e:
            logger.error(f"Error fetching project {project_id}: {e}")
            raise HTTPException(status_code=500, detail="Gagal memuat detail proyek")
        if not result or not result.data:
            raise HTTPException(status_code=404, detail="Proyek tidak ditemukan")
        return result.data

    def get_project(self, project_id: str) -> ProjectDetailResponse:
        """Project with client name, ordered phases and team members"""
        row = self._get_project_row(project_id)
        try:
            client_name = None
            if row.get("client_id"):
                client_result = self.supabase.table("clients")\
                    .select("name")\
                    .eq("id", row["client_id"])\
                    .maybe_single()\
                    .execute()
                if client_result and client_result.data:
                    client_name = client_result.data.get("name")
            phases_result = self.supabase.table("project_phases")\
                .select("*")\
                .eq("project_id", project_id)\
                .order("order_index")\
                .execute()
            team_result = self.supabase.table("project_teams")\
                .select("id, user_id, role, created_at, profiles:user_id (id, full_name, email, specialization)")\
                .eq("project_id", project_id)\
                .execute()
        except Exception as e:
            logger.error(f"Error fetching project details {project_id}: {e}")
            raise HTTPException(status_code=500, detail="Gagal memuat detail proyek")

        team = []
        for member in team_result.data or []:
            profile = member.get("profiles") or {}
            team.append({
                "id": member.get("id"),
                "user_id": member.get("user_id"),
                "role": member.get("role"),
                "role_label": role_label(member.get("role")),
                "full_name": profile.get("full_name"),
                "email": profile.get("email"),
                "specialization": profile.get("specialization"),
            })
        base = to_project_response(row, client_name)
        return ProjectDetailResponse(**base.model_dump(), phases=phases_result.data or [], team=team)

    def update_project(self, project_id: str, project_data: ProjectUpdate) -> ProjectResponse:
        update_data = project_data.model_dump(exclude_none=True)
        return self._update(project_id, update_data)

    def update_status(self, project_id: str, status: str) -> ProjectResponse:
        logger.info(f"Project {project_id} status -> {status}")
        return self._update(project_id, {"status": status})

    def _update(self, project_id: str, update_data: Dict[str, Any]) -> ProjectResponse:
        update_data["updated_at"] = datetime.now(timezone.utc).isoformat()
        try:
            result = self.supabase.table("projects")\
                .update(update_data)\
                .eq("id", project_id)\
                .execute()
        except Exception as e:
            logger.error(f"Error updating project {project_id}: {e}")
            raise HTTPException(status_code=500, detail="Gagal memperbarui proyek")
        if not result.data:
            raise HTTPException(status_code=404, detail="Proyek tidak ditemukan")
        return to_project_response(result.data[0])

    def get_wizard_options(self) -> WizardOptionsResponse:
        """Pickers for the creation wizard: clients, project leads and inspectors"""
        try:
            clients = self.supabase.table("clients").select("id, name, email").order("name").execute()
            leads = self.supabase.table("profiles")\
                .select("id, full_name, email")\
                .eq("role", PROJECT_LEAD)\
                .order("full_name")\
                .execute()
            inspectors = self.supabase.table("profiles")\
                .select("id, full_name, email, specialization")\
                .eq("role", INSPECTOR)\
                .order("full_name")\
                .execute()
        except Exception as e:
            logger.error(f"Error loading wizard options: {e}")
            raise HTTPException(status_code=500, detail="Gagal memuat data")
        return WizardOptionsResponse(
            clients=clients.data or [],
            project_leads=leads.data or [],
            inspectors=inspectors.data or [],
        )

    def create_project(self, project_data: ProjectWizardData, user_id: str) -> ProjectResponse:
        """
        Submit the wizard: project row, then phases, then team assignments.
        The three inserts run in sequence without rollback; phase and team failures
        are logged and the project is still returned.
        """
        data = project_data.model_dump()
        errors = wizard.validate_all(data)
        if errors:
            raise HTTPException(status_code=422, detail={
                "message": "Data proyek belum lengkap",
                "step": wizard.first_invalid_step(data),
                "errors": errors,
            })

        phases = wizard.normalize_phases(data["phases"])
        try:
            result = self.supabase.table("projects").insert({
                "name": data["name"].strip(),
                "application_type": data["application_type"],
                "client_id": data["client_id"],
                "project_lead_id": data["project_lead_id"],
                "location": data["location"],
                "city": data["city"],
                "description": data.get("description"),
                "priority": data.get("priority") or "medium",
                "estimated_duration": sum(p["duration"] for p in phases),
                "status": "draft",
                "created_by": user_id,
            }).execute()
        except Exception as e:
            logger.error(f"Error creating project: {e}")
            raise HTTPException(status_code=500, detail="Gagal membuat proyek")
        if not result.data:
            raise HTTPException(status_code=500, detail="Gagal membuat proyek")
        project = result.data[0]
        project_id = project["id"]

        phases_data = [
            {
                "project_id": project_id,
                "phase": phase["phase"],
                "phase_name": phase.get("name"),
                "description": phase.get("description"),
                "estimated_duration": phase["duration"],
                "status": "in_progress" if index == 0 else "pending",
                "order_index": index,
            }
            for index, phase in enumerate(phases)
        ]
        try:
            self.supabase.table("project_phases").insert(phases_data).execute()
        except Exception as e:
            logger.error(f"Error creating phases for project {project_id}: {e}")

        team_rows = [{"project_id": project_id, "user_id": data["project_lead_id"], "role": PROJECT_LEAD}]
        team_rows.extend(
            {"project_id": project_id, "user_id": inspector_id, "role": INSPECTOR}
            for inspector_id in data.get("inspectors") or []
        )
        for team_row in team_rows:
            try:
                self.supabase.table("project_teams").insert(team_row).execute()
            except Exception as e:
                logger.error(f"Error adding {team_row['role']} {team_row['user_id']} to project {project_id}: {e}")

        logger.info(f"Project created: {project_id} by {user_id}")
        return to_project_response(project)
