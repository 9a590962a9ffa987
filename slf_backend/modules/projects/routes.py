from fastapi import APIRouter, Depends
from slf_backend.database.supabase_client import get_supabase
from slf_backend.modules.projects.schemas import (
    ProjectWizardData, ProjectResponse, ProjectDetailResponse, ProjectUpdate,
    ProjectStatusUpdate, WizardStepRequest, WizardStepResponse, WizardOptionsResponse
)
from slf_backend.modules.projects.service import ProjectService
from slf_backend.modules.projects import wizard
from slf_backend.core.dependencies import (
    require_permission, get_access_cache, get_accessible_project_ids, check_project_access
)
from slf_backend.config.workflow_config import APPLICATION_TYPES, PROJECT_STATUS_LABELS
from supabase import Client
from typing import List, Dict, Optional

router = APIRouter(prefix="/projects", tags=["projects"])


def get_project_service(supabase: Client = Depends(get_supabase)) -> ProjectService:
    return ProjectService(supabase)


@router.get("", response_model=List[ProjectResponse])
async def list_projects(
    search: Optional[str] = None,
    status: Optional[str] = None,
    application_type: Optional[str] = None,
    user_data: Dict = Depends(require_permission("projects:read")),
    service: ProjectService = Depends(get_project_service),
    supabase: Client = Depends(get_supabase),
    cache: Dict = Depends(get_access_cache)
):
    """List projects visible to the caller's role, with client names and in-memory filters"""
    accessible = get_accessible_project_ids(user_data, supabase, cache)
    return service.list_projects(
        accessible_project_ids=accessible,
        search=search,
        status=status,
        application_type=application_type,
    )


@router.get("/meta", response_model=dict)
async def get_project_meta(user_data: Dict = Depends(require_permission("projects:read"))):
    """Status labels and SLF/PBG application types"""
    return {"statuses": PROJECT_STATUS_LABELS, "application_types": APPLICATION_TYPES, "wizard_steps": wizard.STEPS}


@router.get("/wizard/options", response_model=WizardOptionsResponse)
async def get_wizard_options(
    user_data: Dict = Depends(require_permission("projects:create")),
    service: ProjectService = Depends(get_project_service)
):
    return service.get_wizard_options()


@router.get("/wizard/phases", response_model=List[dict])
async def get_default_phases(
    application_type: str,
    user_data: Dict = Depends(require_permission("projects:create"))
):
    """Default timeline phases for an application type"""
    return wizard.default_phases(application_type)


@router.post("/wizard/validate", response_model=WizardStepResponse)
async def validate_wizard_step(
    body: WizardStepRequest,
    user_data: Dict = Depends(require_permission("projects:create"))
):
    """Validate one wizard step and report which step the form may move to"""
    data = body.data.model_dump()
    errors = wizard.validate_step(body.step, data)
    next_step = wizard.next_step(body.step, data)
    return WizardStepResponse(
        step=body.step,
        step_title=wizard.STEPS[body.step],
        valid=not errors,
        errors=errors,
        next_step=next_step,
        progress=round((next_step + 1) / len(wizard.STEPS) * 100),
    )


@router.post("", response_model=ProjectResponse, status_code=201)
async def create_project(
    project_data: ProjectWizardData,
    user_data: Dict = Depends(require_permission("projects:create")),
    service: ProjectService = Depends(get_project_service)
):
    """Submit the creation wizard"""
    return service.create_project(project_data, user_data["id"])


@router.get("/{project_id}", response_model=ProjectDetailResponse)
async def get_project(
    project_id: str,
    user_data: Dict = Depends(require_permission("projects:read")),
    service: ProjectService = Depends(get_project_service),
    supabase: Client = Depends(get_supabase)
):
    check_project_access(project_id, user_data, supabase)
    return service.get_project(project_id)


@router.put("/{project_id}", response_model=ProjectResponse)
async def update_project(
    project_id: str,
    project_data: ProjectUpdate,
    user_data: Dict = Depends(require_permission("projects:update")),
    service: ProjectService = Depends(get_project_service),
    supabase: Client = Depends(get_supabase)
):
    check_project_access(project_id, user_data, supabase)
    return service.update_project(project_id, project_data)


@router.put("/{project_id}/status", response_model=ProjectResponse)
async def update_project_status(
    project_id: str,
    body: ProjectStatusUpdate,
    user_data: Dict = Depends(require_permission("projects:update")),
    service: ProjectService = Depends(get_project_service),
    supabase: Client = Depends(get_supabase)
):
    check_project_access(project_id, user_data, supabase)
    return service.update_status(project_id, body.status)
