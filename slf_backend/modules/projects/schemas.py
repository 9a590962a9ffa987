from pydantic import BaseModel, Field, field_validator
from typing import Optional, List, Dict, Any
from datetime import datetime
from slf_backend.config.workflow_config import PROJECT_STATUS_LABELS, PROJECT_PRIORITIES


class PhaseInput(BaseModel):
    phase: Optional[int] = None
    name: str
    duration: Any = 1
    description: Optional[str] = None


class ProjectWizardData(BaseModel):
    """Wizard form state; every field optional so partially filled steps can be validated"""
    name: Optional[str] = None
    application_category: Optional[str] = None
    application_type: Optional[str] = None
    client_id: Optional[str] = None
    project_lead_id: Optional[str] = None
    location: Optional[str] = None
    city: Optional[str] = None
    description: Optional[str] = None
    priority: str = "medium"
    phases: List[PhaseInput] = Field(default_factory=list)
    inspectors: List[str] = Field(default_factory=list)

    @field_validator("priority")
    @classmethod
    def known_priority(cls, value):
        if value not in PROJECT_PRIORITIES:
            raise ValueError(f"Prioritas harus salah satu dari: {', '.join(PROJECT_PRIORITIES)}")
        return value


class WizardStepRequest(BaseModel):
    step: int = Field(ge=0, le=3)
    data: ProjectWizardData


class WizardStepResponse(BaseModel):
    step: int
    step_title: str
    valid: bool
    errors: Dict[str, str]
    next_step: int
    progress: int


class ProjectStatusUpdate(BaseModel):
    status: str

    @field_validator("status")
    @classmethod
    def known_status(cls, value):
        if value not in PROJECT_STATUS_LABELS:
            raise ValueError("Status proyek tidak valid")
        return value


class ProjectUpdate(BaseModel):
    name: Optional[str] = None
    location: Optional[str] = None
    city: Optional[str] = None
    description: Optional[str] = None
    priority: Optional[str] = None
    project_lead_id: Optional[str] = None


class ProjectResponse(BaseModel):
    id: str
    name: str
    application_type: Optional[str] = None
    client_id: Optional[str] = None
    client_name: str = "-"
    project_lead_id: Optional[str] = None
    location: Optional[str] = None
    city: Optional[str] = None
    description: Optional[str] = None
    priority: Optional[str] = None
    estimated_duration: Optional[int] = None
    status: str
    status_label: Optional[str] = None
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ProjectDetailResponse(ProjectResponse):
    phases: List[Dict[str, Any]] = Field(default_factory=list)
    team: List[Dict[str, Any]] = Field(default_factory=list)


class WizardOptionsResponse(BaseModel):
    clients: List[Dict[str, Any]]
    project_leads: List[Dict[str, Any]]
    inspectors: List[Dict[str, Any]]
