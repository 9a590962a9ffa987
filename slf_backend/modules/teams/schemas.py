from pydantic import BaseModel, field_validator
from typing import Optional, List, Dict, Any
from datetime import datetime
from slf_backend.config.roles_config import TEAM_ROLES


class TeamMemberCreate(BaseModel):
    project_id: str
    user_id: str
    role: str

    @field_validator("role")
    @classmethod
    def team_role(cls, value):
        if value not in TEAM_ROLES:
            raise ValueError(f"Role tim harus salah satu dari: {', '.join(TEAM_ROLES)}")
        return value


class TeamMemberResponse(BaseModel):
    id: str
    project_id: Optional[str] = None
    project_name: str = "Proyek Tidak Dikenal"
    user_id: Optional[str] = None
    role: Optional[str] = None
    role_label: str = "N/A"
    full_name: str = "N/A"
    email: Optional[str] = None
    phone: Optional[str] = None
    specialization: Optional[str] = None
    profile_role: Optional[str] = None
    created_at: Optional[datetime] = None


class TeamListResponse(BaseModel):
    members: List[TeamMemberResponse]
    roles: List[str]
    projects: List[Dict[str, Any]]


class MemberPerformance(BaseModel):
    user_id: str
    full_name: Optional[str] = None
    role: Optional[str] = None
    role_label: str = "N/A"
    projects: List[Dict[str, Any]]
    status_counts: Dict[str, int]
    total_projects: int
    active_projects: int
    completed_projects: int
