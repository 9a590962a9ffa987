from pydantic import BaseModel, field_validator
from typing import Optional, List
from datetime import datetime
from slf_backend.config.workflow_config import SCHEDULE_STATUSES, SCHEDULE_TYPES


def _check_type(value):
    if value is not None and value not in SCHEDULE_TYPES:
        raise ValueError(f"Tipe jadwal harus salah satu dari: {', '.join(SCHEDULE_TYPES)}")
    return value


def _check_status(value):
    if value is not None and value not in SCHEDULE_STATUSES:
        raise ValueError(f"Status jadwal harus salah satu dari: {', '.join(SCHEDULE_STATUSES)}")
    return value


class ScheduleCreate(BaseModel):
    project_id: str
    schedule_type: str = "meeting"
    title: str
    description: Optional[str] = None
    schedule_date: datetime
    location: Optional[str] = None
    assigned_to: Optional[str] = None
    status: str = "scheduled"

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, value):
        if not value or not value.strip():
            raise ValueError("Judul jadwal harus diisi")
        return value.strip()

    @field_validator("schedule_type")
    @classmethod
    def known_type(cls, value):
        return _check_type(value)

    @field_validator("status")
    @classmethod
    def known_status(cls, value):
        return _check_status(value)


class ScheduleUpdate(BaseModel):
    project_id: Optional[str] = None
    schedule_type: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    schedule_date: Optional[datetime] = None
    location: Optional[str] = None
    assigned_to: Optional[str] = None
    status: Optional[str] = None

    @field_validator("schedule_type")
    @classmethod
    def known_type(cls, value):
        return _check_type(value)

    @field_validator("status")
    @classmethod
    def known_status(cls, value):
        return _check_status(value)


class ScheduleResponse(BaseModel):
    id: str
    project_id: Optional[str] = None
    project_name: str = "-"
    schedule_type: Optional[str] = None
    title: str
    description: Optional[str] = None
    schedule_date: Optional[datetime] = None
    location: Optional[str] = None
    assigned_to: Optional[str] = None
    assignee_name: str = "-"
    status: Optional[str] = None
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ScheduleStats(BaseModel):
    total: int = 0
    upcoming: int = 0
    inspections: int = 0
    meetings: int = 0


class ScheduleListResponse(BaseModel):
    schedules: List[ScheduleResponse]
    stats: ScheduleStats
