from pydantic import BaseModel, field_validator
from typing import Optional
from datetime import datetime
from slf_backend.config.roles_config import INSPECTOR_SPECIALIZATIONS, USER_STATUSES


class ProfileUpdate(BaseModel):
    full_name: Optional[str] = None
    phone_number: Optional[str] = None
    specialization: Optional[str] = None
    avatar_url: Optional[str] = None

    @field_validator("specialization")
    @classmethod
    def known_specialization(cls, value):
        if value is not None and value not in INSPECTOR_SPECIALIZATIONS:
            raise ValueError(f"Spesialisasi harus salah satu dari: {', '.join(INSPECTOR_SPECIALIZATIONS)}")
        return value


class ProfileRoleUpdate(BaseModel):
    role: str


class ProfileStatusUpdate(BaseModel):
    status: str

    @field_validator("status")
    @classmethod
    def known_status(cls, value):
        if value not in USER_STATUSES:
            raise ValueError(f"Status harus salah satu dari: {', '.join(USER_STATUSES)}")
        return value


class ProfileResponse(BaseModel):
    id: str
    email: Optional[str] = None
    full_name: Optional[str] = None
    role: str
    role_label: str
    status: Optional[str] = None
    client_id: Optional[str] = None
    phone_number: Optional[str] = None
    specialization: Optional[str] = None
    avatar_url: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
