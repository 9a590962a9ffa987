from pydantic import BaseModel, EmailStr, field_validator
from typing import Optional
from datetime import datetime


class ClientCreate(BaseModel):
    name: str
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    npwp: Optional[str] = None
    contact_person: Optional[str] = None

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value):
        if not value or not value.strip():
            raise ValueError("Nama klien harus diisi")
        return value.strip()


class ClientUpdate(BaseModel):
    name: Optional[str] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    npwp: Optional[str] = None
    contact_person: Optional[str] = None


class ClientResponse(BaseModel):
    id: str
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    npwp: Optional[str] = None
    contact_person: Optional[str] = None
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
