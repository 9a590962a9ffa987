from pydantic import BaseModel, Field, field_validator
from typing import Optional, List, Dict, Any
from datetime import datetime

DOCUMENT_TABS = ["all", "slf", "pbg", "pending"]


class DocumentResponse(BaseModel):
    id: str
    project_id: Optional[str] = None
    project_name: str = "-"
    application_type: str = "SLF"
    name: Optional[str] = None
    type: Optional[str] = None
    url: Optional[str] = None
    document_type: Optional[str] = None
    status: str = "pending"
    metadata: Optional[Dict[str, Any]] = None
    created_by: Optional[str] = None
    uploader_name: str = "-"
    approved_by_id: Optional[str] = None
    approved_at: Optional[datetime] = None
    rejected_by_id: Optional[str] = None
    rejected_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None
    approval_notes: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class DocumentCounts(BaseModel):
    pending: int = 0
    slf: int = 0
    pbg: int = 0


class DocumentListResponse(BaseModel):
    documents: List[DocumentResponse]
    counts: DocumentCounts


class DocumentVerifyRequest(BaseModel):
    action: str
    notes: Optional[str] = None
    rejection_reason: Optional[str] = None

    @field_validator("action")
    @classmethod
    def known_action(cls, value):
        if value not in ("approve", "reject"):
            raise ValueError("Aksi harus approve atau reject")
        return value


class RequiredDocumentStatus(BaseModel):
    id: str
    name: str
    category: str
    required: bool
    formats: List[str]
    max_size: int
    status: str = "missing"
    document: Optional[Dict[str, Any]] = None


class UploadProgressResponse(BaseModel):
    application_category: str
    project_id: Optional[str] = None
    progress: int
    uploaded_required: int
    total_required: int
    documents: List[RequiredDocumentStatus] = Field(default_factory=list)
