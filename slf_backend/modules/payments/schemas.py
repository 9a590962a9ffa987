from pydantic import BaseModel, field_validator
from typing import Optional, List
from datetime import date, datetime


class PaymentResponse(BaseModel):
    id: str
    project_id: Optional[str] = None
    project_name: str = "-"
    client_id: Optional[str] = None
    client_name: str = "-"
    amount: float
    payment_date: Optional[date] = None
    proof_url: Optional[str] = None
    verification_status: str = "pending"
    verified_by: Optional[str] = None
    verified_at: Optional[datetime] = None
    notes: Optional[str] = None
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class PaymentListResponse(BaseModel):
    payments: List[PaymentResponse]
    pending_count: int


class PaymentVerifyRequest(BaseModel):
    action: str
    notes: Optional[str] = None

    @field_validator("action")
    @classmethod
    def known_action(cls, value):
        if value not in ("approve", "reject", "reset"):
            raise ValueError("Aksi harus approve, reject, atau reset")
        return value
