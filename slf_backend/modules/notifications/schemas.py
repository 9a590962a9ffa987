from pydantic import BaseModel
from typing import Optional
from datetime import datetime


class NotificationResponse(BaseModel):
    id: str
    recipient_id: Optional[str] = None
    sender_id: Optional[str] = None
    project_id: Optional[str] = None
    type: Optional[str] = None
    message: Optional[str] = None
    read: bool = False
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class UnreadCountResponse(BaseModel):
    count: int
