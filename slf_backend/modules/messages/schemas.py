from pydantic import BaseModel, field_validator
from typing import Optional, List

MESSAGE_TYPES = ["text", "system", "document", "payment"]


class MessageItem(BaseModel):
    id: str
    project_id: Optional[str] = None
    sender_id: Optional[str] = None
    sender_name: Optional[str] = None
    recipient_id: Optional[str] = None
    message: Optional[str] = None
    message_type: str = "text"
    read_at: Optional[str] = None
    created_at: Optional[str] = None
    source: str = "messages"
    is_read: bool = False


class Conversation(BaseModel):
    project_id: str
    project_name: Optional[str] = None
    last_message: Optional[MessageItem] = None
    unread_count: int = 0
    message_count: int = 0


class SendMessageRequest(BaseModel):
    project_id: str
    message: str
    recipient_id: Optional[str] = None
    message_type: str = "text"

    @field_validator("message")
    @classmethod
    def message_not_blank(cls, value):
        if not value or not value.strip():
            raise ValueError("Pesan tidak boleh kosong")
        return value.strip()

    @field_validator("message_type")
    @classmethod
    def known_type(cls, value):
        if value not in MESSAGE_TYPES:
            raise ValueError(f"Tipe pesan harus salah satu dari: {', '.join(MESSAGE_TYPES)}")
        return value


class MarkReadRequest(BaseModel):
    message_ids: List[str]


class UnreadCountResponse(BaseModel):
    count: int
