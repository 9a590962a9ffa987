from fastapi import APIRouter, Depends
from slf_backend.database.supabase_client import get_supabase
from slf_backend.modules.messages.schemas import (
    MessageItem, Conversation, SendMessageRequest, MarkReadRequest, UnreadCountResponse
)
from slf_backend.modules.messages.service import MessageService
from slf_backend.core.dependencies import (
    require_permission, get_access_cache, get_accessible_project_ids, check_project_access
)
from supabase import Client
from typing import List, Dict

router = APIRouter(prefix="/messages", tags=["messages"])


def get_message_service(supabase: Client = Depends(get_supabase)) -> MessageService:
    return MessageService(supabase)


@router.get("/conversations", response_model=List[Conversation])
async def list_conversations(
    user_data: Dict = Depends(require_permission("messages:read")),
    service: MessageService = Depends(get_message_service),
    supabase: Client = Depends(get_supabase),
    cache: Dict = Depends(get_access_cache)
):
    """Conversations across the caller's projects, most recent first"""
    accessible = get_accessible_project_ids(user_data, supabase, cache)
    return service.get_conversations(user_data["id"], accessible)


@router.get("/unread-count", response_model=UnreadCountResponse)
async def get_unread_count(
    user_data: Dict = Depends(require_permission("messages:read")),
    service: MessageService = Depends(get_message_service),
    supabase: Client = Depends(get_supabase),
    cache: Dict = Depends(get_access_cache)
):
    accessible = get_accessible_project_ids(user_data, supabase, cache)
    return UnreadCountResponse(count=service.unread_count(user_data["id"], accessible))


@router.post("/read", response_model=dict)
async def mark_messages_read(
    request: MarkReadRequest,
    user_data: Dict = Depends(require_permission("messages:read")),
    service: MessageService = Depends(get_message_service)
):
    return service.mark_read(request.message_ids, user_data["id"])


@router.post("", response_model=MessageItem, status_code=201)
async def send_message(
    request: SendMessageRequest,
    user_data: Dict = Depends(require_permission("messages:send")),
    service: MessageService = Depends(get_message_service),
    supabase: Client = Depends(get_supabase)
):
    check_project_access(request.project_id, user_data, supabase)
    return service.send_message(request, user_data)


@router.get("/projects/{project_id}", response_model=List[MessageItem])
async def get_project_thread(
    project_id: str,
    user_data: Dict = Depends(require_permission("messages:read")),
    service: MessageService = Depends(get_message_service),
    supabase: Client = Depends(get_supabase)
):
    """Thread of one project, oldest first"""
    check_project_access(project_id, user_data, supabase)
    return service.get_thread(project_id)
