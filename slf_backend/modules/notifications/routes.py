from fastapi import APIRouter, Depends
from slf_backend.database.supabase_client import get_supabase
from slf_backend.modules.notifications.schemas import NotificationResponse, UnreadCountResponse
from slf_backend.modules.notifications.service import NotificationService
from slf_backend.core.dependencies import get_current_user
from supabase import Client
from typing import List, Dict

router = APIRouter(prefix="/notifications", tags=["notifications"])


def get_notification_service(supabase: Client = Depends(get_supabase)) -> NotificationService:
    return NotificationService(supabase)


@router.get("", response_model=List[NotificationResponse])
async def list_notifications(
    unread_only: bool = False,
    user_data: Dict = Depends(get_current_user),
    service: NotificationService = Depends(get_notification_service)
):
    return service.list_notifications(user_data["id"], unread_only=unread_only)


@router.get("/unread-count", response_model=UnreadCountResponse)
async def get_unread_count(
    user_data: Dict = Depends(get_current_user),
    service: NotificationService = Depends(get_notification_service)
):
    return UnreadCountResponse(count=service.unread_count(user_data["id"]))


@router.put("/read-all", response_model=dict)
async def mark_all_read(
    user_data: Dict = Depends(get_current_user),
    service: NotificationService = Depends(get_notification_service)
):
    return {"updated": service.mark_all_read(user_data["id"])}


@router.put("/{notification_id}/read", response_model=dict)
async def mark_read(
    notification_id: str,
    user_data: Dict = Depends(get_current_user),
    service: NotificationService = Depends(get_notification_service)
):
    service.mark_read(notification_id, user_data["id"])
    return {"message": "Notifikasi ditandai sudah dibaca"}
