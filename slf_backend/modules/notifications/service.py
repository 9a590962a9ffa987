from supabase import Client
from slf_backend.modules.notifications.schemas import NotificationResponse
from typing import List, Optional
from fastapi import HTTPException
from datetime import datetime, timezone
import logging

logger = logging.getLogger(__name__)


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class NotificationService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def list_notifications(self, user_id: str, unread_only: bool = False, limit: int = 50) -> List[NotificationResponse]:
        try:
            query = self.supabase.table("notifications")\
                .select("*")\
                .eq("recipient_id", user_id)
            if unread_only:
                query = query.eq("read", False)
            result = query.order("created_at", desc=True).limit(limit).execute()
            return [NotificationResponse(**n) for n in (result.data or [])]
        except Exception as e:
            logger.error(f"Error fetching notifications for {user_id}: {e}")
            raise HTTPException(status_code=500, detail="Gagal memuat notifikasi")

    def mark_read(self, notification_id: str, user_id: str) -> bool:
        try:
            result = self.supabase.table("notifications")\
                .update({"read": True})\
                .eq("id", notification_id)\
                .eq("recipient_id", user_id)\
                .execute()
        except Exception as e:
            logger.error(f"Error marking notification {notification_id} read: {e}")
            raise HTTPException(status_code=500, detail="Gagal memperbarui notifikasi")
        if not result.data:
            raise HTTPException(status_code=404, detail="Notifikasi tidak ditemukan")
        return True

    def mark_all_read(self, user_id: str) -> int:
        try:
            result = self.supabase.table("notifications")\
                .update({"read": True})\
                .eq("recipient_id", user_id)\
                .eq("read", False)\
                .execute()
            return len(result.data or [])
        except Exception as e:
            logger.error(f"Error marking notifications read for {user_id}: {e}")
            raise HTTPException(status_code=500, detail="Gagal memperbarui notifikasi")

    def unread_count(self, user_id: str) -> int:
        try:
            result = self.supabase.table("notifications")\
                .select("id")\
                .eq("recipient_id", user_id)\
                .eq("read", False)\
                .execute()
            return len(result.data or [])
        except Exception as e:
            logger.error(f"Error counting notifications for {user_id}: {e}")
            raise HTTPException(status_code=500, detail="Gagal memuat notifikasi")

    def notify(
        self,
        recipient_id: str,
        notification_type: str,
        message: str,
        sender_id: Optional[str] = None,
        project_id: Optional[str] = None,
    ) -> bool:
        """Insert one notification. Best effort: failures are logged and reported as False."""
        try:
            self.supabase.table("notifications").insert({
                "recipient_id": recipient_id,
                "sender_id": sender_id,
                "project_id": project_id,
                "type": notification_type,
                "message": message,
                "read": False,
                "created_at": now_iso(),
            }).execute()
            return True
        except Exception as e:
            logger.error(f"Error creating {notification_type} notification for {recipient_id}: {e}")
            return False

    def notify_role(
        self,
        role: str,
        notification_type: str,
        message: str,
        sender_id: Optional[str] = None,
        project_id: Optional[str] = None,
    ) -> int:
        """Notify every profile with `role`; returns how many notifications were queued (0 on failure)."""
        try:
            recipients = self.supabase.table("profiles").select("id").eq("role", role).execute()
            rows = [
                {
                    "recipient_id": profile["id"],
                    "sender_id": sender_id,
                    "project_id": project_id,
                    "type": notification_type,
                    "message": message,
                    "read": False,
                    "created_at": now_iso(),
                }
                for profile in (recipients.data or [])
            ]
            if not rows:
                return 0
            self.supabase.table("notifications").insert(rows).execute()
            return len(rows)
        except Exception as e:
            logger.error(f"Error notifying role {role}: {e}")
            return 0
