from supabase import Client
from slf_backend.modules.messages.schemas import MessageItem, Conversation, SendMessageRequest
from slf_backend.modules.messages import thread
from slf_backend.modules.notifications.service import NotificationService
from slf_backend.config.roles_config import CLIENT
from typing import Any, Dict, List, Optional
from fastapi import HTTPException
from datetime import datetime, timezone
import logging

logger = logging.getLogger(__name__)

MESSAGE_SELECT = (
    "id, project_id, sender_id, recipient_id, message, message_type, read_at, created_at, "
    "profiles:sender_id (full_name, avatar_url)"
)


class MessageService:
    def __init__(self, supabase: Client):
        self.supabase = supabase
        self.notifications = NotificationService(supabase)

    def get_thread(self, project_id: str) -> List[MessageItem]:
        """Messages of one project merged with legacy notification messages, oldest first"""
        try:
            messages = self.supabase.table("messages")\
                .select(MESSAGE_SELECT)\
                .eq("project_id", project_id)\
                .order("created_at")\
                .execute()
            notifications = self.supabase.table("notifications")\
                .select("*")\
                .eq("project_id", project_id)\
                .in_("type", thread.NOTIFICATION_MESSAGE_TYPES)\
                .order("created_at")\
                .execute()
        except Exception as e:
            logger.error(f"Error fetching messages for project {project_id}: {e}")
            raise HTTPException(status_code=500, detail="Gagal memuat pesan")
        items = thread.merge_thread(messages.data or [], notifications.data or [])
        return [MessageItem(**item) for item in items]

    def _project_names(self, project_ids: Optional[List[str]]) -> Dict[str, str]:
        query = self.supabase.table("projects").select("id, name")
        if project_ids is not None:
            query = query.in_("id", project_ids)
        return {p["id"]: p.get("name") for p in (query.execute().data or [])}

    def get_conversations(self, user_id: str, project_ids: Optional[List[str]]) -> List[Conversation]:
        """Per-project conversations; None means every project"""
        if project_ids is not None and not project_ids:
            return []
        try:
            names = self._project_names(project_ids)
            scope = list(names.keys()) if project_ids is None else project_ids
            if not scope:
                return []
            messages = self.supabase.table("messages")\
                .select("*")\
                .in_("project_id", scope)\
                .order("created_at", desc=True)\
                .execute()
            notifications = self.supabase.table("notifications")\
                .select("*")\
                .in_("project_id", scope)\
                .in_("type", thread.NOTIFICATION_MESSAGE_TYPES)\
                .order("created_at", desc=True)\
                .execute()
        except Exception as e:
            logger.error(f"Error fetching conversations for {user_id}: {e}")
            raise HTTPException(status_code=500, detail="Gagal memuat percakapan")

        conversations = thread.build_conversations(
            user_id, scope, messages.data or [], notifications.data or []
        )
        return [
            Conversation(
                project_id=c["project_id"],
                project_name=names.get(c["project_id"]),
                last_message=MessageItem(**c["last_message"]),
                unread_count=c["unread_count"],
                message_count=c["message_count"],
            )
            for c in conversations
        ]

    def send_message(self, request: SendMessageRequest, user_data: Dict[str, Any]) -> MessageItem:
        text = request.message.strip()
        if not text:
            raise HTTPException(status_code=400, detail="Pesan tidak boleh kosong")
        sender_id = user_data["id"]
        try:
            result = self.supabase.table("messages").insert({
                "project_id": request.project_id,
                "sender_id": sender_id,
                "recipient_id": request.recipient_id,
                "message": text,
                "message_type": request.message_type,
                "created_at": datetime.now(timezone.utc).isoformat(),
            }).execute()
        except Exception as e:
            logger.error(f"Error sending message: {e}")
            raise HTTPException(status_code=500, detail="Gagal mengirim pesan")
        if not result.data:
            raise HTTPException(status_code=500, detail="Gagal mengirim pesan")

        if request.recipient_id:
            notification_type = "message_from_client" if user_data.get("role") == CLIENT else "message_to_client"
            self.notifications.notify(
                request.recipient_id,
                notification_type,
                thread.notification_preview(user_data.get("full_name"), text),
                sender_id=sender_id,
                project_id=request.project_id,
            )
        return MessageItem(**thread.from_message(result.data[0]))

    def mark_read(self, message_ids: List[str], user_id: str) -> Dict[str, int]:
        """Only messages written by others and notifications addressed to the user are marked"""
        message_ids, notification_ids = thread.split_ids(message_ids)
        updated = {"messages": 0, "notifications": 0}
        try:
            if message_ids:
                result = self.supabase.table("messages")\
                    .update({"read_at": datetime.now(timezone.utc).isoformat()})\
                    .in_("id", message_ids)\
                    .neq("sender_id", user_id)\
                    .execute()
                updated["messages"] = len(result.data or [])
            if notification_ids:
                result = self.supabase.table("notifications")\
                    .update({"read": True})\
                    .in_("id", notification_ids)\
                    .eq("recipient_id", user_id)\
                    .execute()
                updated["notifications"] = len(result.data or [])
        except Exception as e:
            logger.error(f"Error marking messages as read: {e}")
            raise HTTPException(status_code=500, detail="Gagal memperbarui pesan")
        return updated

    def unread_count(self, user_id: str, project_ids: Optional[List[str]] = None) -> int:
        if project_ids is not None and not project_ids:
            return 0
        try:
            messages = self.supabase.table("messages")\
                .select("id")\
                .neq("sender_id", user_id)\
                .is_("read_at", "null")
            notifications = self.supabase.table("notifications")\
                .select("id")\
                .eq("recipient_id", user_id)\
                .eq("read", False)\
                .in_("type", thread.NOTIFICATION_MESSAGE_TYPES)
            if project_ids:
                messages = messages.in_("project_id", project_ids)
                notifications = notifications.in_("project_id", project_ids)
            return len(messages.execute().data or []) + len(notifications.execute().data or [])
        except Exception as e:
            logger.error(f"Error counting unread messages for {user_id}: {e}")
            raise HTTPException(status_code=500, detail="Gagal memuat pesan")
