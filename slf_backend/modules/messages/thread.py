"""
Project threads read from two tables: `messages` (current) and message-type
`notifications` (older conversations). Notification items carry a `notif-` id
prefix so mark-read can route them back to their table.
"""

from typing import Any, Dict, Iterable, List, Optional, Tuple

from slf_backend.core.filters import parse_timestamp, sort_by_timestamp

NOTIFICATION_MESSAGE_TYPES = [
    "message_to_client",
    "message_from_client",
    "message_to_admin",
    "message_from_admin",
    "project_update",
]

NOTIFICATION_ID_PREFIX = "notif-"
DUPLICATE_WINDOW_SECONDS = 1.0
PREVIEW_LENGTH = 100


def from_message(row: Dict[str, Any]) -> Dict[str, Any]:
    sender = row.get("profiles") or {}
    item = {k: v for k, v in row.items() if k != "profiles"}
    item["sender_name"] = sender.get("full_name")
    item["message_type"] = row.get("message_type") or "text"
    item["source"] = "messages"
    item["is_read"] = bool(row.get("read_at"))
    return item


def from_notification(row: Dict[str, Any]) -> Dict[str, Any]:
    read = bool(row.get("read"))
    return {
        "id": f"{NOTIFICATION_ID_PREFIX}{row['id']}",
        "project_id": row.get("project_id"),
        "sender_id": row.get("sender_id"),
        "recipient_id": row.get("recipient_id"),
        "message": row.get("message"),
        "message_type": "text",
        "read_at": row.get("created_at") if read else None,
        "created_at": row.get("created_at"),
        "source": "notifications",
        "is_read": read,
    }


def _seconds_apart(a: Any, b: Any) -> Optional[float]:
    first, second = parse_timestamp(a), parse_timestamp(b)
    if first is None or second is None:
        return None
    if (first.tzinfo is None) != (second.tzinfo is None):
        first, second = first.replace(tzinfo=None), second.replace(tzinfo=None)
    return abs((first - second).total_seconds())


def is_duplicate(notification: Dict[str, Any], messages: Iterable[Dict[str, Any]]) -> bool:
    """Same text and sender as a message written less than a second apart"""
    for message in messages:
        if message.get("message") != notification.get("message"):
            continue
        if message.get("sender_id") != notification.get("sender_id"):
            continue
        apart = _seconds_apart(message.get("created_at"), notification.get("created_at"))
        if apart is not None and apart < DUPLICATE_WINDOW_SECONDS:
            return True
    return False


def merge_thread(messages: List[Dict[str, Any]], notifications: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    items = [from_message(m) for m in messages]
    primary = list(items)
    for notification in notifications:
        if not is_duplicate(notification, primary):
            items.append(from_notification(notification))
    return sort_by_timestamp(items, "created_at", newest_first=False)


def split_ids(ids: Iterable[str]) -> Tuple[List[str], List[str]]:
    """(message ids, notification ids with the prefix stripped)"""
    message_ids, notification_ids = [], []
    for item_id in ids:
        item_id = str(item_id)
        if item_id.startswith(NOTIFICATION_ID_PREFIX):
            notification_ids.append(item_id[len(NOTIFICATION_ID_PREFIX):])
        else:
            message_ids.append(item_id)
    return message_ids, notification_ids


def notification_preview(sender_name: Optional[str], message: str) -> str:
    text = message[:PREVIEW_LENGTH] + ("..." if len(message) > PREVIEW_LENGTH else "")
    return f"Pesan dari {sender_name or 'Pengguna'}: {text}"


def build_conversations(
    user_id: str,
    project_ids: List[str],
    messages: List[Dict[str, Any]],
    notifications: List[Dict[str, Any]],
) -> List[Dict[str, Any]]:
    """
    Group both sources by project with last message and unread count.
    Unread means a message from someone else without read_at, or an unread
    notification addressed to the user. Empty conversations are dropped.
    """
    conversations = {
        pid: {"project_id": pid, "items": [], "last_message": None, "unread_count": 0}
        for pid in project_ids
    }
    for row in messages:
        conversation = conversations.get(row.get("project_id"))
        if conversation is None:
            continue
        conversation["items"].append(from_message(row))
        if not row.get("read_at") and row.get("sender_id") != user_id:
            conversation["unread_count"] += 1
    for row in notifications:
        conversation = conversations.get(row.get("project_id"))
        if conversation is None:
            continue
        conversation["items"].append(from_notification(row))
        if not row.get("read") and row.get("recipient_id") == user_id:
            conversation["unread_count"] += 1

    result = []
    for conversation in conversations.values():
        items = conversation.pop("items")
        if not items:
            continue
        conversation["last_message"] = sort_by_timestamp(items, "created_at")[0]
        conversation["message_count"] = len(items)
        result.append(conversation)
    latest = sort_by_timestamp(
        [{"created_at": c["last_message"].get("created_at"), "conversation": c} for c in result],
        "created_at",
    )
    return [entry["conversation"] for entry in latest]
