from typing import Optional
from app.models.notifications import (
    Notification,
    NotificationChannel,
    NotificationStatus,
)
from app.services.document_store import DocumentStore

def create_notification(
    *,
    store: DocumentStore,
    user_id: Optional[str],
    book_id: str,
    trigger_source: str,
    title: str,
    content: str,
    channel: NotificationChannel = NotificationChannel.system,
) -> Notification:
    return store.add("notifications", {
        "user_id": user_id,
        "book_id": book_id,
        "trigger_source": trigger_source,
        "title": title,
        "content": content,
        "channel": channel,
        "status": NotificationStatus.sent,
    })
