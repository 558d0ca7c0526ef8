import logging
from datetime import datetime
from typing import Optional

from sqlmodel import Session, select

from app.models.novel import Novel
from app.services.document_store import DocumentStore
from app.services.notification_service import create_notification

logger = logging.getLogger(__name__)


def _promoter_id(store: DocumentStore, book_id: str) -> Optional[str]:
    payments = store.find("payments", book_id=book_id, status="success")
    if not payments:
        return None
    return max(payments, key=lambda p: p.created_at).user_id


def expire_promotions(session: Session, now: Optional[datetime] = None) -> int:
    """
    End promotions whose end date has passed and notify whoever paid.

    Each novel is handled once: the notification flag is set in the same
    transaction as the un-promotion.
    """
    now = now or datetime.utcnow()
    store = DocumentStore(session)

    expired = session.exec(
        select(Novel)
        .where(Novel.is_promoted == True)
        .where(Novel.promotion_end_date != None)
        .where(Novel.promotion_end_date <= now)
        .where(Novel.promotion_end_notification_sent == False)
    ).all()

    count = 0
    for novel in expired:
        book_id = novel.id
        plan = novel.promotion_plan
        title = novel.title or book_id
        try:
            with store.atomic():
                store.update("novels", book_id, {
                    "is_promoted": False,
                    "promotion_end_notification_sent": True,
                })
                create_notification(
                    store=store,
                    user_id=_promoter_id(store, book_id),
                    book_id=book_id,
                    trigger_source="promotion_ended",
                    title="Promotion ended",
                    content=f'The "{plan}" promotion for "{title}" has ended.',
                )
        except Exception:
            logger.exception(f"Failed to expire promotion for novel {book_id}")
            continue
        count += 1

    logger.info(f"Expired {count} novel promotions")
    return count


if __name__ == "__main__":
    from app.database import engine

    logging.basicConfig(level=logging.INFO)
    with Session(engine) as session:
        expire_promotions(session)
