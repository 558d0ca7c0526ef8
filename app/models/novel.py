from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime


class Novel(SQLModel, table=True):
    __tablename__ = "novels"

    # document id, assigned by whoever created the novel
    id: str = Field(primary_key=True)
    title: Optional[str] = None

    #last gateway transaction started for this novel
    reference: Optional[str] = Field(default=None, index=True)

    #promotion state
    is_promoted: bool = False
    promotion_plan: Optional[str] = None
    promotion_start_date: Optional[datetime] = None
    promotion_end_date: Optional[datetime] = None
    promotion_end_notification_sent: bool = False

    updated_at: datetime = Field(default_factory=datetime.utcnow)
