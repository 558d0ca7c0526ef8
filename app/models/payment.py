from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime


class PaymentRecord(SQLModel, table=True):
    __tablename__ = "payments"

    id: Optional[int] = Field(default=None, primary_key=True)

    user_id: str = Field(index=True)
    book_id: str = Field(index=True)
    plan_id: str

    reference: str = Field(index=True)

    amount: float  # display units (naira), gateway amount / 100
    status: str = "success"
    created_at: datetime = Field(default_factory=datetime.utcnow)
