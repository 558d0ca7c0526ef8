# app/schemas/payment_schemas.py
from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional


class InitializeTransactionRequest(BaseModel):
    # every field is optional here so a missing one is reported as
    # "Missing required fields" (400) instead of a schema error
    model_config = ConfigDict(populate_by_name=True)

    email: Optional[str] = None
    amount: Optional[float] = Field(default=None, allow_inf_nan=False)  # naira
    plan_id: Optional[str] = Field(default=None, alias="planId")
    book_id: Optional[str] = Field(default=None, alias="bookId")
    user_id: Optional[str] = Field(default=None, alias="userId")
    callback_url: Optional[str] = None

    def missing_fields(self) -> List[str]:
        values = {
            "email": self.email,
            "amount": self.amount,
            "planId": self.plan_id,
            "bookId": self.book_id,
            "userId": self.user_id,
            "callback_url": self.callback_url,
        }
        return [name for name, value in values.items() if not value]


class InitializeTransactionResponse(BaseModel):
    status: bool = True
    authorization_url: str
    reference: str
    callback_url: str


class VerifyPaymentRequest(BaseModel):
    reference: Optional[str] = None


class VerifyPaymentResponse(BaseModel):
    status: bool = True
    message: str
    reference: str
