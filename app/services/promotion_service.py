import json
import math
import logging
from datetime import datetime, timedelta
from typing import Any, Dict, Optional

from app.config import Settings
from app.schemas.payment_schemas import (
    InitializeTransactionRequest,
    InitializeTransactionResponse,
    VerifyPaymentRequest,
    VerifyPaymentResponse,
)
from app.services.document_store import DocumentStore
from app.services.exceptions import (
    BookNotFound,
    GatewayInitFailed,
    GatewayVerifyFailed,
    InvalidField,
    MissingFields,
    MissingMetadata,
    MissingReference,
    PaymentNotSuccessful,
    ValidationError,
)
from app.services.paystack_client import GatewayError, PaystackClient

logger = logging.getLogger(__name__)

SHORT_PLAN_ID = "1-month"
SHORT_PLAN_DAYS = 30
LONG_PLAN_DAYS = 60


def promotion_days(plan_id: str) -> int:
    # anything that is not the 1-month plan runs for the long period
    return SHORT_PLAN_DAYS if plan_id == SHORT_PLAN_ID else LONG_PLAN_DAYS


def initialize_transaction(
    *,
    request: InitializeTransactionRequest,
    gateway: PaystackClient,
    store: DocumentStore,
    settings: Settings,
) -> InitializeTransactionResponse:
    """
    Start a Paystack transaction for promoting a novel and remember its
    reference on the novel document.
    """
    missing = request.missing_fields()
    if missing:
        logger.warning(f"Initialize transaction missing fields: {missing}")
        raise MissingFields(missing)

    if not math.isfinite(request.amount) or request.amount <= 0:
        raise ValidationError("Amount must be a positive number")

    kobo = int(round(request.amount * 100))
    if kobo <= 0:
        raise ValidationError("Amount is too small to charge")

    if store.get("novels", request.book_id) is None:
        raise BookNotFound(request.book_id)

    paystack_data = gateway.initialize_transaction({
        "email": request.email,
        "amount": kobo,  # Paystack expects kobo
        "currency": settings.PAYMENT_CURRENCY,
        "metadata": {
            "planId": request.plan_id,
            "bookId": request.book_id,
            "userId": request.user_id,
        },
        "callback_url": request.callback_url,
    })

    if not paystack_data.get("status"):
        raise GatewayInitFailed(paystack_data.get("message"))

    data = paystack_data.get("data") or {}
    reference = data.get("reference")
    if not reference:
        raise GatewayError("Paystack initialize response has no reference")

    store.update("novels", request.book_id, {"reference": reference})
    logger.info(f"Transaction {reference} initialized for novel {request.book_id}")

    return InitializeTransactionResponse(
        authorization_url=data.get("authorization_url"),
        reference=reference,
        callback_url=request.callback_url,
    )


def _metadata(data: Dict[str, Any]) -> Dict[str, Any]:
    metadata = data.get("metadata")

    # metadata sent as a string comes back as a string
    if isinstance(metadata, str) and metadata.strip():
        try:
            metadata = json.loads(metadata)
        except ValueError:
            metadata = None

    if metadata is None or metadata == "" or not isinstance(metadata, dict):
        raise MissingMetadata()
    return metadata


def _required_str(metadata: Dict[str, Any], name: str) -> str:
    value = metadata.get(name)
    if not isinstance(value, str) or not value.strip():
        logger.error(f"Invalid {name}: {value!r}")
        raise InvalidField(name)
    return value.strip()


def _naira(kobo: Any) -> float:
    if isinstance(kobo, bool) or not isinstance(kobo, (int, float)):
        raise GatewayError(f"Paystack reported a non-numeric amount: {kobo!r}")
    return kobo / 100


def verify_payment(
    *,
    request: VerifyPaymentRequest,
    gateway: PaystackClient,
    store: DocumentStore,
    settings: Settings,
    now: Optional[datetime] = None,
) -> VerifyPaymentResponse:
    """
    Confirm a transaction with Paystack, then promote the novel and record
    the payment in one transaction.

    Nothing is written unless Paystack reports ``success`` for this exact
    reference. With ``VERIFY_IDEMPOTENT`` on, a reference that already has a
    payment record is answered without writing again.
    """
    reference = (request.reference or "").strip()
    if not reference:
        raise MissingReference()

    paystack_data = gateway.verify_transaction(reference)
    if not paystack_data.get("status"):
        raise GatewayVerifyFailed()

    data = paystack_data.get("data") or {}
    if data.get("status") != "success":
        logger.warning(f"Payment {reference} not successful: {data.get('status')}")
        raise PaymentNotSuccessful(data.get("status"))

    metadata = _metadata(data)
    book_id = _required_str(metadata, "bookId")
    plan_id = _required_str(metadata, "planId")
    user_id = _required_str(metadata, "userId")

    allowed_plans = settings.promotion_plans
    if allowed_plans and plan_id not in allowed_plans:
        logger.error(f"Unknown promotion plan {plan_id!r} for payment {reference}")
        raise InvalidField("planId")

    amount = _naira(data.get("amount"))

    # Idempotency guard
    if settings.VERIFY_IDEMPOTENT and store.find("payments", reference=reference):
        logger.info(f"Payment {reference} already processed, skipping")
        return VerifyPaymentResponse(
            message="Payment already verified",
            reference=reference,
        )

    if store.get("novels", book_id) is None:
        raise BookNotFound(book_id)

    now = now or datetime.utcnow()
    end_date = now + timedelta(days=promotion_days(plan_id))

    # promote + ledger entry: both or neither
    with store.atomic():
        store.update("novels", book_id, {
            "is_promoted": True,
            "promotion_plan": plan_id,
            "promotion_start_date": now,
            "promotion_end_date": end_date,
            "promotion_end_notification_sent": False,
        })
        store.add("payments", {
            "user_id": user_id,
            "book_id": book_id,
            "plan_id": plan_id,
            "amount": amount,
            "reference": reference,
            "status": "success",
            "created_at": now,
        })

    logger.info(
        f"Novel {book_id} promoted on plan {plan_id} until {end_date.isoformat()} (ref {reference})"
    )

    return VerifyPaymentResponse(
        message="Payment verified and novel promoted successfully",
        reference=reference,
    )
