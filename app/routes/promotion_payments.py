import logging
from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError

from app.config import Settings
from app.dependencies.payments import get_gateway, get_settings, get_store
from app.schemas.payment_schemas import (
    InitializeTransactionRequest,
    InitializeTransactionResponse,
    VerifyPaymentRequest,
    VerifyPaymentResponse,
)
from app.services.document_store import DocumentStore
from app.services.exceptions import InternalError, PaymentFlowError
from app.services.paystack_client import PaystackClient
from app.services.promotion_service import initialize_transaction, verify_payment

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/initialize-transaction", response_model=InitializeTransactionResponse)
def initialize_promotion_transaction(
    payload: InitializeTransactionRequest,
    gateway: PaystackClient = Depends(get_gateway),
    store: DocumentStore = Depends(get_store),
    config: Settings = Depends(get_settings),
):
    """Start a Paystack payment for a novel promotion"""
    try:
        return initialize_transaction(
            request=payload,
            gateway=gateway,
            store=store,
            settings=config,
        )
    except PaymentFlowError:
        raise
    except SQLAlchemyError:
        logger.exception("Payment initializing error (database)")
        raise InternalError("Database operation failed. Please contact support.")
    except Exception:
        logger.exception("Payment initializing error")
        raise InternalError()


@router.post("/verify-payment", response_model=VerifyPaymentResponse)
def verify_promotion_payment(
    payload: VerifyPaymentRequest,
    gateway: PaystackClient = Depends(get_gateway),
    store: DocumentStore = Depends(get_store),
    config: Settings = Depends(get_settings),
):
    """Verify a Paystack payment and promote the novel"""
    try:
        return verify_payment(
            request=payload,
            gateway=gateway,
            store=store,
            settings=config,
        )
    except PaymentFlowError:
        raise
    except SQLAlchemyError:
        logger.exception("Error verifying payment (database)")
        raise InternalError("Database operation failed. Please contact support.")
    except Exception:
        logger.exception("Error verifying payment")
        raise InternalError()
