from fastapi import Depends
from sqlmodel import Session
from app.config import Settings, settings
from app.database import get_session
from app.services.document_store import DocumentStore
from app.services.paystack_client import PaystackClient


def get_settings() -> Settings:
    return settings


def get_store(session: Session = Depends(get_session)) -> DocumentStore:
    return DocumentStore(session)


def get_gateway(config: Settings = Depends(get_settings)) -> PaystackClient:
    return PaystackClient(
        secret_key=config.PAYSTACK_SECRET_KEY,
        base_url=config.PAYSTACK_BASE_URL,
        timeout=config.PAYSTACK_TIMEOUT_SECONDS,
    )
