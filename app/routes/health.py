from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlmodel import Session, text
from datetime import datetime
import logging

from app.database import get_session

logger = logging.getLogger(__name__)

router = APIRouter()

@router.get("/check")
def health_check(session: Session = Depends(get_session)):
    db_status = "ok"

    try:
        # simple DB ping
        session.exec(text("SELECT 1"))
    except Exception:
        logger.exception("Health check database ping failed")
        db_status = "failed"

    return JSONResponse(
        status_code=200 if db_status == "ok" else 503,
        content={
            "status": "ok" if db_status == "ok" else "degraded",
            "service": "novel-promotions",
            "database": db_status,
            "timestamp": datetime.utcnow().isoformat(),
        },
    )
