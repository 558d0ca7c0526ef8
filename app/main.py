import logging
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from contextlib import asynccontextmanager

from app.database import create_db_and_tables
from app.config import settings
from app.middleware.cors import AllowListCORSMiddleware
from app.routes import health, promotion_payments
from app.services.exceptions import InternalError, PaymentFlowError

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Run DB creation ONLY in local
    if settings.ENV == "local":
        create_db_and_tables()
    yield

app = FastAPI(title="Novel Promotion Payments API", lifespan=lifespan)

app.add_middleware(
    AllowListCORSMiddleware,
    allowed_origins=settings.allowed_origins,
)


@app.exception_handler(PaymentFlowError)
async def payment_flow_error_handler(request: Request, exc: PaymentFlowError):
    if isinstance(exc, InternalError):
        logger.error(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.message}")
    else:
        logger.warning(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"status": False, "message": exc.message},
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    logger.warning(f"{request.method} {request.url.path} -> 400: {exc.errors()}")
    return JSONResponse(
        status_code=400,
        content={"status": False, "message": "Invalid request body"},
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code in (404, 405):
        return JSONResponse(
            status_code=404,
            content={"status": False, "message": "Route not found"},
        )
    return JSONResponse(
        status_code=exc.status_code,
        content={"status": False, "message": exc.detail},
    )


app.include_router(promotion_payments.router, tags=["Promotion Payments"])
app.include_router(health.router, prefix="/health", tags=["Health"])


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host="0.0.0.0", port=settings.PORT)
