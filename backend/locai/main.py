import logging
import os
import secrets
import time
from contextlib import asynccontextmanager
from logging.handlers import RotatingFileHandler
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from locai.config import settings

# ─── Logging setup (file + console) ───
_LOG_DIR = Path(__file__).resolve().parent.parent / "logs"
_LOG_DIR.mkdir(exist_ok=True)

_log_level = getattr(logging, os.environ.get("LOG_LEVEL", "INFO").upper(), logging.INFO)

logging.basicConfig(
    level=_log_level,
    format="%(asctime)s %(levelname)-8s [%(name)s] %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    handlers=[
        logging.StreamHandler(),
        RotatingFileHandler(
            _LOG_DIR / "locai.log",
            maxBytes=10 * 1024 * 1024,  # 10 MB
            backupCount=5,
            encoding="utf-8",
        ),
    ],
)

# Quiet noisy libraries
logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

from locai.errors import NegotiationError
from locai.routers import discounts, negotiation_settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("LocAI negotiation API starting")

    yield

    # Shutdown
    from locai.database import engine
    from locai.services.cache_service import cache_service

    await cache_service.close()
    await engine.dispose()
    logger.info("LocAI negotiation API stopped")


app = FastAPI(
    title="LocAI Negotiation",
    description="Dynamic discount negotiation engine for property rentals",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _new_request_id() -> str:
    return f"req_{int(time.time() * 1000)}_{secrets.token_hex(2)}"


def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", None) or _new_request_id()


@app.middleware("http")
async def assign_request_id(request: Request, call_next):
    """Tag every request with an id that appears in logs, error payloads and X-Request-ID."""
    request.state.request_id = _new_request_id()
    response = await call_next(request)
    response.headers["X-Request-ID"] = request.state.request_id
    return response


@app.exception_handler(NegotiationError)
async def negotiation_error_handler(request: Request, exc: NegotiationError):
    request_id = _request_id(request)
    if exc.status_code >= 500:
        logger.error(f"[{request_id}] {exc.code}: {exc.message} ({exc.details})")
    else:
        logger.warning(f"[{request_id}] {exc.code}: {exc.message}")

    content = {
        "success": False,
        "error": exc.message,
        "code": exc.code,
        "requestId": request_id,
    }
    if settings.is_development and exc.details:
        content["details"] = exc.details
    return JSONResponse(status_code=exc.status_code, content=content)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    request_id = _request_id(request)
    logger.warning(f"[{request_id}] Validation error for {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=400,
        content={
            "success": False,
            "error": "Dados inválidos",
            "code": "VALIDATION_ERROR",
            "requestId": request_id,
            "details": jsonable_encoder(exc.errors()),
        },
    )


app.include_router(discounts.router, prefix="/api/ai/functions", tags=["ai-functions"])
app.include_router(negotiation_settings.router, prefix="/api/tenant/settings", tags=["tenant-settings"])


@app.get("/api/health")
async def health_check():
    return {"status": "ok", "service": "locai-negotiation"}
