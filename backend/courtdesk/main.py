"""
FastAPI application entry point

Run with ``python -m courtdesk`` or ``uvicorn courtdesk.main:create_app --factory``.
"""
import asyncio
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from courtdesk import __version__ as VERSION
from courtdesk.api.api import api_router, ws_router
from courtdesk.core.config import Settings, get_settings
from courtdesk.core.logger import configure_logging, logger
from courtdesk.db.database import Database
from courtdesk.middleware.correlation import CorrelationMiddleware
from courtdesk.services.notification_hub import NotificationHub


# ── Error rendering ───────────────────────────────────────────────────────────

def _validation_message(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = [str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path")]
        reason = str(err.get("msg", "invalid value"))
        if reason.startswith("Value error, "):
            reason = reason[len("Value error, "):]
        parts.append(f"{'.'.join(loc)}: {reason}" if loc else reason)
    return "; ".join(parts) or "Invalid request"


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content={"success": False, "message": _validation_message(exc)},
    )


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={"success": False, "message": "Internal Server Error"},
    )


def _log_loop_exception(loop: asyncio.AbstractEventLoop, context: dict) -> None:
    logger.error(
        "Unhandled asyncio error: %s",
        context.get("message", "unknown"),
        exc_info=context.get("exception"),
    )


# ── Lifespan ──────────────────────────────────────────────────────────────────

@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    configure_logging(settings.LOG_LEVEL)

    db = Database(
        settings.DATABASE_URL,
        connect_timeout=settings.DB_CONNECT_TIMEOUT_SECONDS,
        echo=settings.DEBUG,
    )
    try:
        db.ping()
    except Exception:
        logger.critical("Database unreachable at startup, shutting down")
        db.dispose()
        raise
    if settings.DB_AUTO_CREATE:
        db.create_all()

    hub = NotificationHub(queue_size=settings.NOTIFICATION_QUEUE_SIZE)
    app.state.db = db
    app.state.notification_hub = hub

    asyncio.get_running_loop().set_exception_handler(_log_loop_exception)
    logger.info("%s %s started", settings.APP_NAME, VERSION)
    try:
        yield
    finally:
        hub.close()
        db.dispose()
        logger.info("%s stopped", settings.APP_NAME)


# ── Factory ───────────────────────────────────────────────────────────────────

def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.APP_NAME,
        version=VERSION,
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
        openapi_url="/openapi.json" if settings.DEBUG else None,
        lifespan=lifespan,
    )
    app.state.settings = settings

    # ── Routers ───────────────────────────────────────────────────────────────
    app.include_router(api_router, prefix="/api")
    app.include_router(ws_router, prefix="/ws")

    # ── Correlation ID middleware (must be added before CORS) ─────────────────
    app.add_middleware(CorrelationMiddleware)

    # ── CORS ──────────────────────────────────────────────────────────────────
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Correlation-ID"],
    )

    # ── Errors ────────────────────────────────────────────────────────────────
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    @app.get("/")
    def read_root():
        return {"status": "Server is running"}

    return app
