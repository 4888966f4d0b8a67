# ───────────────────────────────────────────────────────────────
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.orm import configure_mappers
from starlette.exceptions import HTTPException as StarletteHTTPException

# ─── Local imports ─────────────────────────────────────────────
from src.seniku.config import s3_config
from src.seniku.config.settings import API_PREFIX, APP_NAME, CORS_ORIGINS, LOG_LEVEL
from src.seniku.db.session import create_db_and_tables, dispose_engine

# Registers every table before mapper configuration
import src.seniku.models  # noqa: F401

from src.seniku.routers import (
    achievement_router,
    assignment_router,
    auth_router,
    category_router,
    class_router,
    dashboard_router,
    export_router,
    notification_router,
    portfolio_router,
    submission_router,
    user_router,
)
from src.seniku.utils.logging_middleware import LoggingMiddleware
from src.seniku.utils.errors import field_errors
from src.seniku.utils.responses import error_response
from src.seniku.utils.time import get_current_time

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

# ─── FastAPI app ───────────────────────────────────────────────
app = FastAPI(
    title=APP_NAME,
    description="API for the SeniKu school art portfolio",
    version="1.0.0",
)

# ─── Middlewares ───────────────────────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(LoggingMiddleware)


# ─── Error envelope ────────────────────────────────────────────
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content=error_response(str(exc.detail), getattr(exc, "errors", None)),
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=error_response("Validation error", field_errors(exc.errors())),
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_response("Internal server error"),
    )


# ─── Startup / shutdown ────────────────────────────────────────
@app.on_event("startup")
async def on_startup():
    logger.info("Configuring SQLAlchemy mappers...")
    try:
        configure_mappers()
        logger.info("Mappers configured successfully.")
    except Exception as e:
        logger.error(f"Mapper configuration failed: {e}", exc_info=True)
        raise

    logger.info("Creating database and tables...")
    try:
        create_db_and_tables()
    except Exception as e:
        logger.error(f"Failed to create database and tables: {e}", exc_info=True)
        raise

    s3_config.ensure_buckets(s3_config.s3_client)


@app.on_event("shutdown")
async def on_shutdown():
    dispose_engine()


# ─── Routers ───────────────────────────────────────────────────
for module in (
    auth_router,
    user_router,
    class_router,
    category_router,
    achievement_router,
    assignment_router,
    submission_router,
    notification_router,
    dashboard_router,
    portfolio_router,
    export_router,
):
    app.include_router(module.router, prefix=API_PREFIX)


# ─── Simple endpoints ──────────────────────────────────────────
@app.get("/")
async def root():
    return {
        "message": "Welcome to SeniKu API",
        "docs_url": "/docs",
        "redoc_url": "/redoc",
    }


@app.get("/seniku/health")
async def health_check():
    return {"status": "ok", "timestamp": get_current_time().isoformat()}
