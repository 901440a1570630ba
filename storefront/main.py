"""
FastAPI application entry point
Main application factory and configuration
Reference: https://fastapi.tiangolo.com/tutorial/bigger-applications/
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from storefront.api.v1.api import api_router
from storefront.core.config import settings
from storefront.core.database import engine
from storefront.core.exceptions import StorefrontError

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup and shutdown events
    Validates database connection on startup
    Reference: https://fastapi.tiangolo.com/advanced/events/
    """
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        logger.info("Database connection successful")
    except (SQLAlchemyError, OSError) as e:
        # Start anyway so /health keeps answering; /health/ready reports the outage
        logger.error(f"Database connection failed: {e}")

    yield

    await engine.dispose()
    logger.info("Database connections closed")


app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    description="Multi-tenant storefront builder: business registration, catalogs and public storefronts",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def error_response(status_code: int, message: str, headers: dict | None = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message}, headers=headers)


# Reference: https://fastapi.tiangolo.com/tutorial/handling-errors/#install-custom-exception-handlers
@app.exception_handler(StorefrontError)
async def storefront_error_handler(request: Request, exc: StorefrontError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == status.HTTP_401_UNAUTHORIZED else None
    return error_response(exc.status_code, exc.message, headers)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return error_response(exc.status_code, str(exc.detail), getattr(exc, "headers", None))


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    if any(error.get("type") == "missing" for error in errors):
        message = "Missing required fields"
    else:
        first = errors[0] if errors else {}
        location = ".".join(str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path"))
        message = f"{location}: {first.get('msg', 'Invalid value')}" if location else first.get("msg", "Invalid request")
    logger.debug(f"Rejected request to {request.url.path}: {errors}")
    return error_response(status.HTTP_400_BAD_REQUEST, message)


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        f"Unhandled error on {request.method} {request.url.path}: {type(exc).__name__}: {exc}",
        exc_info=exc,
    )
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


app.include_router(api_router)


@app.get("/")
async def root():
    """
    Root endpoint
    Provides basic information about the API
    """
    return {
        "message": f"Welcome to {settings.PROJECT_NAME}",
        "version": settings.VERSION,
        "docs": "/docs",
    }
