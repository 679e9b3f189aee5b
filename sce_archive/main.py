"""
SCE Foundation Archive

FastAPI application entry point.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from sce_archive.api.middleware.request_id import RequestIdMiddleware
from sce_archive.api.v1 import router as api_v1_router
from sce_archive.config import get_settings
from sce_archive.database import close_db, init_db
from sce_archive.errors import (
    ArchiveError,
    CredentialError,
    DuplicateKeyError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from sce_archive.logging_config import configure_logging, get_logger
from sce_archive.messages import render_message
from sce_archive.schemas.common import HealthResponse

settings = get_settings()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """
    Application lifespan handler.

    Runs startup and shutdown tasks.
    """
    configure_logging(
        log_level=settings.log_level,
        environment=settings.environment,
        debug=settings.debug,
    )

    logger.info("Starting %s v%s", settings.project_name, settings.version)
    await init_db()
    logger.info("Database initialized")

    yield

    logger.info("Shutting down...")
    await close_db()
    logger.info("Database connections closed")


app = FastAPI(
    title=settings.project_name,
    description="""
    SCE Foundation Archive

    Clearance-gated archive of anomalous-object records and editorial posts.

    ## Access rules

    1. Every record and gated post carries a required clearance level (1-5)
    2. Anonymous requesters see level 1 and public content only
    3. Only Admins create, edit or delete content
    4. Only Admins change roles and clearances, never their own
    """,
    version=settings.version,
    lifespan=lifespan,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
)


# add_middleware stacks innermost-first: the last one added is outermost
_cors_origins = [
    "http://localhost:3000",
    "http://localhost:5173",
    "http://127.0.0.1:3000",
]

app.add_middleware(RequestIdMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def status_for(exc: ArchiveError) -> int:
    """HTTP status for an archive error."""
    if isinstance(exc, ForbiddenError):
        if exc.is_authentication_failure:
            return status.HTTP_401_UNAUTHORIZED
        return status.HTTP_403_FORBIDDEN
    if isinstance(exc, CredentialError):
        return status.HTTP_401_UNAUTHORIZED
    if isinstance(exc, ValidationError):
        return status.HTTP_400_BAD_REQUEST
    if isinstance(exc, DuplicateKeyError):
        return status.HTTP_409_CONFLICT
    if isinstance(exc, NotFoundError):
        return status.HTTP_404_NOT_FOUND
    return status.HTTP_400_BAD_REQUEST


def _error_headers(request: Request, status_code: int) -> dict:
    headers = {}
    req_id = getattr(request.state, "request_id", None)
    if req_id:
        headers["X-Request-ID"] = req_id
    if status_code == status.HTTP_401_UNAUTHORIZED:
        headers["WWW-Authenticate"] = "Bearer"
    return headers


@app.exception_handler(ArchiveError)
async def archive_exception_handler(request: Request, exc: ArchiveError):
    """Render any archive error as JSON in the configured locale."""
    status_code = status_for(exc)
    return JSONResponse(
        status_code=status_code,
        content=exc.to_dict(settings.locale),
        headers=_error_headers(request, status_code),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError,
):
    """Malformed request bodies are validation errors like any other."""
    errors = []
    for error in exc.errors():
        field = ".".join(str(loc) for loc in error["loc"])
        errors.append({
            "field": field,
            "message": error["msg"],
            "type": error["type"],
        })
    content = {
        "detail": render_message("validation.invalid_request", settings.locale),
        "code": ValidationError.code,
        "errors": errors,
    }
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=content,
        headers=_error_headers(request, status.HTTP_400_BAD_REQUEST),
    )


@app.exception_handler(Exception)
async def general_exception_handler(
    request: Request,
    exc: Exception,
):
    """Handle unexpected exceptions."""
    logger.exception("Unhandled exception: %s", exc)
    req_id = getattr(request.state, "request_id", None)
    if settings.debug:
        content = {
            "detail": str(exc),
            "type": type(exc).__name__,
            "request_id": req_id,
        }
    else:
        content = {"detail": "Internal server error", "request_id": req_id}
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=content,
        headers=_error_headers(request, status.HTTP_500_INTERNAL_SERVER_ERROR),
    )


@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check():
    """Check application health."""
    return HealthResponse(status="ok", version=settings.version, database="connected")


@app.get("/", tags=["Root"])
async def root():
    """Root endpoint with API information."""
    return {
        "name": settings.project_name,
        "version": settings.version,
        "docs": "/docs" if settings.debug else "disabled",
        "api": {
            "v1": settings.api_v1_prefix,
        },
    }


app.include_router(
    api_v1_router,
    prefix=settings.api_v1_prefix,
)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "sce_archive.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
    )
