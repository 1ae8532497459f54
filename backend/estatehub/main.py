"""EstateHub: FastAPI application entry point."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from estatehub.api.v1.approvals import router as approvals_router
from estatehub.api.v1.auth import router as auth_router
from estatehub.api.v1.notifications import router as notifications_router
from estatehub.api.v1.properties import router as properties_router
from estatehub.api.v1.saved import router as saved_router
from estatehub.config import settings
from estatehub.errors import EstateHubError

# Configure root logger so all estatehub.* loggers output to stderr (captured by Docker).
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan handler for startup and shutdown events."""
    # Startup
    if not settings.email_configured:
        logger.warning("Azure Communication Services not configured; email notifications disabled")
    if not settings.sms_configured:
        logger.warning("Twilio not configured; SMS notifications disabled")
    yield
    # Shutdown: dispose engine connections
    from estatehub.database import engine

    await engine.dispose()


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Property listing marketplace: admin approval workflow, owner notifications and listing queries.",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(EstateHubError)
async def estatehub_error_handler(request: Request, exc: EstateHubError) -> JSONResponse:
    """Render domain errors as ``{"detail": ..., "code": ...}``."""
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.public_message, "code": exc.code})


# Routers
app.include_router(auth_router)
app.include_router(approvals_router)
app.include_router(properties_router)
app.include_router(notifications_router)
app.include_router(saved_router)


@app.get("/health", tags=["health"])
async def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy", "service": settings.app_name}


@app.get("/", tags=["root"])
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {
        "service": settings.app_name,
        "version": settings.app_version,
        "docs": "/docs",
    }
