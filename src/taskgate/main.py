"""TaskGate main application."""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from taskgate import __version__
from taskgate.api import router
from taskgate.api.deps import validate_auth_config
from taskgate.config import StoreBackend, settings
from taskgate.db.base import close_db, init_db
from taskgate.db.memory import InMemoryTaskStore
from taskgate.engine import AuditRecorder

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger("taskgate")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    logger.info("Starting TaskGate server...")
    logger.info(f"Environment: {settings.env.value}")
    logger.info(f"Store backend: {settings.store_backend.value}")

    # Validate authentication configuration (fail fast if insecure)
    validate_auth_config()

    # One audit trail per application instance
    app.state.audit_recorder = AuditRecorder()

    if settings.store_backend == StoreBackend.DATABASE:
        await init_db()
        logger.info("Database initialized")
    else:
        app.state.memory_store = InMemoryTaskStore()
        logger.warning("Using in-memory task store; data is lost on restart")

    yield

    # Cleanup
    logger.info("Shutting down TaskGate server...")
    if settings.store_backend == StoreBackend.DATABASE:
        await close_db()
    logger.info(f"Shutdown complete ({len(app.state.audit_recorder)} audit entries recorded)")


# Create FastAPI application
app = FastAPI(
    title="TaskGate",
    description="Role-scoped task access control with an audit trail",
    version=__version__,
    lifespan=lifespan,
)

# Add CORS middleware (explicit allowlist, no wildcards with credentials)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allowed_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allowed_methods,
    allow_headers=settings.cors_allowed_headers,
)

# Include API router
app.include_router(router)


def main():
    """Entry point for the application."""
    uvicorn.run(
        "taskgate.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
