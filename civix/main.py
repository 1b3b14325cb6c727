"""
Civix Dispatch - FastAPI Application Entry Point

Issue classification and technician assignment for the Civix civic-issue
platform.

DESIGN PRINCIPLES:
- Reporting an issue never fails because of dispatch
- Automation assigns only on unambiguous, locally verified signals
- Everything else goes to a human through the admin inbox
- Auto-assignment is atomic: both records change or neither does
"""

import logging
import os
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.encoders import jsonable_encoder
from civix.core.settings import settings
from civix.routes import health, issues, notifications
from civix.services.store import get_dispatch_store
from civix.utils.seed import load_seed, seed_store


logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s"
)
logger = logging.getLogger(__name__)


# Initialize FastAPI app
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Classifies reported civic issues and assigns them to technicians",
    debug=settings.DEBUG
)


# Global exception handler to catch ALL exceptions
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Catch all unhandled exceptions and log them with full traceback."""
    logger.error(
        f"🔥 Unhandled exception on {request.method} {request.url.path}: {exc}",
        exc_info=exc
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": f"Internal server error: {str(exc)}"}
    )


# Pydantic validation error handler
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Catch Pydantic validation errors and log them."""
    logger.warning(f"Validation error on {request.method} {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=jsonable_encoder({"detail": exc.errors(), "body": exc.body})
    )


# Admin console and reporter app origins come from settings; never "*"
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _seed_mock_store() -> None:
    """Load the demo roster so the in-memory store has technicians to match."""
    if not settings.SEED_FILE or not os.path.exists(settings.SEED_FILE):
        logger.info("[STARTUP] No seed file found, in-memory roster starts empty")
        return
    try:
        technicians = load_seed(settings.SEED_FILE)
        count = seed_store(get_dispatch_store(), technicians)
        logger.info(f"[STARTUP] Seeded {count} technician(s) from {settings.SEED_FILE}")
    except Exception as e:
        # Fail gracefully - don't block startup
        logger.warning(f"⚠️ Failed to seed in-memory roster: {e}")


# Application lifecycle events
@app.on_event("startup")
async def startup_event():
    """
    Initialize services on application startup.
    Firestore connection, or the seeded in-memory store in mock mode.
    """
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")

    if settings.USE_MOCK_DB:
        _seed_mock_store()
        return

    try:
        from civix.config.firebase import initialize_firestore
        initialize_firestore()
    except Exception as e:
        logger.warning(f"⚠️ Firestore initialization failed: {e}")
        logger.warning("   The app will start but database operations may fail.")


@app.on_event("shutdown")
async def shutdown_event():
    """
    Cleanup on application shutdown.
    """
    logger.info(f"Shutting down {settings.APP_NAME}")


# Include routers
app.include_router(health.router)
app.include_router(issues.router)
app.include_router(notifications.router)


# Root endpoint
@app.get("/")
async def root():
    """
    Root endpoint - API information.
    """
    return {
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "status": "running",
        "docs": "/docs",
        "health": "/health",
        "notifications": "/admin/notifications"
    }
