# main.py - FastAPI PKCS12 Converter Backend
# Application setup with router modules

import logging
from fastapi import FastAPI
from contextlib import asynccontextmanager
from fastapi.middleware.cors import CORSMiddleware

from config import settings
from utils.logging_utils import configure_logging
from routers import (
    p12convert_router,
    exports_router,
    health_router
)
from services.artifact_store import artifact_store

# Configure logging
configure_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

# ============================================================================
# APPLICATION LIFESPAN MANAGEMENT
# ============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan management"""
    # Startup
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")
    logger.info(f"Debug mode: {settings.DEBUG}")
    artifact_store.ensure_directory()
    purged = artifact_store.purge_expired()
    logger.info(f"Export directory ready: {artifact_store.tmp_dir} ({purged} expired artifacts purged)")

    yield

    # Shutdown
    logger.info(f"Shutting down {settings.APP_NAME}")

# ============================================================================
# FASTAPI APPLICATION SETUP
# ============================================================================

app = FastAPI(
    title=settings.APP_NAME,
    description="FastAPI backend for PKCS12 bundle creation and analysis",
    version=settings.APP_VERSION,
    debug=settings.DEBUG,
    lifespan=lifespan
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ============================================================================
# INCLUDE ROUTERS
# ============================================================================

app.include_router(health_router)
app.include_router(p12convert_router)
app.include_router(exports_router)

# ============================================================================
# ROOT ENDPOINT
# ============================================================================

@app.get("/", tags=["root"])
def read_root():
    """Root endpoint"""
    return {
        "message": settings.APP_NAME,
        "status": "online",
        "version": settings.APP_VERSION,
        "endpoints": {
            "health": "/health",
            "p12convert": "/p12convert",
            "downloads": f"{artifact_store.export_url_path}/tmp/{{filename}}",
            "docs": "/docs"
        },
        "limits": {
            "certfile": settings.MAX_CERT_SIZE,
            "keyfile": settings.MAX_KEY_SIZE,
            "calist": settings.MAX_CALIST_SIZE,
            "p12file": settings.MAX_CALIST_SIZE,
            "p12pass": settings.MAX_PASSPHRASE_LENGTH
        },
        "artifact_ttl_seconds": artifact_store.ttl_seconds
    }

# ============================================================================
# DEVELOPMENT SERVER
# ============================================================================

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower()
    )
