# routers/health.py
# Health check endpoints

import datetime
import os
import sys
import time
from fastapi import APIRouter, Depends
from pydantic import BaseModel
from typing import Dict, Any

from services.artifact_store import ArtifactStore
from routers.exports import get_artifact_store

class HealthResponse(BaseModel):
    status: str
    timestamp: str
    uptime: int
    export: Dict[str, Any]

router = APIRouter()

_start_time = time.time()

def get_uptime():
    """Get uptime from when the application started"""
    return int(time.time() - _start_time)

def get_export_health(store: ArtifactStore) -> Dict[str, Any]:
    """Check the export directory is present and writable"""
    if not store.tmp_dir.is_dir():
        return {"status": "missing", "directory": str(store.tmp_dir), "artifacts": 0}

    writable = os.access(store.tmp_dir, os.W_OK)
    return {
        "status": "healthy" if writable else "read_only",
        "directory": str(store.tmp_dir),
        "artifacts": store.count_artifacts(),
        "ttl_seconds": store.ttl_seconds
    }

@router.get("/health", response_model=HealthResponse, tags=["health"])
def health_check(store: ArtifactStore = Depends(get_artifact_store)):
    """Health check endpoint with export directory status"""
    export = get_export_health(store)

    overall_status = "online"
    if export["status"] != "healthy":
        overall_status = "degraded"  # Still online but cannot stage bundles

    return HealthResponse(
        status=overall_status,
        timestamp=datetime.datetime.now().isoformat(),
        uptime=get_uptime(),
        export=export
    )

@router.get("/health/detailed", tags=["health"])
def detailed_health_check(store: ArtifactStore = Depends(get_artifact_store)):
    """Detailed health check with more information"""
    export = get_export_health(store)

    return {
        "status": "online" if export["status"] == "healthy" else "degraded",
        "timestamp": datetime.datetime.now().isoformat(),
        "uptime": get_uptime(),
        "components": {
            "export": export
        },
        "system": {
            "python_version": f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}",
            "start_time": _start_time
        }
    }
