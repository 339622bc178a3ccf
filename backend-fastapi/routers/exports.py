# routers/exports.py
# Download endpoint for staged PKCS12 bundles

import logging

from fastapi import APIRouter, Depends, Response

from config import settings
from certificates.exceptions import P12ConverterError
from routers.p12convert import error_response
from services.artifact_store import ArtifactStore, artifact_store

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/" + settings.EXPORT_URL_PATH.strip("/"), tags=["exports"])


def get_artifact_store() -> ArtifactStore:
    return artifact_store


@router.get("/tmp/{filename}")
def download_artifact(filename: str, store: ArtifactStore = Depends(get_artifact_store)):
    """Serve a staged bundle until its TTL runs out"""
    try:
        artifact, data = store.read(filename)
    except P12ConverterError as e:
        logger.info(f"Download of {filename} refused: {e.category.value}: {e.message}")
        return error_response(e)

    logger.info(f"Serving PKCS12 artifact {artifact.filename} ({len(data)} bytes)")
    return Response(
        content=data,
        media_type="application/x-pkcs12",
        headers={
            "Content-Disposition": f"attachment; filename={artifact.filename}",
            "Content-Length": str(len(data)),
            "Cache-Control": "no-store",
        }
    )
