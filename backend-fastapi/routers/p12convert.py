# routers/p12convert.py
# PKCS12 create/analyze endpoint

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile
from fastapi.responses import JSONResponse

from certificates.exceptions import P12ConverterError
from certificates.types import (
    CreateResult, MaterialKind, RequestContext, UploadedMaterial
)
from services.debug_utils import log_function_call
from services.p12_converter import P12ConverterService, p12_converter_service

logger = logging.getLogger(__name__)
router = APIRouter(tags=["p12convert"])


def get_converter_service() -> P12ConverterService:
    return p12_converter_service


async def read_upload(
    upload: Optional[UploadFile],
    kind: MaterialKind,
    service: P12ConverterService
) -> Optional[UploadedMaterial]:
    """Read at most one byte past the ceiling so oversize uploads are never copied whole"""
    if upload is None:
        return None

    limit = service.validator.limit_for(kind)
    content = await upload.read(limit + 1)
    declared_size = upload.size if upload.size is not None else len(content)
    return UploadedMaterial(
        kind=kind,
        content=content,
        filename=upload.filename or "",
        declared_size=declared_size,
    )


def error_response(error: P12ConverterError) -> JSONResponse:
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


@router.post("/p12convert")
@log_function_call()
async def p12convert(
    request: Request,
    cmd: Optional[str] = Form(None),
    certfile: Optional[UploadFile] = File(None),
    keyfile: Optional[UploadFile] = File(None),
    calist: Optional[UploadFile] = File(None),
    p12file: Optional[UploadFile] = File(None),
    p12pass: Optional[str] = Form(None),
    service: P12ConverterService = Depends(get_converter_service)
):
    """
    Create a PKCS12 bundle or analyze an existing one.

    - cmd=create: certfile, keyfile, optional calist, p12pass.
      Returns the download URL of the staged bundle and its contents.
    - cmd=analyze: p12file, p12pass.
      Returns the certificate, key and CA chain found in the bundle.

    Failures return {success: false, error, field, message}.
    """
    logger.info(f"p12convert request: cmd={cmd}")

    try:
        uploads = {
            MaterialKind.CERTIFICATE: certfile,
            MaterialKind.PRIVATE_KEY: keyfile,
            MaterialKind.CA_LIST: calist,
            MaterialKind.BUNDLE: p12file,
        }
        materials = {}
        for kind, upload in uploads.items():
            material = await read_upload(upload, kind, service)
            if material is not None:
                materials[kind] = material

        context = RequestContext(
            command=cmd or "",
            materials=materials,
            passphrase=p12pass,
            base_url=f"{request.url.scheme}://{request.url.netloc}",
        )
        result = service.execute(context)

    except P12ConverterError as e:
        logger.info(f"p12convert {cmd} failed: {e.category.value} ({e.field}): {e.message}")
        return error_response(e)

    except Exception as e:
        logger.error(f"Unexpected error in p12convert {cmd}: {e}")
        import traceback
        logger.error(f"Full traceback: {traceback.format_exc()}")
        return JSONResponse(
            status_code=500,
            content={
                "success": False,
                "error": "InternalError",
                "field": None,
                "message": "Internal server error while processing the PKCS12 request"
            }
        )

    if isinstance(result, CreateResult):
        return {
            "success": True,
            "command": "create",
            "artifact": result.artifact.to_dict(service.store.ttl_seconds),
            "summary": result.summary,
        }

    return {
        "success": True,
        "command": "analyze",
        "filename": result.filename,
        "size": result.size,
        "summary": result.summary,
    }
