from functools import lru_cache
import logging
import os
import random
from typing import Optional
from fastapi import APIRouter, Depends, Request
from starlette.datastructures import UploadFile
from starlette.exceptions import HTTPException
from starlette.formparsers import MultiPartException
from saudi_plate_api.ports.detector_port import PlateDetectorPort
from saudi_plate_api.adapters.detector.simulated_adapter import SimulatedPlateDetector
from saudi_plate_api.adapters.detector.fixed_adapter import FixedPlateDetector
from saudi_plate_api.domain import services
from saudi_plate_api.domain.errors import InternalError, MissingFile, PlateApiError
from saudi_plate_api.domain.models import HealthStatus, UploadedFile, UploadStatus
from saudi_plate_api.core.config import settings

logger = logging.getLogger(__name__)

router = APIRouter()

UPLOAD_FIELD = "plate_image"


# Dependency Injection (Cached)
@lru_cache()
def get_detector() -> PlateDetectorPort:
    if settings.detector == "simulated":
        return SimulatedPlateDetector(rng=random.Random(settings.random_seed))
    if settings.detector == "fixed":
        return FixedPlateDetector(settings.fixed_plate)
    raise ValueError(f"Unknown detector {settings.detector!r} (expected 'simulated' or 'fixed')")


def _declared_size(part: UploadFile) -> int:
    if part.size is not None:
        return part.size
    # Older parsers do not record the size; measure the spooled file instead
    pos = part.file.tell()
    part.file.seek(0, os.SEEK_END)
    size = part.file.tell()
    part.file.seek(pos)
    return size


def _uploaded_file_from_form(part) -> Optional[UploadedFile]:
    if part is None:
        return None
    if not isinstance(part, UploadFile):
        return UploadedFile(name="", status=UploadStatus.NOT_A_FILE)
    if not part.filename:
        return UploadedFile(
            name="",
            content_type=part.content_type,
            status=UploadStatus.NO_FILENAME,
        )
    return UploadedFile(
        name=part.filename,
        content_type=part.content_type,
        size=_declared_size(part),
    )


@router.get("/health")
@router.get("/health/")
@router.get("/{prefix:path}/health")
@router.get("/{prefix:path}/health/")
def health():
    return HealthStatus(server=settings.server_name).model_dump()


async def _read_form(request: Request):
    try:
        return await request.form()
    except (HTTPException, MultiPartException) as exc:
        # An unparseable body carries no plate_image part
        logger.warning("Could not parse upload form: %s", exc)
        raise MissingFile() from exc


@router.post("/plate-detect")
@router.post("/plate-detect/")
@router.post("/{prefix:path}/plate-detect")
@router.post("/{prefix:path}/plate-detect/")
async def plate_detect(
    request: Request,
    detector: PlateDetectorPort = Depends(get_detector),
):
    form = await _read_form(request)
    try:
        upload = _uploaded_file_from_form(form.get(UPLOAD_FIELD))
        result = services.run_detection(
            upload,
            detector,
            max_bytes=settings.max_upload_bytes,
        )
    except PlateApiError as exc:
        if exc.status_code < 500:
            logger.warning("Plate detection rejected (%s): %s", exc.status_code, exc.reason)
        raise
    except Exception as exc:
        logger.exception("Plate detection error: %s", exc)
        raise InternalError() from exc
    finally:
        await form.close()

    return result.model_dump()
