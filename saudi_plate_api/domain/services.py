import logging
import re
from typing import Optional

from saudi_plate_api.domain.errors import (
    FileTooLarge,
    InvalidMimeType,
    MissingFile,
    NoPlateDetected,
    UploadFailed,
)
from saudi_plate_api.domain.models import (
    DetectionSuccess,
    FileInfo,
    UploadedFile,
    UploadStatus,
)
from saudi_plate_api.ports.detector_port import PlateDetectorPort

logger = logging.getLogger(__name__)

# =========================
# DOMAIN LOGIC (Pure Python)
# =========================

ALLOWED_MIME_TYPES = ("image/jpeg", "image/png", "image/jpg", "image/gif", "image/webp")

DEFAULT_MAX_UPLOAD_BYTES = 5 * 1024 * 1024

ARABIC_RE = re.compile(r"[\u0600-\u06FF]")
ASCII_DIGIT_RE = re.compile(r"[0-9]")

PLATE_MIN_LEN = 6
PLATE_MAX_LEN = 20


def validate_upload(
    upload: Optional[UploadedFile],
    max_bytes: int = DEFAULT_MAX_UPLOAD_BYTES,
) -> UploadedFile:
    """
    Checks upload metadata in order: presence, upload status, MIME type, size.
    Raises the matching PlateApiError; returns the upload when all pass.
    """
    if upload is None:
        raise MissingFile()

    if upload.status is not UploadStatus.OK:
        raise UploadFailed()

    if upload.content_type not in ALLOWED_MIME_TYPES:
        raise InvalidMimeType()

    if upload.size > max_bytes:
        raise FileTooLarge(max_mb=max_bytes // (1024 * 1024))

    return upload


def is_valid_saudi_plate(plate: Optional[str]) -> bool:
    """
    Relaxed Saudi plate check: at least one Arabic letter, at least one
    ASCII digit, and 6..20 code points after trimming.
    """
    plate = (plate or "").strip()
    has_arabic = ARABIC_RE.search(plate) is not None
    has_digit = ASCII_DIGIT_RE.search(plate) is not None
    return has_arabic and has_digit and PLATE_MIN_LEN <= len(plate) <= PLATE_MAX_LEN


def run_detection(
    upload: Optional[UploadedFile],
    detector: PlateDetectorPort,
    max_bytes: int = DEFAULT_MAX_UPLOAD_BYTES,
) -> DetectionSuccess:
    upload = validate_upload(upload, max_bytes=max_bytes)

    logger.info(
        "Plate detection attempt: file_name=%s file_size=%s mime_type=%s",
        upload.name, upload.size, upload.content_type,
    )

    plate = detector.detect(upload)

    if not is_valid_saudi_plate(plate):
        logger.warning("Invalid plate format detected: %r", plate)
        raise NoPlateDetected()

    logger.info("Plate detection successful: %s", plate)

    return DetectionSuccess(
        plate=plate,
        file_info=FileInfo(name=upload.name, size=upload.size, type=upload.content_type),
    )
