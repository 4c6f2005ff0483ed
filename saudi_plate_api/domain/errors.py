from typing import Optional
from saudi_plate_api.domain.models import DetectionFailure


class PlateApiError(Exception):
    status_code = 500
    reason = "An unexpected error occurred while processing the image."

    def __init__(self, reason: Optional[str] = None):
        if reason is not None:
            self.reason = reason
        super().__init__(self.reason)

    def to_failure(self) -> DetectionFailure:
        return DetectionFailure(reason=self.reason, http_status=self.status_code)


class MissingFile(PlateApiError):
    status_code = 422
    reason = "No image file provided"


class UploadFailed(PlateApiError):
    status_code = 422
    reason = "File upload error"


class InvalidMimeType(PlateApiError):
    status_code = 422
    reason = "Invalid file type. Please upload JPEG, PNG, JPG, GIF, or WebP images."


class FileTooLarge(PlateApiError):
    status_code = 422

    def __init__(self, max_mb: int = 5):
        super().__init__(f"File size too large. Maximum size is {max_mb}MB.")


class NoPlateDetected(PlateApiError):
    status_code = 404
    reason = "No valid Saudi Arabia license plate detected in the image."


class InternalError(PlateApiError):
    status_code = 500
