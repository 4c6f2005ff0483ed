from datetime import datetime, timezone
from enum import Enum
from pydantic import BaseModel, Field
from typing import Optional


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class UploadStatus(str, Enum):
    OK = "ok"
    NOT_A_FILE = "not_a_file"      # form field sent as plain text
    NO_FILENAME = "no_filename"    # file part without a client filename


class UploadedFile(BaseModel):
    """Metadata of the `plate_image` part. The file body is never read."""
    name: str
    content_type: Optional[str] = None
    size: int = 0
    status: UploadStatus = UploadStatus.OK


class FileInfo(BaseModel):
    name: str
    size: int
    type: Optional[str] = None


class DetectionSuccess(BaseModel):
    message: str = "Saved in the system"
    plate: str
    timestamp: str = Field(default_factory=utc_now_iso)
    file_info: FileInfo


class DetectionFailure(BaseModel):
    reason: str
    http_status: int

    def body(self) -> dict:
        return {"error": self.reason}


class HealthStatus(BaseModel):
    status: str = "ok"
    message: str = "API is running"
    timestamp: str = Field(default_factory=utc_now_iso)
    server: str
