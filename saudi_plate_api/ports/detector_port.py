from typing import Protocol
from saudi_plate_api.domain.models import UploadedFile


class PlateDetectorPort(Protocol):
    def detect(self, upload: UploadedFile) -> str:
        ...
