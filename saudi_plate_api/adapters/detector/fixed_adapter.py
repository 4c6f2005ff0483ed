from saudi_plate_api.ports.detector_port import PlateDetectorPort
from saudi_plate_api.domain.models import UploadedFile


class FixedPlateDetector(PlateDetectorPort):
    """Always reports the same plate. Handy for demos and frontend work."""
    def __init__(self, plate: str):
        self.plate = plate

    def detect(self, upload: UploadedFile) -> str:
        return self.plate
