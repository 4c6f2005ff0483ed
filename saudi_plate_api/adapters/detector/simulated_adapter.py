import random
import threading
from typing import Optional
from saudi_plate_api.ports.detector_port import PlateDetectorPort
from saudi_plate_api.domain.models import UploadedFile

LARGE_FILE_BYTES = 1_000_000

EXAMPLE_PLATES = ("ر س د 1234", "أ ب ج 5678", "ل م ن 9012", "ق و ي 3456")

TEST_PLATE = "ر س د 1234"
SAMPLE_PLATE = "أ ب ج 5678"

ARABIC_PLATE_LETTERS = (
    "أ", "ب", "ج", "د", "ر", "س", "ص", "ط", "ع",
    "ف", "ق", "ك", "ل", "م", "ن", "ه", "و", "ي",
)


class SimulatedPlateDetector(PlateDetectorPort):
    """
    Stand-in for a real plate model. Picks a plate from file metadata only:
    large files get one of the example plates, "test"/"sample" file names get
    fixed plates, anything else gets a random 3-letter + 4-digit plate.
    """
    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()
        # one instance is shared by all requests
        self._lock = threading.Lock()

    def detect(self, upload: UploadedFile) -> str:
        name = (upload.name or "").lower()

        if upload.size > LARGE_FILE_BYTES:
            with self._lock:
                return self.rng.choice(EXAMPLE_PLATES)
        if "test" in name:
            return TEST_PLATE
        if "sample" in name:
            return SAMPLE_PLATE

        with self._lock:
            letters = [self.rng.choice(ARABIC_PLATE_LETTERS) for _ in range(3)]
            number = self.rng.randint(1, 9999)
        return f"{' '.join(letters)} {number:04d}"
