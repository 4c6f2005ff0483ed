from pydantic import BaseModel
import os
from typing import Optional


def _optional_int(name: str) -> Optional[int]:
    raw = os.getenv(name)
    return int(raw) if raw not in (None, "") else None


class Settings(BaseModel):
    server_name: str = os.getenv("SERVER_NAME", "Saudi Plate Detection API")
    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "8001"))
    log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()

    # Upload limits
    max_upload_mb: int = int(os.getenv("MAX_UPLOAD_MB", "5"))

    # Detector selection: "simulated" or "fixed"
    detector: str = os.getenv("DETECTOR", "simulated").lower()
    fixed_plate: str = os.getenv("FIXED_PLATE", "ر س د 1234")
    random_seed: Optional[int] = _optional_int("RANDOM_SEED")

    @property
    def max_upload_bytes(self) -> int:
        return self.max_upload_mb * 1024 * 1024

settings = Settings()
