import pytest
from fastapi.testclient import TestClient

from saudi_plate_api.api.routers import get_detector
from saudi_plate_api.main import app


class StubDetector:
    """Returns a preset plate, or raises the preset exception."""
    def __init__(self, plate="ر س د 1234", error=None):
        self.plate = plate
        self.error = error
        self.calls = []

    def detect(self, upload):
        self.calls.append(upload)
        if self.error is not None:
            raise self.error
        return self.plate


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def use_detector():
    def _use(detector):
        app.dependency_overrides[get_detector] = lambda: detector
        return detector

    yield _use
    app.dependency_overrides.clear()


@pytest.fixture
def stub_detector():
    return StubDetector
