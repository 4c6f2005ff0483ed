import random

import pytest
from fastapi.testclient import TestClient

from saudi_plate_api.adapters.detector.simulated_adapter import SimulatedPlateDetector
from saudi_plate_api.api import routers
from saudi_plate_api.domain.models import UploadedFile
from saudi_plate_api.main import app

CORS = {
    "access-control-allow-origin": "*",
    "access-control-allow-methods": "GET, POST, OPTIONS",
    "access-control-allow-headers": "Content-Type, Authorization",
}


def post_image(client, name="sample.png", data=b"\x89PNG" + b"0" * 4996, content_type="image/png", path="/plate-detect"):
    return client.post(path, files={"plate_image": (name, data, content_type)})


def assert_cors(response):
    for header, value in CORS.items():
        assert response.headers[header] == value


# =========================
# Health / routing
# =========================

@pytest.mark.parametrize("path", ["/health", "/api/health", "/v1/api/health", "/health/", "/api/health/"])
def test_health(client, path):
    response = client.get(path)
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("application/json")
    body = response.json()
    assert body["status"] == "ok"
    assert body["message"] == "API is running"
    assert body["server"]
    assert "T" in body["timestamp"]
    assert_cors(response)


def test_health_is_repeatable(client):
    first = client.get("/health").json()
    second = client.get("/health").json()
    assert first.keys() == second.keys()
    first.pop("timestamp")
    second.pop("timestamp")
    assert first == second


@pytest.mark.parametrize("path", ["/", "/health", "/plate-detect", "/anything/else"])
def test_options_preflight(client, path):
    response = client.options(path)
    assert response.status_code == 200
    assert response.content == b""
    assert response.headers["content-type"].startswith("application/json")
    assert_cors(response)


@pytest.mark.parametrize("method,path", [
    ("GET", "/nope"),
    ("GET", "/plate-detect"),
    ("POST", "/health"),
    ("DELETE", "/health"),
    ("POST", "/plate-detection"),
])
def test_unknown_endpoints(client, method, path):
    response = client.request(method, path)
    assert response.status_code == 404
    assert response.json() == {"error": "Endpoint not found"}
    assert_cors(response)


# =========================
# Plate detection
# =========================

def test_sample_image_end_to_end(client):
    response = post_image(client)
    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Saved in the system"
    assert body["plate"] == "أ ب ج 5678"
    assert body["timestamp"]
    assert body["file_info"] == {"name": "sample.png", "size": 5000, "type": "image/png"}
    assert "أ ب ج 5678" in response.content.decode("utf-8")
    assert_cors(response)


def test_prefixed_detect_path(client):
    response = post_image(client, name="test.jpg", content_type="image/jpeg", path="/api/plate-detect")
    assert response.status_code == 200
    assert response.json()["plate"] == "ر س د 1234"


def test_random_plate_with_seeded_detector(client, use_detector):
    use_detector(SimulatedPlateDetector(rng=random.Random(3)))
    expected = SimulatedPlateDetector(rng=random.Random(3)).detect(
        UploadedFile(name="car.png", content_type="image/png", size=5000)
    )
    response = post_image(client, name="car.png")
    assert response.status_code == 200
    assert response.json()["plate"] == expected


def test_missing_file(client):
    response = client.post("/plate-detect", data={"other": "value"})
    assert response.status_code == 422
    assert response.json() == {"error": "No image file provided"}


def test_missing_file_without_body(client):
    response = client.post("/plate-detect")
    assert response.status_code == 422
    assert "error" in response.json()


def test_field_sent_as_text(client):
    response = client.post("/plate-detect", data={"plate_image": "not-a-file"})
    assert response.status_code == 422
    assert response.json() == {"error": "File upload error"}


@pytest.mark.parametrize("content_type", ["text/plain", "image/bmp", "application/octet-stream"])
def test_invalid_type(client, content_type):
    response = post_image(client, name="sample.png", content_type=content_type)
    assert response.status_code == 422
    assert response.json() == {
        "error": "Invalid file type. Please upload JPEG, PNG, JPG, GIF, or WebP images."
    }


def test_file_too_large(client, use_detector, stub_detector):
    detector = use_detector(stub_detector())
    data = b"\0" * (5 * 1024 * 1024 + 1)
    response = post_image(client, name="big.png", data=data)
    assert response.status_code == 422
    assert response.json() == {"error": "File size too large. Maximum size is 5MB."}
    assert detector.calls == []


def test_no_plate_detected(client, use_detector, stub_detector):
    use_detector(stub_detector(plate="123456"))
    response = post_image(client)
    assert response.status_code == 404
    assert response.json() == {"error": "No valid Saudi Arabia license plate detected in the image."}
    assert_cors(response)


def test_detector_crash_is_internal_error(client, use_detector, stub_detector, caplog):
    use_detector(stub_detector(error=RuntimeError("model exploded")))
    response = post_image(client)
    assert response.status_code == 500
    assert response.json() == {"error": "An unexpected error occurred while processing the image."}
    assert "model exploded" in caplog.text
    assert_cors(response)


def test_detector_receives_upload_metadata(client, use_detector, stub_detector):
    detector = use_detector(stub_detector())
    post_image(client, name="Front.JPG", content_type="image/jpeg", data=b"x" * 1234)
    (upload,) = detector.calls
    assert upload.name == "Front.JPG"
    assert upload.content_type == "image/jpeg"
    assert upload.size == 1234


@pytest.mark.parametrize("path", ["/plate-detect/", "/api/plate-detect/"])
def test_detect_path_with_trailing_slash(client, path):
    response = post_image(client, name="test.png", path=path)
    assert response.status_code == 200
    assert response.json()["plate"] == "ر س د 1234"


@pytest.mark.parametrize("content_type", [
    "multipart/form-data",
])
def test_unparseable_multipart_is_missing_file(client, content_type):
    response = client.post("/plate-detect", content=b"", headers={"Content-Type": content_type})
    assert response.status_code == 422
    assert response.json() == {"error": "No image file provided"}
    assert_cors(response)


def test_misconfigured_detector_is_json_internal_error(monkeypatch, caplog):
    routers.get_detector.cache_clear()
    monkeypatch.setattr(routers.settings, "detector", "bogus")
    try:
        with TestClient(app, raise_server_exceptions=False) as c:
            response = post_image(c)
    finally:
        routers.get_detector.cache_clear()

    assert response.status_code == 500
    assert response.headers["content-type"].startswith("application/json")
    assert response.json() == {"error": "An unexpected error occurred while processing the image."}
    assert "Unknown detector" in caplog.text
    assert_cors(response)
