"""
API smoke check for a running plate detection server.

Calls the health endpoint, then uploads a 1x1 PNG named like a test image
and reports whether the detection endpoint answered with a plate.

Usage:
    python -m saudi_plate_api.tools.check_api --base-url http://localhost:8001
"""

import argparse
import base64
import sys

import httpx

# 1x1 pixel PNG
TEST_IMAGE_PNG = base64.b64decode(
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mP8/5+hHgAHggJ/PchI7wAAAABJRU5ErkJggg=="
)
TEST_IMAGE_NAME = "test-plate.png"


def check_api(client: httpx.Client) -> bool:
    """Run both checks with an already configured client. True on success."""
    print("Testing API Health Endpoint...")
    health = client.get("/health")
    print(f"Health Response: {health.text}\n")

    print("Testing Plate Detection Endpoint...")
    response = client.post(
        "/plate-detect",
        files={"plate_image": (TEST_IMAGE_NAME, TEST_IMAGE_PNG, "image/png")},
        headers={"Accept": "application/json"},
    )
    print(f"HTTP Status Code: {response.status_code}")
    print(f"Response: {response.text}")

    if response.status_code != 200:
        print("\nERROR: API test failed")
        return False

    print("\nSUCCESS: API is working correctly!")
    plate = response.json().get("plate")
    if plate:
        print(f"Detected Plate: {plate}")
    return True


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Smoke check the plate detection API")
    parser.add_argument(
        "--base-url",
        type=str,
        default="http://localhost:8001",
        help="Base URL of the running API",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=10.0,
        help="Request timeout in seconds",
    )
    args = parser.parse_args(argv)

    try:
        with httpx.Client(base_url=args.base_url, timeout=args.timeout) as client:
            ok = check_api(client)
    except httpx.HTTPError as exc:
        print(f"ERROR: could not reach {args.base_url}: {exc}")
        return 1

    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
