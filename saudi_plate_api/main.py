import logging
from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from saudi_plate_api.api.routers import router
from saudi_plate_api.core.config import settings
from saudi_plate_api.domain.errors import InternalError, PlateApiError


logging.basicConfig(
    level=settings.log_level,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
}


# =========================
# App
# =========================

app = FastAPI(title="Saudi Plate Detection API", version="1.0.0", redirect_slashes=False)


@app.middleware("http")
async def log_and_allow_cors(request: Request, call_next):
    logger.info(
        "API Request: method=%s uri=%s user_agent=%s",
        request.method,
        request.url.path,
        request.headers.get("user-agent", "Unknown"),
    )
    response = await call_next(request)
    response.headers.update(CORS_HEADERS)
    return response


# =========================
# Error handlers
# =========================

@app.exception_handler(PlateApiError)
async def plate_api_error_handler(request: Request, exc: PlateApiError):
    failure = exc.to_failure()
    return JSONResponse(status_code=failure.http_status, content=failure.body())


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    # Unknown path and wrong method on a known path look the same to clients
    if exc.status_code in (404, 405):
        return JSONResponse(status_code=404, content={"error": "Endpoint not found"})
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=422, content={"error": "Invalid request"})


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    # Runs in the server error middleware, outside log_and_allow_cors
    logger.error("Unhandled error on %s %s: %s", request.method, request.url.path, exc, exc_info=exc)
    failure = InternalError().to_failure()
    return JSONResponse(status_code=failure.http_status, content=failure.body(), headers=CORS_HEADERS)


# =========================
# Endpoints
# =========================

@app.options("/{rest:path}")
def preflight():
    return Response(status_code=200, media_type="application/json")


app.include_router(router)


def run():
    import uvicorn

    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    run()
