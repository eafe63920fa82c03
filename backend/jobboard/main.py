import logging
from fastapi import FastAPI, HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from jobboard.core.config import settings
from jobboard.routes.users import router as users_router
from jobboard.services.errors import ServiceError

logger = logging.getLogger(__name__)

app = FastAPI(title="Job Board Applicant API")
logger.info(
    "Startup config: ENV=%s S3_BUCKET_NAME=%s RESUME_PUBLIC_BASE_URL=%s",
    settings.ENV,
    settings.S3_BUCKET_NAME or "(unset)",
    settings.RESUME_PUBLIC_BASE_URL or "(s3 default)",
)

_ERROR_CODE_BY_STATUS: dict[int, str] = {
    400: "VALIDATION_ERROR",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    409: "CONFLICT",
    413: "PAYLOAD_TOO_LARGE",
    422: "VALIDATION_ERROR",
    500: "INTERNAL_ERROR",
}


def _error_code(status_code: int) -> str:
    return _ERROR_CODE_BY_STATUS.get(int(status_code), "HTTP_ERROR")


def _failure(status_code: int, error: str, message: str, details: dict | None = None) -> JSONResponse:
    payload: dict = {"success": False, "error": error, "message": message}
    if details:
        payload["details"] = details
    return JSONResponse(status_code=status_code, content=payload)


@app.exception_handler(ServiceError)
def service_error_handler(request: Request, exc: ServiceError):  # noqa: ARG001
    return _failure(exc.status_code, exc.error_code, exc.message)


@app.exception_handler(HTTPException)
def http_exception_handler(request: Request, exc: HTTPException):  # noqa: ARG001
    detail = exc.detail
    message: str
    details: dict | None = None

    if isinstance(detail, str):
        message = detail
    elif isinstance(detail, dict):
        msg = detail.get("message")
        message = msg if isinstance(msg, str) and msg else "Request failed"
        det = detail.get("details")
        details = det if isinstance(det, dict) else None
    else:
        message = str(detail) if detail is not None else "Request failed"

    return _failure(exc.status_code, _error_code(exc.status_code), message, details)


@app.exception_handler(RequestValidationError)
def validation_exception_handler(request: Request, exc: RequestValidationError):  # noqa: ARG001
    return _failure(
        422,
        "VALIDATION_ERROR",
        "Invalid request payload",
        {"errors": jsonable_encoder(exc.errors())},
    )


@app.exception_handler(Exception)
def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return _failure(500, "INTERNAL_ERROR", "Internal Server Error")


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(users_router)

@app.get("/health")
def health_check():
    return {"status": "ok"}
