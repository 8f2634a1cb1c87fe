import time
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from pydantic import ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from storefront.api import brands, categories, products
from storefront.config import settings
from storefront.core.errors import AppError
from storefront.core.logging import get_logger, setup_logging
from storefront.core.responses import ApiResponse, api_error, api_success
from storefront.database import async_engine
from storefront.schemas import HealthStatus

logger = get_logger(__name__)

STARTED_AT = time.monotonic()

app = FastAPI(
    title=settings.api_title,
    description="Catalog browsing API for the storefront",
    version=settings.api_version,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
    max_age=600,
)

app.include_router(products.router, prefix=settings.api_prefix)
app.include_router(categories.router, prefix=settings.api_prefix)
app.include_router(brands.router, prefix=settings.api_prefix)


@app.on_event("startup")
async def startup_event():
    setup_logging()
    logger.info("Starting %s (%s)", settings.api_title, settings.environment)


@app.on_event("shutdown")
async def shutdown_event():
    await async_engine.dispose()


@app.middleware("http")
async def log_requests(request: Request, call_next):
    if settings.debug:
        logger.debug("%s %s", request.method, request.url.path)
    return await call_next(request)


@app.get("/")
async def root():
    return api_success({
        "message": settings.api_title,
        "version": settings.api_version,
        "environment": settings.environment,
        "documentation": app.docs_url,
    })


@app.get(f"{settings.api_prefix}/health", response_model=ApiResponse[HealthStatus])
async def health_check():
    return api_success(HealthStatus(
        status="OK",
        timestamp=datetime.now(timezone.utc),
        uptime=round(time.monotonic() - STARTED_AT, 3),
    ))


def validation_details(errors) -> list:
    details = []
    for error in errors:
        field = ".".join(str(part) for part in error["loc"] if part not in ("query", "path", "body"))
        details.append({"field": field, "message": error["msg"]})
    return details


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    return api_error(exc.code, exc.message, status=exc.status_code, details=exc.details)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    return api_error("VALIDATION_ERROR", "Invalid input data", status=400, details=validation_details(exc.errors()))


@app.exception_handler(ValidationError)
async def query_validation_handler(request: Request, exc: ValidationError):
    return api_error("VALIDATION_ERROR", "Invalid input data", status=400, details=validation_details(exc.errors()))


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 404:
        return api_error("NOT_FOUND", f"Route {request.method} {request.url.path} not found", status=404)
    return api_error("HTTP_ERROR", str(exc.detail), status=exc.status_code)


# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    message = str(exc) if settings.debug else "An unexpected error occurred"
    return api_error("INTERNAL_SERVER_ERROR", message, status=500)
