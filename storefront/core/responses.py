from typing import Any, Generic, Optional, TypeVar

from fastapi.responses import JSONResponse
from pydantic import BaseModel

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    success: bool = True
    data: T


def api_success(data: T) -> ApiResponse[T]:
    return ApiResponse(data=data)


def error_payload(code: str, message: str, details: Optional[Any] = None) -> dict:
    error = {"code": code, "message": message}
    if details:
        error["details"] = details
    return {"success": False, "error": error}


def api_error(code: str, message: str, status: int = 400, details: Optional[Any] = None) -> JSONResponse:
    return JSONResponse(error_payload(code, message, details), status_code=status)
