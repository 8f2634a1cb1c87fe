from typing import Any, Optional


class AppError(Exception):
    """Application error carrying the HTTP status and the public error code."""

    def __init__(self, status_code: int, code: str, message: str, details: Optional[Any] = None):
        super().__init__(message)
        self.status_code = status_code
        self.code = code
        self.message = message
        self.details = details


class NotFoundError(AppError):
    def __init__(self, code: str, message: str, details: Optional[Any] = None):
        super().__init__(404, code, message, details)
