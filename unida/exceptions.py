"""
Application error taxonomy.

Services raise these; the HTTP layer maps them to responses of the form
``{"error": message}`` (plus ``"errors"`` for field-level validation).
"""

from typing import Dict, Optional


class AppError(Exception):
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AppError):
    status_code = 400
    default_message = "Invalid request"

    def __init__(
        self,
        message: Optional[str] = None,
        errors: Optional[Dict[str, str]] = None,
    ):
        super().__init__(message)
        self.errors = errors or {}


class Unauthorized(AppError):
    status_code = 401
    default_message = "Authentication required"


class Forbidden(AppError):
    status_code = 403
    default_message = "Not allowed"


class NotFound(AppError):
    status_code = 404
    default_message = "Not found"


class UploadError(AppError):
    """
    Media host failure.

    Unsupported or oversized content is a client error (400); network or
    storage failures are server errors (500).
    """

    status_code = 500
    default_message = "File upload failed"

    def __init__(self, message: Optional[str] = None, status_code: int = 500):
        super().__init__(message)
        self.status_code = status_code


class ServerError(AppError):
    status_code = 500
