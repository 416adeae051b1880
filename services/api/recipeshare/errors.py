"""Application error taxonomy.

Every error carries the HTTP status it maps to and a message that is safe to
show to the client. ``main.py`` turns them into ``{"error": message}`` bodies.
"""

from __future__ import annotations


class AppError(Exception):
    status_code: int = 500
    default_message: str = "Server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AppError):
    status_code = 400
    default_message = "Invalid payload"


class Unauthenticated(AppError):
    status_code = 401
    default_message = "Not authenticated"


class InvalidCredentials(Unauthenticated):
    default_message = "Invalid email or password"


class Forbidden(AppError):
    status_code = 403
    default_message = "Forbidden"


class NotFound(AppError):
    status_code = 404
    default_message = "Not found"


class Conflict(AppError):
    status_code = 409
    default_message = "Conflict"


class PayloadTooLarge(AppError):
    status_code = 413
    default_message = "Photo too large (max 10MB)"


class UploadFailed(AppError):
    status_code = 500
    default_message = "Upload failed"


class ServerError(AppError):
    status_code = 500
    default_message = "Server error"
