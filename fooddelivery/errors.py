# fooddelivery/errors.py
from __future__ import annotations


class AppError(Exception):
    """Base for errors that are safe to show to API callers.

    `message` ends up verbatim in the `{"message": ...}` response body, so it
    must never carry store or stack details.
    """

    status_code = 500
    default_message = "Something went wrong"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AppError):
    status_code = 400
    default_message = "Invalid request"


class Conflict(AppError):
    status_code = 400
    default_message = "Already exists"


class Unauthorized(AppError):
    status_code = 401
    default_message = "Not authorized"


class Forbidden(AppError):
    status_code = 403
    default_message = "Not allowed"


class NotFound(AppError):
    status_code = 404
    default_message = "Not found"


class Unexpected(AppError):
    status_code = 500
    default_message = "Something went wrong"
