"""Exception taxonomy shared by the repositories, services and router."""

from typing import Optional


class ApiError(Exception):
    """Base error carrying the HTTP status it maps to"""
    status_code = 500

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(ApiError):
    """Missing required field, bad upload or other rejected input"""
    status_code = 400


class CapacityError(ValidationError):
    """A project already holds the maximum number of images"""


class NotFoundError(ApiError):
    status_code = 404


class MethodNotAllowedError(ApiError):
    status_code = 405


class DatabaseConnectionError(ApiError):
    status_code = 500


class StorageError(ApiError):
    """An uploaded file could not be written to or removed from disk"""
    status_code = 500
