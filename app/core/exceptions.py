# app/core/exceptions.py
"""
Error taxonomy shared by services.

Each error is an HTTPException so FastAPI renders it as
{"detail": ...} with the matching status code, the same way
services elsewhere raise HTTPException directly.
"""
from typing import Any

from fastapi import HTTPException, status


class ValidationError(HTTPException):
    """A required field is missing or a value is unusable (400)."""

    def __init__(self, detail: Any = "Invalid request"):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class NotFoundError(HTTPException):
    """The referenced parent id or variant does not exist (404)."""

    def __init__(self, detail: Any = "Not found"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class ConflictError(HTTPException):
    """A unique field (e.g. slug) collides with another row (409)."""

    def __init__(self, detail: Any = "Conflict"):
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class NotRetryableError(HTTPException):
    """Stored data is malformed; repeating the request will not help (500)."""

    def __init__(self, detail: Any = "Internal data error"):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=detail,
        )
