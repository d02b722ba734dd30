"""
Error taxonomy shared by the data layer, services and routers.

Each error carries the HTTP status it maps to; `main.py` installs a single
exception handler that renders them as `{"detail": ...}`.
"""

from __future__ import annotations


class APIError(RuntimeError):
    status_code = 500

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail


class AuthenticationError(APIError):
    status_code = 401


class AuthorizationError(APIError):
    status_code = 403


class NotFoundError(APIError):
    status_code = 404


class ValidationError(APIError):
    status_code = 400


class StorageError(APIError):
    """
    Wraps a driver failure (connectivity, constraint, syntax).

    `operation` and `entity` say what was being attempted, e.g.
    ("insert", "performers"). The driver exception is kept as `__cause__`.
    """

    status_code = 500

    def __init__(self, operation: str, entity: str, cause: BaseException | None = None) -> None:
        detail = f"Error during {operation} on {entity}"
        if cause is not None:
            detail = f"{detail}: {cause}"
        super().__init__(detail)
        self.operation = operation
        self.entity = entity
        self.cause = cause
