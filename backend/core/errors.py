from typing import Any, Optional

from fastapi import HTTPException


class PortalError(HTTPException):
    """HTTPException that also carries a ``details`` field for the error envelope."""

    def __init__(self, status_code: int, error: str, details: Optional[Any] = None):
        super().__init__(status_code=status_code, detail=error)
        self.details = details


def error_envelope(error: Any, details: Optional[Any] = None) -> dict:
    body = {"success": False, "error": error}
    if details is not None:
        body["details"] = details
    return body
