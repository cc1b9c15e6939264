"""Response envelope shared by every action."""

from typing import Any, Literal

from pydantic import BaseModel

from app.errors import AppError, ErrorKind


class SuccessResponse(BaseModel):
    """Successful action result."""

    status: Literal["success"] = "success"
    data: Any = None


class ErrorResponse(BaseModel):
    """Failed action. ``retryable`` tells the client whether to try again."""

    status: Literal["error"] = "error"
    message: str
    kind: ErrorKind
    retryable: bool = False

    @classmethod
    def from_error(cls, error: AppError) -> "ErrorResponse":
        return cls(message=error.message, kind=error.kind, retryable=error.retryable)
