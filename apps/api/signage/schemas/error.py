"""API error response schemas."""

from typing import Any
from typing import Literal

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    code: str
    message: str
    status: int
    details: dict[str, Any] | None = None


class ValidationErrorDetails(BaseModel):
    fields: list[str]


class ValidationErrorResponse(BaseModel):
    code: Literal["INVALID_REQUEST"]
    message: str
    status: Literal[400]
    details: ValidationErrorDetails


class NotFoundErrorResponse(BaseModel):
    code: Literal["RESOURCE_NOT_FOUND"]
    message: str
    status: Literal[404]


class RateLimitedErrorDetails(BaseModel):
    retry_after: int


class RateLimitedErrorResponse(BaseModel):
    code: Literal["RATE_LIMITED"]
    message: str
    status: Literal[429]
    details: RateLimitedErrorDetails
