"""Application exception types."""

from signage.schemas.error import ErrorResponse


class ApiError(Exception):
    """Structured API error that maps directly to contract error payloads."""

    def __init__(
        self,
        status_code: int,
        code: str,
        message: str,
        details: dict | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        self.status_code = status_code
        self.headers = headers
        self.payload = ErrorResponse(code=code, message=message, status=status_code, details=details)
        super().__init__(message)


class UnauthorizedError(ApiError):
    """No usable credential, or the credential is malformed or expired."""

    def __init__(self, message: str = "Invalid or missing credentials") -> None:
        super().__init__(status_code=401, code="UNAUTHORIZED", message=message)


class ForbiddenError(ApiError):
    """Valid credential without a permitted group.

    Shares HTTP 401 with ``UnauthorizedError``; only the error code differs.
    """

    def __init__(self, message: str = "Caller not authorized for this operation") -> None:
        super().__init__(status_code=401, code="FORBIDDEN", message=message)


class InvalidRequestError(ApiError):
    def __init__(self, fields: list[str], message: str = "Invalid request parameters") -> None:
        super().__init__(status_code=400, code="INVALID_REQUEST", message=message, details={"fields": fields})


class NotFoundError(ApiError):
    def __init__(self, message: str = "Resource not found") -> None:
        super().__init__(status_code=404, code="RESOURCE_NOT_FOUND", message=message)


class RateLimitExceededError(ApiError):
    def __init__(self, retry_after: int) -> None:
        retry_after = max(retry_after, 1)
        super().__init__(
            status_code=429,
            code="RATE_LIMITED",
            message="Too many requests",
            details={"retry_after": retry_after},
            headers={"Retry-After": str(retry_after)},
        )


class UnavailableError(ApiError):
    def __init__(self, message: str = "Service temporarily unavailable") -> None:
        super().__init__(status_code=503, code="SERVICE_UNAVAILABLE", message=message)


class InternalError(ApiError):
    def __init__(self) -> None:
        super().__init__(status_code=500, code="INTERNAL_ERROR", message="Internal server error")


__all__ = [
    "ApiError",
    "ForbiddenError",
    "InternalError",
    "InvalidRequestError",
    "NotFoundError",
    "RateLimitExceededError",
    "UnauthorizedError",
    "UnavailableError",
]
