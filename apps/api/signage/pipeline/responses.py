"""Mapping of pipeline results to HTTP responses."""

from __future__ import annotations

import mimetypes
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from fastapi.encoders import jsonable_encoder
from fastapi.responses import FileResponse, JSONResponse, Response
from pydantic import BaseModel

from signage.errors import ApiError


@dataclass(frozen=True, slots=True)
class FilePayload:
    """A file on disk to stream back, with an explicit content type."""

    path: Path
    media_type: str | None = None


@dataclass(frozen=True, slots=True)
class PipelineResult:
    """Exactly one of ``payload`` or ``error`` is meaningful."""

    payload: Any = None
    error: ApiError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, payload: Any) -> PipelineResult:
        return cls(payload=payload)

    @classmethod
    def failure(cls, error: ApiError) -> PipelineResult:
        return cls(error=error)


def error_response(exc: ApiError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.payload.model_dump(mode="json", exclude_none=True),
        headers=exc.headers,
    )


def success_response(payload: Any) -> Response:
    if isinstance(payload, Response):
        return payload
    if isinstance(payload, FilePayload):
        media_type = payload.media_type or mimetypes.guess_type(payload.path.name)[0]
        return FileResponse(payload.path, media_type=media_type or "application/octet-stream")
    if isinstance(payload, Path):
        return success_response(FilePayload(path=payload))
    if isinstance(payload, bytes):
        return Response(content=payload, media_type="application/octet-stream")
    if isinstance(payload, BaseModel):
        return JSONResponse(status_code=200, content=payload.model_dump(mode="json"))
    return JSONResponse(status_code=200, content=jsonable_encoder(payload))


def to_response(result: PipelineResult) -> Response:
    if result.error is not None:
        return error_response(result.error)
    return success_response(result.payload)


__all__ = ["FilePayload", "PipelineResult", "error_response", "success_response", "to_response"]
