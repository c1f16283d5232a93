"""Endpoint pipeline runner."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from typing import Any
from uuid import uuid4

from fastapi import Request
from fastapi.responses import Response
from starlette.concurrency import run_in_threadpool

from signage.core.logging_safety import safe_log_identifier
from signage.errors import ApiError, InternalError
from signage.pipeline.context import PipelineContext, PipelineServices, RequestDescriptor
from signage.pipeline.modules import ModuleStage, PipelineModule
from signage.pipeline.responses import PipelineResult, to_response

logger = logging.getLogger(__name__)

Handler = Callable[[PipelineContext], Any]


def _check_module_order(modules: Sequence[PipelineModule]) -> None:
    stages = [module.stage for module in modules]
    if stages != sorted(stages):
        raise ValueError(
            "Pipeline modules must run in order: authentication, rate limiting, validation, authorization"
        )

    names = [module.name for module in modules]
    if len(set(names)) != len(names):
        raise ValueError(f"Duplicate pipeline modules: {names}")

    if ModuleStage.AUTHORIZATION in stages and ModuleStage.AUTHENTICATION not in stages:
        raise ValueError("Authorization requires an authentication module")


class Endpoint:
    """One HTTP method handler preceded by an ordered module chain.

    Every failure inside the chain or the handler is converted into a
    ``PipelineResult`` here; nothing propagates past ``run``.
    """

    def __init__(self, method: str, modules: Sequence[PipelineModule], handler: Handler) -> None:
        _check_module_order(modules)
        self.method = method.upper()
        self.modules = tuple(modules)
        self.handler = handler

    def run(self, request: RequestDescriptor, services: PipelineServices) -> PipelineResult:
        if request.method != self.method:
            return PipelineResult.failure(
                ApiError(status_code=405, code="METHOD_NOT_ALLOWED", message=f"Expected {self.method} request")
            )

        context = PipelineContext(request=request, services=services)
        try:
            for module in self.modules:
                module.process(context)
            payload = self.handler(context)
        except ApiError as exc:
            logger.info(
                "pipeline.failed correlation_id=%s method=%s path=%s status=%s code=%s",
                safe_log_identifier(request.correlation_id, prefix="cid"),
                request.method,
                request.path,
                exc.status_code,
                exc.payload.code,
            )
            return PipelineResult.failure(exc)
        except Exception:
            logger.exception(
                "pipeline.internal_error correlation_id=%s method=%s path=%s",
                safe_log_identifier(request.correlation_id, prefix="cid"),
                request.method,
                request.path,
            )
            return PipelineResult.failure(InternalError())

        return PipelineResult.success(payload)

    async def dispatch(self, request: Request, services: PipelineServices) -> Response:
        descriptor = await build_request_descriptor(request)
        result = await run_in_threadpool(self.run, descriptor, services)
        return to_response(result)


def request_correlation_id(request: Request) -> str:
    existing = getattr(request.state, "correlation_id", None)
    if isinstance(existing, str) and existing:
        return existing

    correlation_id = request.headers.get("X-Correlation-Id") or f"req-{uuid4()}"
    request.state.correlation_id = correlation_id
    return correlation_id


async def build_request_descriptor(request: Request) -> RequestDescriptor:
    query: dict[str, Any] = {}
    for key, value in request.query_params.multi_items():
        if key not in query:
            query[key] = value
        elif isinstance(query[key], list):
            query[key].append(value)
        else:
            query[key] = [query[key], value]

    body = b""
    if request.method not in ("GET", "HEAD"):
        body = await request.body()

    return RequestDescriptor(
        method=request.method,
        path=request.url.path,
        query=query,
        body=body,
        cookies=dict(request.cookies),
        headers={key.lower(): value for key, value in request.headers.items()},
        client_host=request.client.host if request.client else None,
        correlation_id=request_correlation_id(request),
    )


__all__ = ["Endpoint", "Handler", "build_request_descriptor", "request_correlation_id"]
