"""Pipeline modules: one cross-cutting request concern each."""

from __future__ import annotations

import logging
import math
import time
from abc import ABC, abstractmethod
from collections.abc import Iterable
from enum import IntEnum
from typing import Any, ClassVar

from pydantic import BaseModel, ValidationError

from signage.adapters.auth import AuthVerificationError
from signage.adapters.rate_limit import RateLimitBackendError, RateLimiter
from signage.core.logging_safety import safe_log_identifier
from signage.errors import (
    ForbiddenError,
    InvalidRequestError,
    RateLimitExceededError,
    UnauthorizedError,
    UnavailableError,
)
from signage.pipeline.context import PipelineContext

logger = logging.getLogger(__name__)


class ModuleStage(IntEnum):
    """Fixed execution order of module kinds within an endpoint."""

    AUTHENTICATION = 10
    RATE_LIMIT = 20
    VALIDATION = 30
    AUTHORIZATION = 40


class PipelineModule(ABC):
    name: ClassVar[str]
    stage: ClassVar[ModuleStage]

    @abstractmethod
    def process(self, context: PipelineContext) -> None:
        """Store this module's output in ``context.module_data`` or raise ``ApiError``."""


def _log_rejection(context: PipelineContext, module: str, reason: str) -> None:
    logger.warning(
        "pipeline.rejected correlation_id=%s method=%s path=%s module=%s reason=%s",
        safe_log_identifier(context.request.correlation_id, prefix="cid"),
        context.request.method,
        context.request.path,
        module,
        reason,
    )


class AuthModule(PipelineModule):
    """Resolve the caller from a session token in a header and/or cookie."""

    name = "auth"
    stage = ModuleStage.AUTHENTICATION

    def __init__(self, *, cookie_auth: bool = False, token_auth: bool = True) -> None:
        if not (cookie_auth or token_auth):
            raise ValueError("AuthModule needs at least one accepted credential form")
        self.cookie_auth = cookie_auth
        self.token_auth = token_auth

    def _extract_token(self, context: PipelineContext) -> tuple[str | None, str]:
        settings = context.services.settings
        if self.token_auth:
            token = context.request.headers.get(settings.token_header.lower())
            if token:
                return token, "header"
        if self.cookie_auth:
            token = context.request.cookies.get(settings.session_cookie_name)
            if token:
                return token, "cookie"
        return None, "none"

    def process(self, context: PipelineContext) -> None:
        token, via = self._extract_token(context)
        if not token:
            _log_rejection(context, self.name, "missing_credentials")
            raise UnauthorizedError("Invalid or missing session token")

        try:
            principal = context.services.verifier.verify_token(token)
        except AuthVerificationError as exc:
            _log_rejection(context, self.name, "credential_verification_failed")
            raise UnauthorizedError(str(exc) or "Invalid session token") from exc

        logger.info(
            "auth.accepted correlation_id=%s path=%s principal_id=%s via=%s",
            safe_log_identifier(context.request.correlation_id, prefix="cid"),
            context.request.path,
            safe_log_identifier(principal.user_id, prefix="pid"),
            via,
        )
        context.module_data[self.name] = principal


class RateLimitModule(PipelineModule):
    """Budget requests per caller and route.

    Authenticated callers are keyed by user id, anonymous ones by client host.
    Without an explicit ``rate`` the configured default applies.
    """

    name = "rate_limit"
    stage = ModuleStage.RATE_LIMIT

    def __init__(self, rate: str | None = None) -> None:
        self.rate = RateLimiter.parse_rate(rate) if rate is not None else None

    def process(self, context: PipelineContext) -> None:
        settings = context.services.settings
        principal = context.principal
        if principal is not None:
            caller = f"user:{principal.user_id}"
        else:
            caller = f"ip:{context.request.client_host or 'unknown'}"
        rate = self.rate if self.rate is not None else settings.rate_limit

        try:
            decision = context.services.rate_limiter.hit(rate, context.request.path, caller)
        except RateLimitBackendError as exc:
            if settings.rate_limit_fail_open:
                logger.warning(
                    "rate_limit.fail_open correlation_id=%s path=%s",
                    safe_log_identifier(context.request.correlation_id, prefix="cid"),
                    context.request.path,
                )
                context.module_data[self.name] = None
                return
            _log_rejection(context, self.name, "backend_unavailable")
            raise UnavailableError("Rate limiter unavailable") from exc

        if not decision.allowed:
            _log_rejection(context, self.name, "rate_limited")
            raise RateLimitExceededError(retry_after=math.ceil(decision.reset_at - time.time()))

        context.module_data[self.name] = decision


class _SchemaValidatorModule(PipelineModule):
    stage = ModuleStage.VALIDATION

    def __init__(self, schema: type[BaseModel]) -> None:
        self.schema = schema

    @abstractmethod
    def _validate(self, context: PipelineContext) -> BaseModel: ...

    def process(self, context: PipelineContext) -> None:
        try:
            params = self._validate(context)
        except ValidationError as exc:
            fields = _offending_fields(exc, default=self.name)
            _log_rejection(context, self.name, "invalid_params")
            raise InvalidRequestError(fields=fields) from exc
        context.module_data[self.name] = params


def _offending_fields(exc: ValidationError, *, default: str) -> list[str]:
    fields: list[str] = []
    for error in exc.errors():
        loc: tuple[Any, ...] = error.get("loc", ())
        field = ".".join(str(part) for part in loc) or default
        if field not in fields:
            fields.append(field)
    return fields


class QueryValidatorModule(_SchemaValidatorModule):
    name = "query"

    def _validate(self, context: PipelineContext) -> BaseModel:
        return self.schema.model_validate(dict(context.request.query))


class BodyValidatorModule(_SchemaValidatorModule):
    name = "body"

    def _validate(self, context: PipelineContext) -> BaseModel:
        return self.schema.model_validate_json(context.request.body or b"null")


class AuthorizationModule(PipelineModule):
    """Admit only principals in one of the whitelisted groups."""

    name = "authorization"
    stage = ModuleStage.AUTHORIZATION

    def __init__(self, groups: Iterable[str] | None = None, *, message: str = "User not authorized for this operation.") -> None:
        # None admits any authenticated principal.
        self.groups = frozenset(groups) if groups is not None else None
        if self.groups is not None and not self.groups:
            raise ValueError("AuthorizationModule needs at least one permitted group")
        self.message = message

    def process(self, context: PipelineContext) -> None:
        principal = context.principal
        if principal is None:
            raise UnauthorizedError()

        if self.groups is not None and not principal.is_in_group(self.groups):
            _log_rejection(context, self.name, "group_not_permitted")
            raise ForbiddenError(self.message)

        context.module_data[self.name] = sorted(principal.groups & self.groups) if self.groups else sorted(principal.groups)


__all__ = [
    "AuthModule",
    "AuthorizationModule",
    "BodyValidatorModule",
    "ModuleStage",
    "PipelineModule",
    "QueryValidatorModule",
    "RateLimitModule",
]
