"""Declarative request pipeline shared by API endpoints."""

from .context import PipelineContext, PipelineServices, RequestDescriptor
from .endpoint import Endpoint
from .modules import (
    AuthModule,
    AuthorizationModule,
    BodyValidatorModule,
    ModuleStage,
    PipelineModule,
    QueryValidatorModule,
    RateLimitModule,
)
from .responses import FilePayload, PipelineResult

__all__ = [
    "AuthModule",
    "AuthorizationModule",
    "BodyValidatorModule",
    "Endpoint",
    "FilePayload",
    "ModuleStage",
    "PipelineContext",
    "PipelineModule",
    "PipelineResult",
    "PipelineServices",
    "QueryValidatorModule",
    "RateLimitModule",
    "RequestDescriptor",
]
