"""Per-request data carried through the endpoint pipeline."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel

from signage.adapters.auth import CredentialVerifier
from signage.adapters.rate_limit import RateLimiter
from signage.core.config import Settings
from signage.repositories.memory import InMemoryStore
from signage.schemas.auth import AuthPrincipal


@dataclass(frozen=True, slots=True)
class RequestDescriptor:
    """Transport-neutral view of one incoming request.

    ``query`` maps a parameter to its value, or to a list of values when the key
    is repeated. ``headers`` keys are lower-case.
    """

    method: str
    path: str
    query: Mapping[str, Any] = field(default_factory=dict)
    body: bytes = b""
    cookies: Mapping[str, str] = field(default_factory=dict)
    headers: Mapping[str, str] = field(default_factory=dict)
    client_host: str | None = None
    correlation_id: str = "req-unknown"


@dataclass(frozen=True, slots=True)
class PipelineServices:
    """Collaborators shared by every request of one application instance."""

    settings: Settings
    verifier: CredentialVerifier
    rate_limiter: RateLimiter
    store: InMemoryStore


@dataclass(slots=True)
class PipelineContext:
    request: RequestDescriptor
    services: PipelineServices
    module_data: dict[str, Any] = field(default_factory=dict)

    @property
    def principal(self) -> AuthPrincipal | None:
        return self.module_data.get("auth")

    @property
    def params(self) -> BaseModel | None:
        """Validated parameters from whichever validator module ran."""
        query = self.module_data.get("query")
        return query if query is not None else self.module_data.get("body")


__all__ = ["PipelineContext", "PipelineServices", "RequestDescriptor"]
