"""Dependency wiring for routes."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from signage.adapters.auth import CredentialVerifier, MockCredentialVerifier, StoreCredentialVerifier
from signage.adapters.rate_limit import RateLimiter
from signage.core.config import Settings, get_settings
from signage.pipeline import PipelineServices
from signage.repositories.memory import InMemoryStore
from signage.services.sessions import SessionService


def get_store(request: Request) -> InMemoryStore:
    return request.app.state.store


def get_rate_limiter(request: Request) -> RateLimiter:
    return request.app.state.rate_limiter


def get_credential_verifier(
    settings: Annotated[Settings, Depends(get_settings)],
    store: Annotated[InMemoryStore, Depends(get_store)],
) -> CredentialVerifier:
    """Resolve provider adapter from configuration."""
    if settings.auth_provider == "mock":
        return MockCredentialVerifier()
    return StoreCredentialVerifier(store)


def get_pipeline_services(
    settings: Annotated[Settings, Depends(get_settings)],
    verifier: Annotated[CredentialVerifier, Depends(get_credential_verifier)],
    rate_limiter: Annotated[RateLimiter, Depends(get_rate_limiter)],
    store: Annotated[InMemoryStore, Depends(get_store)],
) -> PipelineServices:
    return PipelineServices(settings=settings, verifier=verifier, rate_limiter=rate_limiter, store=store)


def get_session_service(
    settings: Annotated[Settings, Depends(get_settings)],
    store: Annotated[InMemoryStore, Depends(get_store)],
) -> SessionService:
    return SessionService(store, ttl_seconds=settings.session_ttl_seconds)
