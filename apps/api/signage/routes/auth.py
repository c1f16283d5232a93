"""Session API routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, Response

from signage.pipeline import (
    AuthModule,
    AuthorizationModule,
    BodyValidatorModule,
    Endpoint,
    PipelineContext,
    PipelineServices,
    RateLimitModule,
)
from signage.routes.dependencies import get_pipeline_services
from signage.schemas.auth import AuthPrincipal, LoginRequest, LoginResponse, SessionInfo
from signage.schemas.error import ErrorResponse, RateLimitedErrorResponse, ValidationErrorResponse
from signage.services.sessions import SessionService

router = APIRouter(prefix="/auth", tags=["Auth"])


def _session_service(context: PipelineContext) -> SessionService:
    return SessionService(context.services.store, ttl_seconds=context.services.settings.session_ttl_seconds)


def _login(context: PipelineContext) -> LoginResponse:
    payload: LoginRequest = context.module_data["body"]
    session = _session_service(context).login(username=payload.username, password=payload.password, who=payload.who)
    return LoginResponse(session=session)


def _logout(context: PipelineContext) -> Response:
    principal: AuthPrincipal = context.module_data["auth"]
    if principal.session_token:
        _session_service(context).logout(principal.session_token)

    response = JSONResponse(status_code=200, content={})
    response.delete_cookie(context.services.settings.session_cookie_name, path="/")
    return response


def _session(context: PipelineContext) -> SessionInfo:
    principal: AuthPrincipal = context.module_data["auth"]
    return SessionInfo(user=principal.user_id, groups=sorted(principal.groups))


login_endpoint = Endpoint("POST", [RateLimitModule(), BodyValidatorModule(LoginRequest)], _login)

logout_endpoint = Endpoint("POST", [AuthModule(cookie_auth=True), RateLimitModule()], _logout)

session_endpoint = Endpoint(
    "GET",
    [AuthModule(cookie_auth=True), RateLimitModule(), AuthorizationModule()],
    _session,
)


@router.post(
    "/auth_login",
    response_model=LoginResponse,
    responses={400: {"model": ValidationErrorResponse}, 401: {"model": ErrorResponse}, 429: {"model": RateLimitedErrorResponse}},
)
async def auth_login(
    request: Request,
    services: Annotated[PipelineServices, Depends(get_pipeline_services)],
) -> Response:
    return await login_endpoint.dispatch(request, services)


@router.post("/auth_logout", responses={401: {"model": ErrorResponse}, 429: {"model": RateLimitedErrorResponse}})
async def auth_logout(
    request: Request,
    services: Annotated[PipelineServices, Depends(get_pipeline_services)],
) -> Response:
    return await logout_endpoint.dispatch(request, services)


@router.get(
    "/auth_session",
    response_model=SessionInfo,
    responses={401: {"model": ErrorResponse}, 429: {"model": RateLimitedErrorResponse}},
)
async def auth_session(
    request: Request,
    services: Annotated[PipelineServices, Depends(get_pipeline_services)],
) -> Response:
    return await session_endpoint.dispatch(request, services)
