"""Slide asset routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from fastapi.responses import FileResponse, Response

from signage.pipeline import (
    AuthModule,
    AuthorizationModule,
    Endpoint,
    FilePayload,
    PipelineContext,
    PipelineServices,
    QueryValidatorModule,
    RateLimitModule,
)
from signage.routes.dependencies import get_pipeline_services
from signage.schemas.error import (
    ErrorResponse,
    NotFoundErrorResponse,
    RateLimitedErrorResponse,
    ValidationErrorResponse,
)
from signage.schemas.slide import SlideAssetQuery
from signage.services.slides import SlideAssetService

router = APIRouter(prefix="/slide/asset", tags=["Slide assets"])

ASSET_VIEWER_GROUPS = ("admin", "editor", "display")

_ASSET_RESPONSES = {
    400: {"model": ValidationErrorResponse},
    401: {"model": ErrorResponse},
    404: {"model": NotFoundErrorResponse},
    429: {"model": RateLimitedErrorResponse},
}


def _get_asset(context: PipelineContext) -> FilePayload:
    params: SlideAssetQuery = context.module_data["query"]
    asset = SlideAssetService(context.services.store).get_asset(params.id, params.name)
    return FilePayload(path=asset.path, media_type=asset.mime)


def _get_asset_thumb(context: PipelineContext) -> FilePayload:
    params: SlideAssetQuery = context.module_data["query"]
    thumb_path = SlideAssetService(context.services.store).get_asset_thumb(params.id, params.name)
    return FilePayload(path=thumb_path)


get_asset_endpoint = Endpoint(
    "GET",
    [
        AuthModule(cookie_auth=True),
        RateLimitModule(),
        QueryValidatorModule(SlideAssetQuery),
        AuthorizationModule(ASSET_VIEWER_GROUPS, message="User not authorized to view assets."),
    ],
    _get_asset,
)

get_asset_thumb_endpoint = Endpoint(
    "GET",
    [
        AuthModule(cookie_auth=True),
        RateLimitModule(),
        QueryValidatorModule(SlideAssetQuery),
        AuthorizationModule(ASSET_VIEWER_GROUPS, message="User not authorized to view thumbnails."),
    ],
    _get_asset_thumb,
)


@router.get("/slide_get_asset", response_class=FileResponse, responses=_ASSET_RESPONSES)
async def slide_get_asset(
    request: Request,
    services: Annotated[PipelineServices, Depends(get_pipeline_services)],
) -> Response:
    return await get_asset_endpoint.dispatch(request, services)


@router.get("/slide_get_asset_thumb", response_class=FileResponse, responses=_ASSET_RESPONSES)
async def slide_get_asset_thumb(
    request: Request,
    services: Annotated[PipelineServices, Depends(get_pipeline_services)],
) -> Response:
    return await get_asset_thumb_endpoint.dispatch(request, services)
