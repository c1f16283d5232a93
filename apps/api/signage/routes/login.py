"""Login form route.

Unlike the API endpoints this route never answers with a JSON error body: every
outcome is a redirect, failures carrying ``?failed=1``.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Form, Request, status
from fastapi.responses import RedirectResponse

from signage.adapters.auth import AuthVerificationError, CredentialVerifier
from signage.core.config import Settings, get_settings
from signage.errors import UnauthorizedError
from signage.routes.dependencies import get_credential_verifier, get_session_service
from signage.services.sessions import SessionService

router = APIRouter(prefix="/login", tags=["Login"])


def _is_authorized(request: Request, settings: Settings, verifier: CredentialVerifier) -> bool:
    token = request.cookies.get(settings.session_cookie_name)
    if not token:
        return False
    try:
        verifier.verify_token(token)
    except AuthVerificationError:
        return False
    return True


@router.post("/login_form", response_class=RedirectResponse, status_code=status.HTTP_303_SEE_OTHER)
def login_form(
    request: Request,
    settings: Annotated[Settings, Depends(get_settings)],
    verifier: Annotated[CredentialVerifier, Depends(get_credential_verifier)],
    sessions: Annotated[SessionService, Depends(get_session_service)],
    user: Annotated[str, Form()] = "",
    password: Annotated[str, Form(alias="pass")] = "",
) -> RedirectResponse:
    if _is_authorized(request, settings, verifier):
        return RedirectResponse(settings.login_landing, status_code=status.HTTP_303_SEE_OTHER)

    try:
        session = sessions.login(username=user, password=password, who="login_form")
    except UnauthorizedError:
        return RedirectResponse(f"{settings.login_page}?failed=1", status_code=status.HTTP_303_SEE_OTHER)

    response = RedirectResponse(settings.login_landing, status_code=status.HTTP_303_SEE_OTHER)
    response.set_cookie(
        settings.session_cookie_name,
        session.token,
        max_age=settings.session_ttl_seconds,
        path="/",
        httponly=True,
        samesite="strict",
    )
    return response
