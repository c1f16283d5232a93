"""Authentication schemas."""

from collections.abc import Iterable
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, StrictStr


class AuthPrincipal(BaseModel):
    """Normalized authenticated principal used by pipeline modules and handlers."""

    model_config = ConfigDict(frozen=True)

    user_id: str = Field(min_length=1)
    groups: frozenset[str] = frozenset()
    session_token: str | None = None

    def is_in_group(self, groups: Iterable[str]) -> bool:
        return not self.groups.isdisjoint(groups)


class LoginRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    username: StrictStr = Field(min_length=1)
    password: StrictStr
    who: StrictStr = "api"


class Session(BaseModel):
    token: str
    user: str
    who: str
    created_at: datetime
    expires_at: datetime


class LoginResponse(BaseModel):
    session: Session


class SessionInfo(BaseModel):
    user: str
    groups: list[str]
