"""In-memory repositories used by the API scaffold and tests."""

from __future__ import annotations

import secrets
import threading
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from pathlib import Path

from signage.domain.passwords import check_password, hash_password


@dataclass(slots=True)
class UserRecord:
    user_id: str
    password_hash: str
    groups: frozenset[str]


@dataclass(slots=True)
class SessionRecord:
    token: str
    user_id: str
    who: str
    created_at: datetime
    expires_at: datetime

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at


@dataclass(slots=True)
class AssetRecord:
    name: str
    mime: str
    path: Path
    thumb_path: Path | None = None

    def has_thumb(self) -> bool:
        return self.thumb_path is not None and self.thumb_path.is_file()


@dataclass(slots=True)
class SlideRecord:
    id: str
    name: str
    owner: str
    assets: dict[str, AssetRecord] = field(default_factory=dict)

    def get_uploaded_asset(self, name: str) -> AssetRecord | None:
        return self.assets.get(name)


@dataclass(slots=True)
class InMemoryStore:
    """Simple, deterministic persistence layer for scaffolding and tests."""

    users: dict[str, UserRecord] = field(default_factory=dict)
    sessions: dict[str, SessionRecord] = field(default_factory=dict)
    slides: dict[str, SlideRecord] = field(default_factory=dict)
    slide_read_count: int = 0
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def create_user(self, user_id: str, password: str, groups: Iterable[str] = ()) -> UserRecord:
        user = UserRecord(
            user_id=user_id,
            password_hash=hash_password(password),
            groups=frozenset(groups),
        )
        self.users[user_id] = user
        return user

    def get_user(self, user_id: str) -> UserRecord | None:
        return self.users.get(user_id)

    def authenticate(self, user_id: str, password: str) -> UserRecord | None:
        user = self.users.get(user_id)
        if user is None or not check_password(password, user.password_hash):
            return None
        return user

    def create_session(self, *, user_id: str, who: str, ttl_seconds: int) -> SessionRecord:
        now = datetime.now(UTC)
        session = SessionRecord(
            token=secrets.token_urlsafe(32),
            user_id=user_id,
            who=who,
            created_at=now,
            expires_at=now + timedelta(seconds=ttl_seconds),
        )
        with self._lock:
            self.sessions[session.token] = session
        return session

    def get_session(self, token: str) -> SessionRecord | None:
        """Return a live session, pruning it if it has expired."""
        now = datetime.now(UTC)
        with self._lock:
            session = self.sessions.get(token)
            if session is None:
                return None
            if session.is_expired(now):
                del self.sessions[token]
                return None
            return session

    def revoke_session(self, token: str) -> bool:
        with self._lock:
            return self.sessions.pop(token, None) is not None

    def add_slide(self, slide_id: str, name: str, owner: str) -> SlideRecord:
        slide = SlideRecord(id=slide_id, name=name, owner=owner)
        self.slides[slide_id] = slide
        return slide

    def add_asset(
        self,
        *,
        slide_id: str,
        name: str,
        mime: str,
        path: Path,
        thumb_path: Path | None = None,
    ) -> AssetRecord:
        asset = AssetRecord(name=name, mime=mime, path=path, thumb_path=thumb_path)
        self.slides[slide_id].assets[name] = asset
        return asset

    def get_slide(self, slide_id: str) -> SlideRecord | None:
        self.slide_read_count += 1
        return self.slides.get(slide_id)
