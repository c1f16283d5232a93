"""Session service layer for password logins."""

import logging

from signage.core.logging_safety import safe_log_identifier
from signage.errors import UnauthorizedError
from signage.repositories.memory import InMemoryStore, SessionRecord
from signage.schemas.auth import Session

logger = logging.getLogger(__name__)


class SessionService:
    def __init__(self, store: InMemoryStore, *, ttl_seconds: int) -> None:
        self._store = store
        self._ttl_seconds = ttl_seconds

    def login(self, *, username: str, password: str, who: str) -> Session:
        user = self._store.authenticate(username, password)
        if user is None:
            logger.warning(
                "session.login_rejected principal_id=%s",
                safe_log_identifier(username, prefix="pid"),
            )
            raise UnauthorizedError("Invalid username or password")

        record = self._store.create_session(user_id=user.user_id, who=who, ttl_seconds=self._ttl_seconds)
        logger.info(
            "session.created principal_id=%s session=%s who=%s",
            safe_log_identifier(user.user_id, prefix="pid"),
            safe_log_identifier(record.token, prefix="sid"),
            who,
        )
        return self._to_session(record)

    def logout(self, token: str) -> bool:
        revoked = self._store.revoke_session(token)
        if revoked:
            logger.info("session.revoked session=%s", safe_log_identifier(token, prefix="sid"))
        return revoked

    @staticmethod
    def _to_session(record: SessionRecord) -> Session:
        return Session(
            token=record.token,
            user=record.user_id,
            who=record.who,
            created_at=record.created_at,
            expires_at=record.expires_at,
        )
