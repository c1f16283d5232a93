"""Session-store backed credential verifier."""

from __future__ import annotations

from signage.adapters.auth.base import AuthVerificationError, CredentialVerifier
from signage.repositories.memory import InMemoryStore
from signage.schemas.auth import AuthPrincipal


class StoreCredentialVerifier(CredentialVerifier):
    """Resolves session tokens issued by the login endpoints."""

    def __init__(self, store: InMemoryStore) -> None:
        self._store = store

    def verify_token(self, token: str) -> AuthPrincipal:
        session = self._store.get_session(token)
        if session is None:
            raise AuthVerificationError("Invalid or expired session")

        user = self._store.get_user(session.user_id)
        if user is None:
            self._store.revoke_session(token)
            raise AuthVerificationError("Session user no longer exists")

        return AuthPrincipal(user_id=user.user_id, groups=user.groups, session_token=token)


__all__ = ["StoreCredentialVerifier"]
