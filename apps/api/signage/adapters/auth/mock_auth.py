"""Mock credential verifier for local development and tests."""

from signage.adapters.auth.base import AuthVerificationError, CredentialVerifier
from signage.schemas.auth import AuthPrincipal


class MockCredentialVerifier(CredentialVerifier):
    """Accepts deterministic test tokens only.

    Expected token format:
    - ``test:<user_id>``
    - ``test:<user_id>:<group>[,<group>...]``
    """

    def verify_token(self, token: str) -> AuthPrincipal:
        parts = token.split(":")
        if len(parts) not in (2, 3) or parts[0] != "test":
            raise AuthVerificationError("Invalid session token")

        user_id = parts[1].strip()
        groups = frozenset(g.strip() for g in parts[2].split(",") if g.strip()) if len(parts) == 3 else frozenset()

        if not user_id:
            raise AuthVerificationError("Session token missing user identity")

        return AuthPrincipal(user_id=user_id, groups=groups, session_token=token)


__all__ = ["MockCredentialVerifier"]
