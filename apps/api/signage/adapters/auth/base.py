"""Authentication provider interfaces."""

from abc import ABC, abstractmethod

from signage.schemas.auth import AuthPrincipal


class AuthVerificationError(Exception):
    """Raised when a credential cannot be verified or normalized."""


class CredentialVerifier(ABC):
    """Provider-neutral session credential verification interface.

    The same token may arrive in a cookie or a request header; the verifier does
    not care which transport carried it.
    """

    @abstractmethod
    def verify_token(self, token: str) -> AuthPrincipal:
        """Verify a session token and return the normalized principal."""


__all__ = ["AuthVerificationError", "CredentialVerifier"]
