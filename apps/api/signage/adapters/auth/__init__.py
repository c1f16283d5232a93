"""Credential verifier adapters."""

from .base import AuthVerificationError, CredentialVerifier
from .mock_auth import MockCredentialVerifier
from .store_auth import StoreCredentialVerifier

__all__ = [
    "AuthVerificationError",
    "CredentialVerifier",
    "MockCredentialVerifier",
    "StoreCredentialVerifier",
]
