"""Credential verifier adapter and password hashing tests."""

from __future__ import annotations

import unittest

from signage.adapters.auth import (
    AuthVerificationError,
    MockCredentialVerifier,
    StoreCredentialVerifier,
)
from signage.core.config import Settings
from signage.core.logging_safety import safe_log_identifier
from signage.domain.passwords import check_password, hash_password
from signage.repositories.memory import InMemoryStore
from signage.routes.dependencies import get_credential_verifier


class MockVerifierUnitTests(unittest.TestCase):
    def test_mock_verifier_normalizes_principal(self) -> None:
        principal = MockCredentialVerifier().verify_token("test:user-999:editor,display")

        self.assertEqual(principal.user_id, "user-999")
        self.assertEqual(principal.groups, frozenset({"editor", "display"}))
        self.assertTrue(principal.is_in_group(["admin", "display"]))
        self.assertFalse(principal.is_in_group(["admin"]))

    def test_mock_verifier_without_groups_yields_empty_membership(self) -> None:
        principal = MockCredentialVerifier().verify_token("test:user-1")

        self.assertEqual(principal.groups, frozenset())

    def test_mock_verifier_rejects_invalid_tokens(self) -> None:
        verifier = MockCredentialVerifier()
        for token in ("invalid", "test:", "other:user:admin", "test:a:b:c"):
            with self.subTest(token=token):
                with self.assertRaises(AuthVerificationError):
                    verifier.verify_token(token)


class StoreVerifierUnitTests(unittest.TestCase):
    def setUp(self) -> None:
        self.store = InMemoryStore()
        self.store.create_user("alice", "pw", groups=["admin"])
        self.verifier = StoreCredentialVerifier(self.store)

    def test_live_session_resolves_user_groups(self) -> None:
        session = self.store.create_session(user_id="alice", who="api", ttl_seconds=60)

        principal = self.verifier.verify_token(session.token)

        self.assertEqual(principal.user_id, "alice")
        self.assertEqual(principal.groups, frozenset({"admin"}))
        self.assertEqual(principal.session_token, session.token)

    def test_unknown_token_is_rejected(self) -> None:
        with self.assertRaises(AuthVerificationError):
            self.verifier.verify_token("no-such-token")

    def test_session_of_deleted_user_is_rejected_and_revoked(self) -> None:
        session = self.store.create_session(user_id="alice", who="api", ttl_seconds=60)
        del self.store.users["alice"]

        with self.assertRaises(AuthVerificationError):
            self.verifier.verify_token(session.token)
        self.assertNotIn(session.token, self.store.sessions)

    def test_revoked_session_is_rejected(self) -> None:
        session = self.store.create_session(user_id="alice", who="api", ttl_seconds=60)
        self.store.revoke_session(session.token)

        with self.assertRaises(AuthVerificationError):
            self.verifier.verify_token(session.token)


class VerifierSelectionTests(unittest.TestCase):
    def test_dependency_selects_verifier_from_settings(self) -> None:
        store = InMemoryStore()

        self.assertIsInstance(get_credential_verifier(Settings(auth_provider="mock"), store), MockCredentialVerifier)
        self.assertIsInstance(get_credential_verifier(Settings(auth_provider="store"), store), StoreCredentialVerifier)


class PasswordAndLoggingHelperTests(unittest.TestCase):
    def test_password_hash_round_trip(self) -> None:
        encoded = hash_password("s3cret")

        self.assertTrue(check_password("s3cret", encoded))
        self.assertFalse(check_password("S3cret", encoded))
        self.assertNotEqual(encoded, hash_password("s3cret"))

    def test_malformed_hash_never_matches(self) -> None:
        self.assertFalse(check_password("pw", "not-a-hash"))
        self.assertFalse(check_password("pw", "!!!$???"))

    def test_safe_log_identifier_is_deterministic_and_opaque(self) -> None:
        first = safe_log_identifier("alice", prefix="pid")

        self.assertEqual(first, safe_log_identifier("alice", prefix="pid"))
        self.assertTrue(first.startswith("pid-"))
        self.assertNotIn("alice", first)
        self.assertEqual(safe_log_identifier(None, prefix="pid"), "pid-missing")


if __name__ == "__main__":
    unittest.main()
