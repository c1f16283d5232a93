"""Password hashing for stored user accounts."""

import hashlib
import secrets
from base64 import b64decode, b64encode

_ITERATIONS = 120_000
_SALT_BYTES = 16


def _derive(salt: bytes, password: str) -> bytes:
    return hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, _ITERATIONS)


def hash_password(password: str) -> str:
    """Generate a salted hash of a password, encoded as ``salt$digest``."""
    salt = secrets.token_bytes(_SALT_BYTES)
    digest = _derive(salt, password)
    return f"{b64encode(salt).decode('ascii')}${b64encode(digest).decode('ascii')}"


def check_password(password: str, encoded: str) -> bool:
    """Check a password against a hash from :func:`hash_password`."""
    try:
        salt_text, digest_text = encoded.split("$", 1)
        salt = b64decode(salt_text)
        expected = b64decode(digest_text)
    except ValueError:
        return False
    return secrets.compare_digest(_derive(salt, password), expected)
