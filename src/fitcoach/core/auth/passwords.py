"""Salted PBKDF2 password hashes.

Encoded as ``pbkdf2_sha256$<iterations>$<salt>$<hex digest>`` so the
iteration count can be raised later without invalidating old hashes.
"""

import hashlib
import hmac
import secrets

ALGORITHM = "pbkdf2_sha256"
DEFAULT_ITERATIONS = 260_000
_SALT_BYTES = 16


def _digest(password: str, salt: str, iterations: int) -> str:
    return hashlib.pbkdf2_hmac(
        "sha256", password.encode(), salt.encode(), iterations
    ).hex()


def hash_password(password: str, iterations: int = DEFAULT_ITERATIONS) -> str:
    salt = secrets.token_hex(_SALT_BYTES)
    return f"{ALGORITHM}${iterations}${salt}${_digest(password, salt, iterations)}"


def verify_password(password: str, encoded: str) -> bool:
    """Constant-time check of *password* against a stored hash."""
    try:
        algorithm, iterations, salt, expected = encoded.split("$")
        rounds = int(iterations)
    except ValueError:
        return False
    if algorithm != ALGORITHM:
        return False
    return hmac.compare_digest(_digest(password, salt, rounds), expected)
