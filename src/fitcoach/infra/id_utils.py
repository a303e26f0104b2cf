"""Prefixed random identifiers.

Every stored record gets a ``{prefix}_{random}`` ID so its kind is
visible at a glance in logs and URLs:

- ``usr_a8Kx3nQ9mP2r``   user
- ``msg_kJ3pW7mD4bNx``   chat message
- ``prog_L7wBd4Fj9Ks2``  program template
- ``uprog_Q2nV8cTz1Hy``  customized program of a user

Session tokens use the same scheme with a longer suffix.
"""

import secrets
import string

_ALPHABET = string.ascii_letters + string.digits
_DEFAULT_LENGTH = 12  # ~71 bits of entropy

PREFIX_USER = "usr"
PREFIX_MESSAGE = "msg"
PREFIX_PROGRAM = "prog"
PREFIX_USER_PROGRAM = "uprog"
PREFIX_SESSION = "sess"

SESSION_TOKEN_LENGTH = 40


def generate_id(prefix: str, length: int = _DEFAULT_LENGTH) -> str:
    """Return ``"{prefix}_{random}"`` with *length* alphanumeric characters."""
    suffix = "".join(secrets.choice(_ALPHABET) for _ in range(length))
    return f"{prefix}_{suffix}"


def generate_session_token() -> str:
    return generate_id(PREFIX_SESSION, SESSION_TOKEN_LENGTH)
