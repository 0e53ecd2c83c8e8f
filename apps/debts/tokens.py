"""
Public debt tokens.

A token is the only credential on the public debt page, so it carries
32 bytes of randomness (43 URL-safe characters).
"""

import secrets
from typing import Callable

TOKEN_BYTES = 32
MAX_TOKEN_ATTEMPTS = 5


class TokenGenerationError(Exception):
    """Raised when no unused token could be produced."""
    pass


def generate_token() -> str:
    """Return a fresh URL-safe random token."""
    return secrets.token_urlsafe(TOKEN_BYTES)


def generate_unique_token(
    is_taken: Callable[[str], bool],
    max_attempts: int = MAX_TOKEN_ATTEMPTS
) -> str:
    """
    Generate a token that `is_taken` reports as unused.

    The check is best effort; the unique constraint on the token column
    is what actually rejects a duplicate.

    Raises:
        TokenGenerationError: If every attempt collided
    """
    for _ in range(max_attempts):
        token = generate_token()
        if not is_taken(token):
            return token

    raise TokenGenerationError(
        f"Failed to generate unique token after {max_attempts} attempts"
    )


def tokens_match(supplied: str, expected: str) -> bool:
    """Constant-time token comparison."""
    if not supplied or not expected:
        return False
    return secrets.compare_digest(supplied.encode(), expected.encode())
