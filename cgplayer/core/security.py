"""
Password hashing and access tokens.

Passwords are stored as bcrypt hashes. Access tokens are HS256 JWTs carrying
the user id (``sub``), email and role set, and expire after a configurable
number of days.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Sequence

import bcrypt
import jwt

from cgplayer.core.logging_config import get_logger

logger = get_logger(__name__)

# bcrypt only looks at the first 72 bytes of a password
_BCRYPT_MAX_BYTES = 72


class TokenError(Exception):
    """Raised when an access token is malformed, has a bad signature or has expired."""


def _password_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:_BCRYPT_MAX_BYTES]


def hash_password(password: str, rounds: int = 10) -> str:
    """Hash a plain-text password with bcrypt.

    Args:
        password: Plain-text password
        rounds: bcrypt cost factor

    Returns:
        The bcrypt hash as text
    """
    return bcrypt.hashpw(_password_bytes(password), bcrypt.gensalt(rounds)).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Check a plain-text password against a stored bcrypt hash."""
    try:
        return bcrypt.checkpw(_password_bytes(password), password_hash.encode("utf-8"))
    except ValueError:
        logger.warning("Stored password hash is not a valid bcrypt hash")
        return False


def create_access_token(
    user_id: str,
    email: str,
    roles: Sequence[str],
    *,
    secret: str,
    algorithm: str = "HS256",
    expires_days: int = 7,
) -> str:
    """Issue a signed access token.

    Args:
        user_id: Subject of the token
        email: User email, informational
        roles: Role set at issue time, informational (roles are reloaded on every request)
        secret: Signing secret
        algorithm: JWT algorithm
        expires_days: Lifetime in days

    Returns:
        Encoded JWT
    """
    now = datetime.now(timezone.utc)
    payload = {
        "sub": user_id,
        "email": email,
        "roles": list(roles),
        "iat": now,
        "exp": now + timedelta(days=expires_days),
    }
    return jwt.encode(payload, secret, algorithm=algorithm)


def decode_access_token(token: str, *, secret: str, algorithm: str = "HS256") -> Dict[str, Any]:
    """Verify and decode an access token.

    Raises:
        TokenError: The token is invalid, expired or carries no subject
    """
    try:
        payload = jwt.decode(token, secret, algorithms=[algorithm], options={"require": ["exp", "sub"]})
    except jwt.ExpiredSignatureError as e:
        raise TokenError("Token has expired") from e
    except jwt.PyJWTError as e:
        raise TokenError(f"Invalid token: {e}") from e
    return payload
