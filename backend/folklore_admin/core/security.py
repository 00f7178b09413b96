"""Security utilities: JWT tokens, password hashing and token blacklisting."""

from __future__ import annotations

import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import bcrypt
import jwt
from jwt.exceptions import PyJWTError

from folklore_admin.core.config import settings

logger = logging.getLogger(__name__)

PASSWORD_RESET_PURPOSE = "password_reset"


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plain password against a hash.

    Uses bcrypt's built-in timing-safe comparison.
    """
    try:
        return bcrypt.checkpw(
            plain_password.encode("utf-8"),
            hashed_password.encode("utf-8"),
        )
    except ValueError as e:
        logger.warning(f"Password verification error: {e}")
        return False


def get_password_hash(password: str) -> str:
    """Hash a password using bcrypt."""
    return bcrypt.hashpw(
        password.encode("utf-8"),
        bcrypt.gensalt(),
    ).decode("utf-8")


def create_access_token(data: dict[str, Any], expires_delta: timedelta | None = None) -> str:
    """Create a JWT access token with a unique JTI for blacklisting support."""
    to_encode = data.copy()
    now = datetime.now(timezone.utc)

    if expires_delta:
        expire = now + expires_delta
    else:
        expire = now + timedelta(minutes=settings.access_token_expire_minutes)

    to_encode.update({
        "exp": expire,
        "iat": now,
        "jti": secrets.token_urlsafe(16),
    })
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)


def decode_access_token(token: str) -> dict[str, Any] | None:
    """Decode and validate an access token. Returns None when invalid or revoked."""
    try:
        payload = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.algorithm],
            options={"require_exp": True},
        )
    except PyJWTError as e:
        logger.debug(f"JWT decode error: {e}")
        return None

    # Purpose-scoped tokens (password reset) are not session tokens
    if payload.get("purpose"):
        return None

    jti = payload.get("jti")
    if jti and _is_token_blacklisted(jti):
        logger.debug(f"Token {jti} is blacklisted")
        return None

    return payload


def blacklist_token(token: str) -> bool:
    """Invalidate a token until it would have expired anyway."""
    try:
        payload = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.algorithm],
            options={"require_exp": True, "verify_exp": False},
        )
    except PyJWTError:
        return False

    jti = payload.get("jti")
    if not jti:
        return False

    exp = payload.get("exp", 0)
    ttl = max(int(exp - datetime.now(timezone.utc).timestamp()), 60)
    _memory_blacklist[jti] = datetime.now(timezone.utc) + timedelta(seconds=ttl)
    return True


def _is_token_blacklisted(jti: str) -> bool:
    expiry = _memory_blacklist.get(jti)
    if expiry:
        if datetime.now(timezone.utc) < expiry:
            return True
        del _memory_blacklist[jti]
    return False


# In-process blacklist (cleared on restart)
_memory_blacklist: Dict[str, datetime] = {}


def generate_password_reset_token(user_id: int, password_hash: str) -> str:
    """Generate a time-limited password reset token.

    The token embeds a fingerprint of the current password hash so it stops
    working as soon as the password has been changed once.
    """
    return jwt.encode(
        {
            "sub": str(user_id),
            "purpose": PASSWORD_RESET_PURPOSE,
            "pwd": password_hash[-12:],
            "exp": datetime.now(timezone.utc) + timedelta(minutes=settings.password_reset_expire_minutes),
            "jti": secrets.token_urlsafe(16),
        },
        settings.secret_key,
        algorithm=settings.algorithm,
    )


def verify_password_reset_token(token: str) -> Optional[tuple[int, str]]:
    """Verify a password reset token. Returns (user_id, hash fingerprint) if valid."""
    try:
        payload = jwt.decode(
            token, settings.secret_key,
            algorithms=[settings.algorithm],
            options={"require_exp": True},
        )
        if payload.get("purpose") != PASSWORD_RESET_PURPOSE:
            return None
        return int(payload["sub"]), str(payload.get("pwd", ""))
    except (PyJWTError, KeyError, ValueError):
        return None
