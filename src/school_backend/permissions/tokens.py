"""
Signed access and refresh tokens.

Both token types carry ``user_id``, ``type`` and ``exp`` claims and are
signed with different secrets, so a refresh token can never pass as an
access token and vice versa.
"""

import hashlib
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional
from uuid import uuid4

from jose import jwt, JWTError

from school_backend.settings import settings

logger = logging.getLogger(__name__)

ACCESS_TOKEN = "access"
REFRESH_TOKEN = "refresh"


class TokenError(Exception):
    """Raised when a token cannot be verified."""
    pass


def _secret_for(token_type: str) -> str:
    if token_type == ACCESS_TOKEN:
        return settings.JWT_SECRET
    if token_type == REFRESH_TOKEN:
        return settings.JWT_REFRESH_SECRET
    raise ValueError(f"Unknown token type: {token_type}")


def _lifetime_for(token_type: str) -> timedelta:
    if token_type == ACCESS_TOKEN:
        return timedelta(minutes=settings.JWT_ACCESS_TOKEN_EXPIRE)
    return timedelta(minutes=settings.JWT_REFRESH_TOKEN_EXPIRE)


def create_token(user_id: str, token_type: str, expires_delta: Optional[timedelta] = None) -> str:
    now = datetime.now(timezone.utc)
    payload: Dict[str, Any] = {
        "user_id": user_id,
        "type": token_type,
        "iat": int(now.timestamp()),
        "jti": uuid4().hex,
        "exp": int((now + (expires_delta or _lifetime_for(token_type))).timestamp()),
    }
    return jwt.encode(payload, _secret_for(token_type), algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str, token_type: str) -> str:
    """
    Verify signature, expiry and type of a token.

    Args:
        token: Encoded JWT
        token_type: Expected ``type`` claim, "access" or "refresh"

    Returns:
        The ``user_id`` claim

    Raises:
        TokenError: On any verification failure
    """
    try:
        claims = jwt.decode(token, _secret_for(token_type), algorithms=[settings.JWT_ALGORITHM])
    except JWTError as e:
        logger.debug(f"Token verification failed: {e}")
        raise TokenError("invalid token") from e

    if claims.get("type") != token_type:
        raise TokenError("invalid token type")

    user_id = claims.get("user_id")
    if not user_id or not isinstance(user_id, str):
        raise TokenError("invalid token payload")

    return user_id


def hash_token(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def access_token_lifetime_seconds() -> int:
    return int(_lifetime_for(ACCESS_TOKEN).total_seconds())
