"""
Security Utilities.

Password hashing and session token issuance/verification.
Sessions are stateless JWTs; logout happens client side.
"""

from datetime import timedelta
from typing import Any

import bcrypt
from jose import JWTError, jwt

from studynotes.core.config import get_app_config, get_settings
from studynotes.core.exceptions import AuthenticationError
from studynotes.core.logging import get_logger
from studynotes.core.utils import utc_now

logger = get_logger(__name__)


def hash_password(password: str) -> str:
    """Hash a password using bcrypt."""
    password_bytes = password.encode("utf-8")
    salt = bcrypt.gensalt()
    return bcrypt.hashpw(password_bytes, salt).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash in constant time."""
    try:
        return bcrypt.checkpw(
            plain_password.encode("utf-8"),
            hashed_password.encode("utf-8"),
        )
    except ValueError:
        # Malformed stored hash
        return False


def create_access_token(data: dict[str, Any], expires_delta: timedelta | None = None) -> str:
    """
    Create a JWT access token.

    Args:
        data: Payload data to encode, must include "sub"
        expires_delta: Optional custom expiration time

    Returns:
        Encoded JWT token
    """
    settings = get_settings()
    jwt_config = get_app_config().security.jwt
    to_encode = data.copy()

    if expires_delta:
        expire = utc_now() + expires_delta
    else:
        expire = utc_now() + timedelta(minutes=jwt_config.access_token_expire_minutes)

    to_encode.update({"exp": expire, "type": "access", "aud": jwt_config.audience})
    encoded_jwt = jwt.encode(to_encode, settings.jwt_secret, algorithm=jwt_config.algorithm)
    return encoded_jwt


def decode_token(token: str) -> dict[str, Any]:
    """
    Decode and validate a JWT token.

    Args:
        token: JWT token string

    Returns:
        Decoded token payload

    Raises:
        AuthenticationError: If token is invalid or expired
    """
    settings = get_settings()
    jwt_config = get_app_config().security.jwt
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[jwt_config.algorithm],
            audience=jwt_config.audience,
        )
    except JWTError as e:
        logger.warning("Token decode failed", extra={"error": str(e)})
        raise AuthenticationError("Invalid or expired token") from e

    if payload.get("type") != "access" or not payload.get("sub"):
        logger.warning("Token rejected", extra={"token_type": payload.get("type")})
        raise AuthenticationError("Invalid or expired token")
    return payload


def issue_session(user_id: str) -> str:
    """Issue a session token for a user."""
    return create_access_token({"sub": user_id})


def resolve_session(token: str) -> str:
    """
    Resolve a session token to the user id it was issued for.

    Raises:
        AuthenticationError: If the token is invalid or expired
    """
    return decode_token(token)["sub"]
