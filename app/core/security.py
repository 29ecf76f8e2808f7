"""
Security utilities for authentication

JWT issuance/verification and the shared app password check.
"""

import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt

from app.core.config import settings


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """
    Create JWT access token

    Args:
        data: Payload data to encode in token
        expires_delta: Optional custom expiration time

    Returns:
        Encoded JWT token string
    """
    to_encode = data.copy()
    now = datetime.now(timezone.utc)

    if expires_delta:
        expire = now + expires_delta
    else:
        expire = now + timedelta(minutes=settings.access_token_expire_minutes)

    to_encode.update({"exp": expire, "iat": now})

    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> Optional[dict]:
    """
    Decode and validate JWT token

    Returns:
        Decoded payload if valid, None otherwise
    """
    try:
        return jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None


def verify_token(token: str) -> Optional[str]:
    """
    Verify token and extract user ID

    Returns:
        User ID (sub claim) if valid, None otherwise
    """
    payload = decode_token(token)
    if payload is None:
        return None

    user_id: Optional[str] = payload.get("sub")
    return user_id


def email_in_allowed_domain(email: Optional[str], domain: Optional[str] = None) -> bool:
    """Check that an email address belongs to the organization's domain"""
    domain = (domain or settings.allowed_email_domain).lower().lstrip("@")
    if not email:
        return False
    return email.lower().endswith(f"@{domain}")


def check_app_password(password: str) -> bool:
    """Constant-time comparison against the configured shared password"""
    if not settings.app_password:
        return False
    return secrets.compare_digest(password.encode("utf-8"), settings.app_password.encode("utf-8"))
