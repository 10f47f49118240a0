"""JWT token utilities."""

from datetime import datetime, timedelta

import jwt
from pydantic import BaseModel

from blog.config import AuthSettings
from blog.domain.value import Role
from blog.util.error import UtilError


class TokenPayload(BaseModel):
    """JWT token payload."""

    user_id: str
    username: str
    role: Role = Role.USER
    exp: datetime


class JWTError(UtilError):
    """JWT-related error."""

    pass


def create_token(
    user_id: str, username: str, role: Role, settings: AuthSettings
) -> str:
    """Create a JWT token for the user.

    Args:
        user_id: User ID
        username: Username
        role: User role
        settings: Authentication settings

    Returns:
        Encoded JWT token
    """
    expiry = datetime.now() + timedelta(days=settings.jwt_expiry_days)

    payload = {
        "user_id": user_id,
        "username": username,
        "role": role.value,
        "exp": expiry,
    }

    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def verify_token(token: str, settings: AuthSettings) -> TokenPayload:
    """Verify and decode a JWT token.

    Args:
        token: JWT token to verify
        settings: Authentication settings

    Returns:
        Token payload if valid

    Raises:
        JWTError: If token is invalid or expired
    """
    try:
        payload = jwt.decode(
            token, settings.jwt_secret, algorithms=[settings.jwt_algorithm]
        )
        return TokenPayload(**payload)
    except jwt.ExpiredSignatureError:
        raise JWTError("Token has expired")
    except jwt.InvalidTokenError:
        raise JWTError("Invalid token")
