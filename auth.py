import uuid
from datetime import datetime, timedelta, timezone
from typing import Literal

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel

from config import (
    JWT_ACCESS_TOKEN_EXPIRE_MINUTES,
    JWT_ALGORITHM,
    JWT_AUDIENCE,
    JWT_ISSUER,
    JWT_SECRET_KEY,
)


class TokenPayload(BaseModel):
    """JWT token payload structure."""

    sub: str  # email address
    typ: Literal["login"]
    uid: int | None = None  # account id
    exp: datetime | None = None


security = HTTPBearer(auto_error=False)


def create_access_token(
    email: str,
    account_id: int | None = None,
    expires_delta: timedelta | None = None,
) -> str:
    """
    Create a login JWT for a verified account.

    Args:
        email: The account email address
        account_id: The account id (optional)
        expires_delta: Custom expiration time (optional)

    Returns:
        Encoded JWT token string
    """
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=JWT_ACCESS_TOKEN_EXPIRE_MINUTES))

    to_encode = {
        "sub": email,
        "typ": "login",
        "uid": account_id,
        "exp": expire,
        "iss": JWT_ISSUER,
        "aud": JWT_AUDIENCE,
        "iat": now,
        "jti": str(uuid.uuid4()),
    }

    return jwt.encode(to_encode, str(JWT_SECRET_KEY), algorithm=JWT_ALGORITHM)


def decode_token(token: str) -> TokenPayload:
    """
    Decode and validate a JWT token.

    Raises:
        HTTPException: If token is invalid or expired
    """
    try:
        payload = jwt.decode(
            token,
            str(JWT_SECRET_KEY),
            algorithms=[JWT_ALGORITHM],
            audience=JWT_AUDIENCE,
            issuer=JWT_ISSUER,
        )
        return TokenPayload(**payload)
    except jwt.InvalidTokenError:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid authentication credentials",
        )


async def get_current_token(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> TokenPayload:
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not authenticated",
        )

    return decode_token(credentials.credentials)


async def require_account_owner(
    email: str,
    token: TokenPayload = Depends(get_current_token),
) -> TokenPayload:
    """
    Dependency that requires the caller to be logged in as the account
    identified by the `email` path parameter.
    """
    if token.sub != email:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You do not have permission to access this account",
        )
    return token
