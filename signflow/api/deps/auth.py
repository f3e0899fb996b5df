"""
Bearer token authentication.

Verifies access tokens issued upstream and loads the calling user. The
'sub' claim carries the user id; the role always comes from the user row.

Dependencies: python-jose, fastapi, signflow.boundary.db
System role: Authentication boundary
"""

import logging
from uuid import UUID

from fastapi import Depends, Header, HTTPException, status
from jose import JWTError, jwt
from sqlalchemy.ext.asyncio import AsyncSession

from signflow.boundary.db import get_async_db
from signflow.boundary.db.CRUD import user_crud
from signflow.configs import get_settings
from signflow.configs.auth import AuthSettings
from signflow.core.exceptions import AuthenticationError
from signflow.core.workflow.policy import Caller

logger = logging.getLogger(__name__)


def extract_bearer_token(authorization: str | None) -> str | None:
    if not authorization:
        return None
    parts = authorization.split(" ", 1)
    if len(parts) == 2 and parts[0].lower() == "bearer":
        return parts[1].strip() or None
    return None


def decode_access_token(token: str, auth_settings: AuthSettings) -> dict:
    """
    Verify signature and expiry of an access token.

    Raises:
        AuthenticationError: If the token is malformed, expired or badly signed
    """
    try:
        return jwt.decode(
            token,
            auth_settings.jwt_secret,
            algorithms=[auth_settings.jwt_algorithm],
            audience=auth_settings.jwt_audience,
        )
    except JWTError as e:
        raise AuthenticationError("Invalid token") from e


async def authenticate_token(
    db: AsyncSession,
    token: str | None,
    auth_settings: AuthSettings,
) -> Caller:
    """
    Resolve a token to the calling user.

    Args:
        db: Async database session
        token: Raw JWT (None when absent)
        auth_settings: Verification settings

    Returns:
        Caller: Authenticated principal with the role stored on the user row

    Raises:
        AuthenticationError: Missing or invalid token, or unknown user
    """
    if not token:
        raise AuthenticationError("Authentication required")

    payload = decode_access_token(token, auth_settings)
    subject = payload.get("sub")
    try:
        user_id = UUID(str(subject))
    except (TypeError, ValueError) as e:
        raise AuthenticationError("Invalid token subject") from e

    user = await user_crud.get_by_id(db, user_id)
    if user is None:
        raise AuthenticationError("Unknown user", {"user_id": str(user_id)})
    return Caller(user_id=user.id, role=user.role, email=user.email)


async def get_current_caller(
    authorization: str | None = Header(default=None),
    db: AsyncSession = Depends(get_async_db),
) -> Caller:
    """
    FastAPI dependency returning the authenticated caller.

    Raises:
        HTTPException(401): Missing or invalid bearer token
    """
    try:
        return await authenticate_token(
            db, extract_bearer_token(authorization), get_settings().auth
        )
    except AuthenticationError as e:
        logger.warning("Authentication failed", extra={"error": e.message})
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=e.message,
            headers={"WWW-Authenticate": "Bearer"},
        ) from e
