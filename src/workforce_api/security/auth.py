"""Authentication and authorization utilities.

Tokens are issued by the external identity provider; this module only
verifies them and turns the claims into a ``Principal``.
"""

from typing import Annotated, Any
from uuid import UUID

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from workforce_api.config import get_settings
from workforce_api.models.domain.principal import Principal


def decode_token(token: str) -> dict[str, Any]:
    """Decode and verify a JWT token.

    Args:
        token: JWT token string

    Returns:
        Token payload

    Raises:
        HTTPException: If token is invalid or expired
    """
    settings = get_settings()
    options: dict[str, Any] = {}
    kwargs: dict[str, Any] = {}
    if settings.jwt_audience:
        kwargs["audience"] = settings.jwt_audience
    else:
        options["verify_aud"] = False
    if settings.jwt_issuer:
        kwargs["issuer"] = settings.jwt_issuer

    try:
        return jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            options=options,
            **kwargs,
        )
    except JWTError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
        ) from e


def principal_from_claims(payload: dict[str, Any]) -> Principal:
    """Build a Principal from verified token claims.

    Raises:
        HTTPException: If the subject claim is missing or not a UUID
    """
    try:
        subject = UUID(str(payload["sub"]))
    except (KeyError, ValueError) as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
        ) from e
    return Principal(
        id=subject,
        is_admin=payload.get("is_admin") is True,
        can_terminate=payload.get("can_terminate") is True,
    )


async def get_current_principal(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(HTTPBearer(auto_error=False))] = None,
) -> Principal:
    """Get the signed-in principal from the bearer token.

    Args:
        credentials: HTTP Bearer credentials

    Returns:
        Principal

    Raises:
        HTTPException: If authentication fails
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
        )
    return principal_from_claims(decode_token(credentials.credentials))


async def require_admin(
    principal: Annotated[Principal, Depends(get_current_principal)],
) -> Principal:
    """Require the current principal to be an admin.

    Raises:
        HTTPException: If the principal is not an admin
    """
    if not principal.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return principal
