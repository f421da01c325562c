"""FastAPI dependency injection for database sessions and bearer-token access control."""

from collections.abc import AsyncGenerator, Callable
from dataclasses import dataclass
from typing import Annotated, Any

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from constituency_api.core.config import Settings, get_settings
from constituency_api.core.database import get_session_factory
from constituency_api.core.security import decode_token

bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class Principal:
    """Caller identity extracted from a verified bearer token."""

    subject: str
    role: str


async def get_async_session() -> AsyncGenerator[AsyncSession]:
    """Yield an async database session with per-request lifecycle.

    The session's connection goes back to the pool when the request
    finishes, whether the handler committed, rolled back, or raised.
    """
    factory = get_session_factory()
    async with factory() as session:
        yield session


async def get_current_principal(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> Principal:
    """Verify the bearer token and return the caller's identity.

    Raises:
        HTTPException: 401 when the token is missing, invalid, or expired.
    """
    if credentials is None or not credentials.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="No token provided",
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        payload = decode_token(credentials.credentials, settings.jwt_secret_key, settings.jwt_algorithm)
    except jwt.InvalidTokenError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
            headers={"WWW-Authenticate": "Bearer"},
        ) from exc

    subject = payload.get("sub") or payload.get("id")
    if subject is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return Principal(subject=str(subject), role=str(payload.get("role", "")))


def require_role(*roles: str) -> Callable[..., Any]:
    """Factory that creates a dependency requiring specific roles.

    Args:
        *roles: Allowed role names (e.g., "admin").

    Returns:
        A FastAPI dependency function that validates the principal's role.
    """

    async def role_checker(
        principal: Annotated[Principal, Depends(get_current_principal)],
    ) -> Principal:
        if principal.role not in roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Role '{principal.role}' does not have access to this resource",
            )
        return principal

    return role_checker
