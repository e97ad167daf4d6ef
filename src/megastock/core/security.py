# src/megastock/core/security.py
from fastapi import Depends, HTTPException, Security, status
from fastapi.security import APIKeyHeader

from megastock.core.config import Settings, get_settings
from megastock.domain.models import UserRole

_API_KEY_HEADER = APIKeyHeader(name="X-API-Key", auto_error=True)


async def get_user_role(
    api_key: str = Security(_API_KEY_HEADER),
    settings: Settings = Depends(get_settings),
) -> UserRole:
    """
    FastAPI Dependency: validates the API key and returns the caller's role.
    Raises HTTP 401 on an unknown key.
    """
    role = settings.api_keys.get(api_key)
    if role is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or missing API key.",
            headers={"WWW-Authenticate": "ApiKey"},
        )
    return role


async def require_admin(role: UserRole = Depends(get_user_role)) -> UserRole:
    if role != UserRole.ADMIN:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only administrators can modify products.",
        )
    return role
