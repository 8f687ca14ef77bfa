# backend/ecommerce/api/deps.py
"""
Módulo de dependencias para FastAPI.

Este archivo centraliza todas las dependencias que pueden ser inyectadas
en los endpoints de la API. Sigue el patrón de Dependency Injection de FastAPI
para promover código reutilizable y testeable.

Principales ventajas de este enfoque:
- Separación de responsabilidades: las dependencias están separadas de la lógica de negocio
- Facilita el testing: se pueden sustituir con app.dependency_overrides
- Gestión centralizada de recursos como conexiones de BD y autenticación
"""

from typing import AsyncGenerator, Optional

import jwt
from fastapi import Depends, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession
from starlette import status

from ecommerce.db.database import AsyncSessionLocal
from ecommerce.db.models.user_model import User
from ecommerce.core.config import settings
from ecommerce.core.security import decode_access_token
from ecommerce.crud import user_crud


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependencia de FastAPI para obtener una sesión de base de datos asíncrona.
    Se asegura de que la sesión se cierre siempre después de la petición.
    """
    async with AsyncSessionLocal() as session:
        yield session


def _extract_token(request: Request) -> Optional[str]:
    """Token de la cabecera 'Authorization: Bearer ...' o, si no hay, de la cookie."""
    authorization = request.headers.get("Authorization")
    if authorization and authorization.startswith("Bearer "):
        return authorization.split(" ", 1)[1].strip()
    return request.cookies.get(settings.COOKIE_NAME)


async def _resolve_user(db: AsyncSession, token: str) -> Optional[User]:
    try:
        payload = decode_access_token(token)
    except jwt.InvalidTokenError:
        return None
    user_id = payload.get("id")
    if not isinstance(user_id, int):
        return None
    return await user_crud.get_user(db, user_id=user_id)


async def get_current_user(request: Request, db: AsyncSession = Depends(get_db)) -> User:
    """
    Usuario autenticado de la petición.

    Raises:
        HTTPException 401: sin token, token inválido o expirado, o usuario inexistente.
    """
    token = _extract_token(request)
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required. No token provided.",
        )

    user = await _resolve_user(db, token)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token.",
        )
    return user


async def get_optional_user(request: Request, db: AsyncSession = Depends(get_db)) -> Optional[User]:
    """Como get_current_user, pero devuelve None en lugar de fallar."""
    token = _extract_token(request)
    if not token:
        return None
    return await _resolve_user(db, token)


async def require_admin(current_user: User = Depends(get_current_user)) -> User:
    """Exige rol ADMIN (403 en caso contrario)."""
    if current_user.role != "ADMIN":
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You do not have permission to perform this operation.",
        )
    return current_user
