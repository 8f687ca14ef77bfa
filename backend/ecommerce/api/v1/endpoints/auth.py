"""
Endpoints de autenticación: registro, login, logout y perfil.

El token JWT se devuelve en el cuerpo y además se guarda en una cookie
httponly, de modo que el cliente puede usar cualquiera de los dos.
"""

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from ecommerce.api import deps
from ecommerce.core.security import clear_token_cookie, set_token_cookie
from ecommerce.db.models.user_model import User
from ecommerce.schemas import user_schema
from ecommerce.services.auth_service import auth_service

router = APIRouter()


@router.post("/register", response_model=user_schema.AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(
    *,
    db: AsyncSession = Depends(deps.get_db),
    response: Response,
    user_in: user_schema.UserRegister,
) -> user_schema.AuthResponse:
    """Registra un nuevo usuario y abre su sesión."""
    user = await auth_service.register(db, user_in)
    token = auth_service.issue_token(user)
    set_token_cookie(response, token)
    return user_schema.AuthResponse(
        message="Registration successful",
        token=token,
        user=user_schema.UserResponse.model_validate(user),
    )


@router.post("/login", response_model=user_schema.AuthResponse)
async def login(
    *,
    db: AsyncSession = Depends(deps.get_db),
    response: Response,
    credentials: user_schema.UserLogin,
) -> user_schema.AuthResponse:
    """Inicia sesión con email y contraseña."""
    user = await auth_service.authenticate(db, credentials)
    token = auth_service.issue_token(user)
    set_token_cookie(response, token)
    return user_schema.AuthResponse(
        message="Login successful",
        token=token,
        user=user_schema.UserResponse.model_validate(user),
    )


@router.post("/logout", response_model=user_schema.MessageResponse)
async def logout(
    response: Response,
    current_user: User = Depends(deps.get_current_user),
) -> user_schema.MessageResponse:
    """Cierra la sesión borrando la cookie."""
    clear_token_cookie(response)
    return user_schema.MessageResponse(message="Logout successful")


@router.get("/profile", response_model=user_schema.UserResponse)
async def read_profile(current_user: User = Depends(deps.get_current_user)) -> user_schema.UserResponse:
    """Datos del usuario autenticado."""
    return user_schema.UserResponse.model_validate(current_user)
