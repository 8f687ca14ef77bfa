# backend/ecommerce/services/auth_service.py
"""
Servicio de autenticación: registro, inicio de sesión y emisión de tokens.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession
from fastapi import HTTPException
from starlette import status

from ecommerce.core.security import create_access_token, hash_password, verify_password
from ecommerce.db.models.user_model import User
from ecommerce.crud import user_crud
from ecommerce.schemas import user_schema

logger = logging.getLogger(__name__)


class AuthService:
    """
    Servicio de autenticación.

    Las contraseñas se guardan con bcrypt y la sesión se representa con un
    JWT que el cliente envía en la cabecera Authorization o en la cookie.
    """

    def issue_token(self, user: User) -> str:
        return create_access_token(user_id=user.user_id, email=user.email, role=user.role)

    async def register(self, db: AsyncSession, user_in: user_schema.UserRegister) -> User:
        """
        Registra un nuevo usuario con rol USER.

        Raises:
            HTTPException 400: si el email ya está registrado.
        """
        if await user_crud.get_user_by_email(db, email=user_in.email):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="A user with this email is already registered."
            )

        user = await user_crud.create_user(
            db,
            email=user_in.email,
            name=user_in.name,
            hashed_password=hash_password(user_in.password),
        )
        logger.info(f"👤 USUARIO: registrado {user.email} (id {user.user_id})")
        return user

    async def authenticate(self, db: AsyncSession, credentials: user_schema.UserLogin) -> User:
        """
        Comprueba email y contraseña. Ambos fallos responden igual para no
        revelar qué emails existen.
        """
        user = await user_crud.get_user_by_email(db, email=credentials.email)
        if not user or not verify_password(credentials.password, user.password):
            logger.warning(f"🔒 Intento de acceso fallido para {credentials.email}")
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid email or password."
            )
        return user


auth_service = AuthService()
