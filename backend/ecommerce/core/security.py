# backend/ecommerce/core/security.py
"""
Utilidades de seguridad: hash de contraseñas (bcrypt), tokens JWT y cookie
de sesión.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import bcrypt
import jwt
from fastapi import Response

from ecommerce.core.config import settings


def hash_password(password: str) -> str:
    """Devuelve el hash bcrypt de la contraseña como texto."""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=10)).decode("utf-8")


def verify_password(password: str, hashed_password: str) -> bool:
    """Comprueba una contraseña en claro contra su hash bcrypt."""
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        # Hash con formato inválido en la base de datos
        return False


def create_access_token(user_id: int, email: str, role: str, expires_minutes: Optional[int] = None) -> str:
    """
    Genera un JWT firmado con los datos mínimos del usuario.

    El payload contiene id, email, role y la fecha de expiración.
    """
    expire = datetime.now(timezone.utc) + timedelta(minutes=expires_minutes or settings.JWT_EXPIRE_MINUTES)
    payload = {"id": user_id, "email": email, "role": role, "exp": expire}
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> Dict[str, Any]:
    """
    Decodifica y valida un JWT.

    Raises:
        jwt.InvalidTokenError: si la firma no es válida o el token ha expirado.
    """
    return jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])


def set_token_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=settings.COOKIE_NAME,
        value=token,
        httponly=True,
        secure=settings.is_production,
        max_age=settings.COOKIE_MAX_AGE,
        samesite="strict",
    )


def clear_token_cookie(response: Response) -> None:
    response.delete_cookie(key=settings.COOKIE_NAME)
