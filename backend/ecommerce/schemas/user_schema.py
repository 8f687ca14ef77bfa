# backend/ecommerce/schemas/user_schema.py
"""
Esquemas Pydantic para usuarios y autenticación.
"""

from datetime import datetime
from typing import Optional
import enum

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


class UserRole(str, enum.Enum):
    """Roles de usuario."""
    USER = "USER"
    ADMIN = "ADMIN"


class UserRegister(BaseModel):
    """Datos de registro de un nuevo usuario."""
    email: EmailStr = Field(..., description="Email válido")
    password: str = Field(..., min_length=6, description="Contraseña (mínimo 6 caracteres)")
    name: str = Field(..., description="Nombre del usuario")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Name is required")
        return v.strip()


class UserLogin(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class UserResponse(BaseModel):
    """Usuario tal como se devuelve al cliente (sin contraseña)."""
    user_id: int
    email: EmailStr
    name: str
    role: UserRole
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class UserSummary(BaseModel):
    user_id: int
    name: str
    email: str

    model_config = ConfigDict(from_attributes=True)


class AuthResponse(BaseModel):
    message: str
    token: str
    user: UserResponse


class MessageResponse(BaseModel):
    message: str
