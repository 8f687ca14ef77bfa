# backend/ecommerce/crud/user_crud.py
"""
Operaciones CRUD para el modelo User.
"""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ecommerce.db.models.user_model import User


async def get_user(db: AsyncSession, user_id: int) -> Optional[User]:
    """Obtiene un usuario por su ID."""
    result = await db.execute(select(User).filter(User.user_id == user_id))
    return result.scalars().first()


async def get_user_by_email(db: AsyncSession, email: str) -> Optional[User]:
    """Obtiene un usuario por su email (comparación exacta)."""
    result = await db.execute(select(User).filter(User.email == email))
    return result.scalars().first()


async def create_user(db: AsyncSession, email: str, name: str, hashed_password: str, role: str = "USER") -> User:
    """
    Crea un nuevo usuario. La contraseña debe llegar ya hasheada.
    """
    db_user = User(email=email, name=name, password=hashed_password, role=role)
    db.add(db_user)
    await db.commit()
    await db.refresh(db_user)
    return db_user
