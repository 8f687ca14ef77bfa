# backend/ecommerce/db/database.py

"""
Configuración principal de la base de datos para la aplicación.

Este módulo establece la conexión con PostgreSQL usando SQLAlchemy y define
los componentes básicos que serán utilizados por toda la aplicación:
- Motor de base de datos (engine)
- Fábrica de sesiones (AsyncSessionLocal)
- Clase base para modelos (Base)

La dependencia get_db() vive en ecommerce/api/deps.py para mantener las
dependencias separadas de la configuración.
"""

from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession, AsyncEngine
from sqlalchemy.orm import declarative_base
from ecommerce.core.config import settings # Importamos nuestra configuración

# Crear el motor de base de datos asíncrono
engine = create_async_engine(settings.SQLALCHEMY_DATABASE_URI, pool_pre_ping=True)


def make_sessionmaker(bind: AsyncEngine) -> async_sessionmaker:
    """
    Crea una fábrica de sesiones asíncronas para el motor dado.

    expire_on_commit=False es importante para que los objetos sigan siendo
    utilizables después de que la transacción se haya confirmado.
    """
    return async_sessionmaker(
        bind=bind,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


AsyncSessionLocal = make_sessionmaker(engine)

# Clase base declarativa para todos los modelos ORM
# Todos los modelos en db/models/ heredan de esta clase
Base = declarative_base()


async def create_tables(bind: AsyncEngine = engine) -> None:
    """Crea todas las tablas registradas en Base.metadata si no existen."""
    # Importar los modelos para registrarlos en los metadatos
    from ecommerce.db.models import (  # noqa: F401
        category_model,
        courier_model,
        order_model,
        package_model,
        product_model,
        user_model,
    )

    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
