# backend/ecommerce/crud/product_crud.py

"""
Operaciones CRUD para el modelo Product.

Funcionalidades principales:
- Consultas con selectinload para evitar consultas N+1 (y lazy loads, que no
  están permitidos con sesiones asíncronas)
- Filtrado por conjunto de categorías y búsqueda de texto
- Ordenación por columnas permitidas
- Paginación
"""

from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy import or_, select, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ecommerce.db.models.product_model import Product

import logging

logger = logging.getLogger(__name__)

# Columnas por las que se permite ordenar desde la API
SORTABLE_COLUMNS = {
    "created_at": Product.created_at,
    "price": Product.price,
    "name": Product.name,
}

# ========================================
# OPERACIONES DE LECTURA (READ)
# ========================================

async def get_product(db: AsyncSession, product_id: int) -> Optional[Product]:
    """Obtiene un producto por su ID, con categoría y propietario precargados."""
    result = await db.execute(
        select(Product)
        .options(selectinload(Product.category), selectinload(Product.user))
        .filter(Product.product_id == product_id)
        .execution_options(populate_existing=True)
    )
    return result.scalars().first()


async def get_existing_product_ids(db: AsyncSession, product_ids: Sequence[int]) -> List[int]:
    """Devuelve cuáles de los IDs dados existen en la base de datos."""
    if not product_ids:
        return []
    result = await db.execute(select(Product.product_id).filter(Product.product_id.in_(product_ids)))
    return [row[0] for row in result.fetchall()]


def _apply_filters(query, category_ids: Optional[Sequence[int]], search: Optional[str]):
    if category_ids is not None:
        query = query.filter(Product.category_id.in_(list(category_ids)))
    if search:
        query = query.filter(
            or_(
                Product.name.ilike(f"%{search}%"),
                Product.description.ilike(f"%{search}%")
            )
        )
    return query


async def get_products(
    db: AsyncSession,
    skip: int = 0,
    limit: int = 10,
    category_ids: Optional[Sequence[int]] = None,
    search: Optional[str] = None,
    sort_by: str = "created_at",
    sort_order: str = "desc",
) -> List[Product]:
    """
    Obtiene una lista filtrada y paginada de productos.

    Args:
        category_ids: Conjunto de categorías admitidas (None = sin filtro)
        search: Subcadena en nombre o descripción
        sort_by: Columna de SORTABLE_COLUMNS
        sort_order: "asc" o "desc"
    """
    query = select(Product).options(
        selectinload(Product.category),
        selectinload(Product.user)
    )
    query = _apply_filters(query, category_ids, search)

    column = SORTABLE_COLUMNS.get(sort_by, Product.created_at)
    ordering = column.asc() if sort_order == "asc" else column.desc()
    # product_id como desempate para una paginación estable
    query = query.order_by(ordering, Product.product_id.asc()).offset(skip).limit(limit)
    result = await db.execute(query)
    return result.scalars().all()


async def count_products(
    db: AsyncSession,
    category_ids: Optional[Sequence[int]] = None,
    search: Optional[str] = None,
) -> int:
    query = _apply_filters(select(func.count(Product.product_id)), category_ids, search)
    result = await db.execute(query)
    return result.scalar_one()


# ========================================
# OPERACIONES DE ESCRITURA (CREATE, UPDATE, DELETE)
# ========================================

async def create_product(db: AsyncSession, data: Dict[str, Any], user_id: Optional[int]) -> Product:
    """Crea un nuevo producto en la base de datos."""
    db_product = Product(**data, user_id=user_id)
    db.add(db_product)
    await db.commit()
    logger.info(f"Producto creado: {db_product.product_id} '{db_product.name}'")
    return await get_product(db, db_product.product_id)


async def update_product(db: AsyncSession, db_product: Product, update_data: Dict[str, Any]) -> Product:
    """Actualiza un producto existente con los campos proporcionados."""
    for key, value in update_data.items():
        setattr(db_product, key, value)

    await db.commit()
    return await get_product(db, db_product.product_id)


async def delete_product(db: AsyncSession, db_product: Product) -> None:
    """Elimina un producto de la base de datos."""
    await db.delete(db_product)
    await db.commit()
