# backend/ecommerce/crud/category_crud.py

"""
Operaciones CRUD para el modelo Category.

Este módulo implementa las operaciones de Create, Read, Update, Delete para
categorías, proporcionando una capa de abstracción entre los servicios y la
base de datos.

Funcionalidades principales:
- Consultas básicas por ID, nombre y slug
- Listados filtrados (activas, padre, búsqueda) con paginación y estadísticas
- Instantánea plana de categorías para construir el árbol en memoria
- Creación, actualización y borrado

La lógica jerárquica (árbol, descendientes) NO vive aquí: este módulo solo
devuelve listas planas y el núcleo en services/category_tree.py las procesa.
"""

from typing import Any, Dict, List, Optional

from sqlalchemy import select, func, or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ecommerce.db.models.category_model import Category

# Filtro para pedir explícitamente categorías raíz en get_categories()
ROOT_PARENT = "null"

# ========================================
# OPERACIONES DE LECTURA (READ)
# ========================================

async def get_category(db: AsyncSession, category_id: int) -> Optional[Category]:
    """
    Obtiene una categoría por su ID, con su padre precargado.

    Args:
        db: Sesión de SQLAlchemy
        category_id: ID único de la categoría

    Returns:
        Objeto Category si existe, None si no se encuentra
    """
    result = await db.execute(
        select(Category)
        .options(selectinload(Category.parent))
        .filter(Category.category_id == category_id)
        .execution_options(populate_existing=True)
    )
    return result.scalars().first()


async def get_category_by_slug(db: AsyncSession, slug: str) -> Optional[Category]:
    """Obtiene una categoría por su slug."""
    result = await db.execute(select(Category).filter(Category.slug == slug))
    return result.scalars().first()


async def get_category_by_name_or_slug(
    db: AsyncSession, name: str, slug: str, exclude_id: Optional[int] = None
) -> Optional[Category]:
    """
    Busca una categoría que ya use ese nombre o ese slug.

    Se usa para validar duplicados antes de crear o renombrar. exclude_id
    permite ignorar la propia categoría durante una actualización.
    """
    query = select(Category).filter(or_(Category.name == name, Category.slug == slug))
    if exclude_id is not None:
        query = query.filter(Category.category_id != exclude_id)
    result = await db.execute(query)
    return result.scalars().first()


def _apply_filters(query, is_active: Optional[bool], parent_id: Any, search: Optional[str]):
    """Aplica los filtros del listado a una consulta select()."""
    if is_active is not None:
        query = query.filter(Category.is_active.is_(is_active))

    # Manejo especial para categorías raíz (parent_id = None)
    if parent_id == ROOT_PARENT:
        query = query.filter(Category.parent_id.is_(None))
    elif parent_id is not None:
        query = query.filter(Category.parent_id == int(parent_id))

    if search:
        pattern = f"%{search}%"
        query = query.filter(
            or_(
                Category.name.ilike(pattern),
                Category.description.ilike(pattern),
                Category.slug.ilike(pattern),
            )
        )
    return query


async def get_categories(
    db: AsyncSession,
    skip: int = 0,
    limit: int = 20,
    is_active: Optional[bool] = None,
    parent_id: Any = None,
    search: Optional[str] = None,
) -> List[Category]:
    """
    Obtiene una lista paginada y filtrada de categorías.

    Args:
        db: Sesión de SQLAlchemy
        skip: Número de registros a omitir (para paginación)
        limit: Número máximo de registros a devolver
        is_active: Filtrar por estado activo/inactivo
        parent_id: ID del padre, o ROOT_PARENT para solo categorías raíz
        search: Subcadena (sin distinguir mayúsculas) en nombre, descripción o slug

    Returns:
        Lista de objetos Category ordenados por (display_order, name)
    """
    query = _apply_filters(
        select(Category).options(selectinload(Category.parent)),
        is_active, parent_id, search,
    )
    query = query.order_by(Category.display_order.asc(), Category.name.asc()).offset(skip).limit(limit)
    result = await db.execute(query)
    return result.scalars().all()


async def get_category_stats(
    db: AsyncSession,
    is_active: Optional[bool] = None,
    parent_id: Any = None,
    search: Optional[str] = None,
) -> Dict[str, int]:
    """
    Estadísticas del listado bajo los mismos filtros: total, activas,
    inactivas, con padre y raíz.
    """
    base = _apply_filters(select(func.count(Category.category_id)), is_active, parent_id, search)
    total = (await db.execute(base)).scalar_one()
    active = (await db.execute(base.filter(Category.is_active.is_(True)))).scalar_one()
    inactive = (await db.execute(base.filter(Category.is_active.is_(False)))).scalar_one()
    with_parent = (await db.execute(base.filter(Category.parent_id.is_not(None)))).scalar_one()
    roots = (await db.execute(base.filter(Category.parent_id.is_(None)))).scalar_one()
    return {
        "total": total,
        "active": active,
        "inactive": inactive,
        "with_parent": with_parent,
        "root_categories": roots,
    }


async def get_categories_snapshot(db: AsyncSession, active_only: bool = True) -> List[Category]:
    """
    Devuelve la lista plana completa de categorías (sin paginar).

    Es la entrada del núcleo jerárquico: build_category_tree() y
    resolve_descendant_ids() trabajan sobre esta instantánea en memoria.
    """
    query = select(Category)
    if active_only:
        query = query.filter(Category.is_active.is_(True))
    query = query.order_by(Category.display_order.asc(), Category.name.asc(), Category.category_id.asc())
    result = await db.execute(query)
    return result.scalars().all()


async def get_subcategories(db: AsyncSession, parent_id: int, active_only: bool = True) -> List[Category]:
    """
    Obtiene las subcategorías directas de una categoría padre.
    """
    query = select(Category).filter(Category.parent_id == parent_id)
    if active_only:
        query = query.filter(Category.is_active.is_(True))
    query = query.order_by(Category.display_order.asc(), Category.name.asc())
    result = await db.execute(query)
    return result.scalars().all()


# ========================================
# OPERACIONES DE ESCRITURA (CREATE, UPDATE, DELETE)
# ========================================

async def create_category(db: AsyncSession, data: Dict[str, Any]) -> Category:
    """
    Crea una nueva categoría en la base de datos.

    La validación (duplicados, padre existente, slug) es responsabilidad del
    servicio; aquí solo se persiste.

    Args:
        db: Sesión de SQLAlchemy
        data: Columnas de la nueva categoría, ya validadas

    Returns:
        Objeto Category recién creado, con su padre precargado
    """
    db_category = Category(**data)
    db.add(db_category)
    await db.commit()  # Persiste en la base de datos
    return await get_category(db, db_category.category_id)


async def update_category(db: AsyncSession, db_category: Category, update_data: Dict[str, Any]) -> Category:
    """
    Actualiza una categoría existente con los campos proporcionados.

    Solo se tocan las claves presentes en update_data, lo que permite
    actualizaciones parciales.
    """
    for key, value in update_data.items():
        setattr(db_category, key, value)

    db.add(db_category)  # Marca el objeto como modificado
    await db.commit()  # Persiste los cambios
    return await get_category(db, db_category.category_id)


async def delete_category(db: AsyncSession, db_category: Category) -> None:
    """
    Elimina una categoría de la base de datos.

    Efectos colaterales (FK con ON DELETE SET NULL):
        - Productos y paquetes asociados quedan sin categoría
        - Subcategorías inactivas quedan como raíz
    """
    await db.delete(db_category)
    await db.commit()

