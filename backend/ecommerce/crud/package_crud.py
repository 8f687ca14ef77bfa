# backend/ecommerce/crud/package_crud.py

"""
Operaciones CRUD para paquetes (Package) y sus items (PackageItem).

Todas las lecturas precargan categoría, items y producto de cada item con
selectinload, ya que las sesiones asíncronas no permiten carga perezosa.
"""

from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy import or_, select, func, String, cast
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ecommerce.db.models.package_model import Package, PackageItem
from ecommerce.db.models.product_model import Product

SORTABLE_COLUMNS = {
    "created_at": Package.created_at,
    "price": Package.price,
    "name": Package.name,
}


def _package_options():
    return (
        selectinload(Package.category),
        selectinload(Package.user),
        selectinload(Package.items).selectinload(PackageItem.product).selectinload(Product.category),
    )


# ========================================
# OPERACIONES DE LECTURA (READ)
# ========================================

async def get_package(db: AsyncSession, package_id: int, active_only: bool = False) -> Optional[Package]:
    """Obtiene un paquete con todas sus relaciones precargadas."""
    query = (
        select(Package)
        .options(*_package_options())
        .filter(Package.package_id == package_id)
        .execution_options(populate_existing=True)
    )
    if active_only:
        query = query.filter(Package.is_active.is_(True))
    result = await db.execute(query)
    return result.scalars().first()


def _apply_filters(
    query,
    is_active: Optional[bool],
    category_id: Optional[int],
    min_price: Optional[float],
    max_price: Optional[float],
    search: Optional[str],
):
    if is_active is not None:
        query = query.filter(Package.is_active.is_(is_active))
    if category_id is not None:
        query = query.filter(Package.category_id == category_id)
    if min_price is not None:
        query = query.filter(Package.price >= min_price)
    if max_price is not None:
        query = query.filter(Package.price <= max_price)
    if search:
        query = query.filter(
            or_(
                Package.name.ilike(f"%{search}%"),
                Package.description.ilike(f"%{search}%"),
                # Las etiquetas se guardan como lista JSON: buscamos la etiqueta exacta entre comillas
                cast(Package.tags, String).like(f'%"{search}"%'),
            )
        )
    return query


async def get_packages(
    db: AsyncSession,
    skip: int = 0,
    limit: int = 10,
    is_active: Optional[bool] = True,
    category_id: Optional[int] = None,
    min_price: Optional[float] = None,
    max_price: Optional[float] = None,
    search: Optional[str] = None,
    sort_by: str = "created_at",
    sort_order: str = "desc",
) -> List[Package]:
    """Obtiene una lista filtrada y paginada de paquetes."""
    query = _apply_filters(
        select(Package).options(*_package_options()),
        is_active, category_id, min_price, max_price, search,
    )
    column = SORTABLE_COLUMNS.get(sort_by, Package.created_at)
    ordering = column.asc() if sort_order == "asc" else column.desc()
    query = query.order_by(ordering, Package.package_id.asc()).offset(skip).limit(limit)
    result = await db.execute(query)
    return result.scalars().all()


async def count_packages(
    db: AsyncSession,
    is_active: Optional[bool] = True,
    category_id: Optional[int] = None,
    min_price: Optional[float] = None,
    max_price: Optional[float] = None,
    search: Optional[str] = None,
) -> int:
    query = _apply_filters(
        select(func.count(Package.package_id)),
        is_active, category_id, min_price, max_price, search,
    )
    result = await db.execute(query)
    return result.scalar_one()


async def get_package_item(db: AsyncSession, item_id: int) -> Optional[PackageItem]:
    """Obtiene un item de paquete con su producto precargado."""
    result = await db.execute(
        select(PackageItem)
        .options(selectinload(PackageItem.product))
        .filter(PackageItem.item_id == item_id)
        .execution_options(populate_existing=True)
    )
    return result.scalars().first()


# ========================================
# OPERACIONES DE ESCRITURA (CREATE, UPDATE, DELETE)
# ========================================

async def create_package(
    db: AsyncSession,
    data: Dict[str, Any],
    items: Sequence[Dict[str, Any]],
    user_id: Optional[int],
) -> Package:
    """
    Crea un paquete y sus items en una sola transacción.
    """
    db_package = Package(**data, user_id=user_id)
    db_package.items = [PackageItem(**item) for item in items]
    db.add(db_package)
    await db.commit()
    return await get_package(db, db_package.package_id)


async def update_package(db: AsyncSession, db_package: Package, update_data: Dict[str, Any]) -> Package:
    for key, value in update_data.items():
        setattr(db_package, key, value)
    await db.commit()
    return await get_package(db, db_package.package_id)


async def add_package_item(db: AsyncSession, package_id: int, data: Dict[str, Any]) -> PackageItem:
    db_item = PackageItem(package_id=package_id, **data)
    db.add(db_item)
    await db.commit()
    return await get_package_item(db, db_item.item_id)


async def update_package_item(db: AsyncSession, db_item: PackageItem, update_data: Dict[str, Any]) -> PackageItem:
    for key, value in update_data.items():
        setattr(db_item, key, value)
    await db.commit()
    return await get_package_item(db, db_item.item_id)


async def delete_package_item(db: AsyncSession, db_item: PackageItem) -> None:
    await db.delete(db_item)
    await db.commit()
