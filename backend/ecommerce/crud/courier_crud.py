# backend/ecommerce/crud/courier_crud.py
"""
Operaciones CRUD para los pedidos de mensajería (CourierOrder).
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import or_, select, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ecommerce.db.models.courier_model import CourierOrder


async def get_courier_order(db: AsyncSession, courier_order_id: int) -> Optional[CourierOrder]:
    result = await db.execute(
        select(CourierOrder)
        .options(selectinload(CourierOrder.user))
        .filter(CourierOrder.courier_order_id == courier_order_id)
        .execution_options(populate_existing=True)
    )
    return result.scalars().first()


def _apply_filters(
    query,
    status: Optional[str] = None,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    search: Optional[str] = None,
    user_id: Optional[int] = None,
):
    if user_id is not None:
        query = query.filter(CourierOrder.user_id == user_id)
    if status:
        query = query.filter(CourierOrder.status == status)
    if start_date:
        query = query.filter(CourierOrder.created_at >= start_date)
    if end_date:
        query = query.filter(CourierOrder.created_at <= end_date)
    if search:
        pattern = f"%{search}%"
        query = query.filter(
            or_(
                CourierOrder.full_name.ilike(pattern),
                CourierOrder.phone_number.ilike(pattern),
                CourierOrder.institution.ilike(pattern),
                CourierOrder.delivery_to.ilike(pattern),
            )
        )
    return query


async def get_courier_orders(db: AsyncSession, skip: int = 0, limit: int = 20, **filters: Any) -> List[CourierOrder]:
    """
    Lista pedidos de mensajería, del más reciente al más antiguo.

    filters admite status, start_date, end_date, search y user_id.
    """
    query = _apply_filters(select(CourierOrder).options(selectinload(CourierOrder.user)), **filters)
    query = query.order_by(CourierOrder.created_at.desc(), CourierOrder.courier_order_id.desc())
    result = await db.execute(query.offset(skip).limit(limit))
    return result.scalars().all()


async def count_courier_orders(db: AsyncSession, **filters: Any) -> int:
    result = await db.execute(_apply_filters(select(func.count(CourierOrder.courier_order_id)), **filters))
    return result.scalar_one()


async def count_by_status(db: AsyncSession, **filters: Any) -> Dict[str, int]:
    """Cuenta pedidos agrupados por estado bajo los mismos filtros."""
    filters.pop("status", None)
    query = _apply_filters(
        select(CourierOrder.status, func.count(CourierOrder.courier_order_id)), **filters
    ).group_by(CourierOrder.status)
    result = await db.execute(query)
    return {status: count for status, count in result.all()}


async def create_courier_order(db: AsyncSession, data: Dict[str, Any], user_id: Optional[int]) -> CourierOrder:
    db_order = CourierOrder(**data, user_id=user_id)
    db.add(db_order)
    await db.commit()
    return await get_courier_order(db, db_order.courier_order_id)


async def update_courier_order_status(db: AsyncSession, db_order: CourierOrder, status: str) -> CourierOrder:
    db_order.status = status
    await db.commit()
    return await get_courier_order(db, db_order.courier_order_id)


async def delete_courier_order(db: AsyncSession, db_order: CourierOrder) -> None:
    await db.delete(db_order)
    await db.commit()
