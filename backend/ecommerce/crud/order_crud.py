# backend/ecommerce/crud/order_crud.py
"""
Operaciones CRUD para el modelo Order.

Este módulo proporciona las consultas del historial de pedidos de un usuario,
la búsqueda por número de pedido para el seguimiento, la generación de
números de pedido y el registro de solicitudes de devolución.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ecommerce.db.models.order_model import Order, OrderItem, ReturnRequest

SORTABLE_COLUMNS = {
    "created_at": Order.created_at,
    "total_amount": Order.total_amount,
    "status": Order.status,
}


def _order_options():
    return (
        selectinload(Order.items).selectinload(OrderItem.product),
        selectinload(Order.user),
    )


def _apply_filters(
    query,
    user_id: int,
    status: Optional[str] = None,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
):
    query = query.filter(Order.user_id == user_id)
    if status:
        query = query.filter(Order.status == status)
    if start_date:
        query = query.filter(Order.created_at >= start_date)
    if end_date:
        query = query.filter(Order.created_at <= end_date)
    return query


async def get_next_order_number(db: AsyncSession) -> str:
    """
    Calcula el siguiente número de pedido secuencial con el formato ORDXXXXX.
    """
    max_id_result = await db.execute(select(func.max(Order.order_id)))
    last_id_num = max_id_result.scalar() or 0
    return f"ORD{last_id_num + 1:05d}"


async def create_order(
    db: AsyncSession,
    user_id: int,
    items: Sequence[Dict[str, Any]],
    shipping_address: Optional[str] = None,
    status: str = "PENDING",
    created_at: Optional[datetime] = None,
) -> Order:
    """
    Crea un pedido con sus items. El total se calcula a partir de los items
    (precio en el momento de la compra × cantidad).
    """
    total = sum(item["price"] * item["quantity"] for item in items)
    db_order = Order(
        order_number=await get_next_order_number(db),
        user_id=user_id,
        status=status,
        total_amount=total,
        shipping_address=shipping_address,
    )
    if created_at is not None:
        db_order.created_at = created_at
    db_order.items = [OrderItem(**item) for item in items]
    db.add(db_order)
    await db.commit()
    return await get_user_order(db, user_id, db_order.order_id)


async def get_user_order(db: AsyncSession, user_id: int, order_id: int) -> Optional[Order]:
    """
    Obtiene un pedido por su ID, solo si pertenece al usuario indicado.
    """
    result = await db.execute(
        select(Order)
        .options(*_order_options())
        .filter(Order.order_id == order_id, Order.user_id == user_id)
        .execution_options(populate_existing=True)
    )
    return result.scalars().first()


async def get_user_order_by_number(db: AsyncSession, user_id: int, order_number: str) -> Optional[Order]:
    result = await db.execute(
        select(Order).filter(Order.order_number == order_number, Order.user_id == user_id)
    )
    return result.scalars().first()


async def get_user_orders(
    db: AsyncSession,
    user_id: int,
    skip: int = 0,
    limit: int = 10,
    sort_by: str = "created_at",
    sort_order: str = "desc",
    **filters: Any,
) -> List[Order]:
    """
    Obtiene el historial de pedidos de un usuario, filtrado y paginado.
    """
    column = SORTABLE_COLUMNS.get(sort_by, Order.created_at)
    ordering = column.asc() if sort_order == "asc" else column.desc()
    query = _apply_filters(select(Order).options(*_order_options()), user_id, **filters)
    query = query.order_by(ordering, Order.order_id.desc()).offset(skip).limit(limit)
    result = await db.execute(query)
    return result.scalars().all()


async def count_user_orders(db: AsyncSession, user_id: int, **filters: Any) -> int:
    result = await db.execute(_apply_filters(select(func.count(Order.order_id)), user_id, **filters))
    return result.scalar_one()


async def count_user_orders_by_status(db: AsyncSession, user_id: int) -> Dict[str, int]:
    """Número de pedidos del usuario agrupados por estado (sin otros filtros)."""
    result = await db.execute(
        select(Order.status, func.count(Order.order_id))
        .filter(Order.user_id == user_id)
        .group_by(Order.status)
    )
    return {status: count for status, count in result.all()}


async def get_user_spending(db: AsyncSession, user_id: int) -> Dict[str, Any]:
    """Importe total y número de unidades de los pedidos no cancelados."""
    amount = await db.execute(
        select(func.coalesce(func.sum(Order.total_amount), 0))
        .filter(Order.user_id == user_id, Order.status != "CANCELLED")
    )
    units = await db.execute(
        select(func.coalesce(func.sum(OrderItem.quantity), 0))
        .join(Order, OrderItem.order_id == Order.order_id)
        .filter(Order.user_id == user_id, Order.status != "CANCELLED")
    )
    return {"total_spent": amount.scalar_one(), "total_items": units.scalar_one()}


async def create_return_request(
    db: AsyncSession, order_id: int, user_id: int, reason: str, comments: Optional[str]
) -> ReturnRequest:
    db_request = ReturnRequest(order_id=order_id, user_id=user_id, reason=reason, comments=comments)
    db.add(db_request)
    await db.commit()
    await db.refresh(db_request)
    return db_request
