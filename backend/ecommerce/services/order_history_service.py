# backend/ecommerce/services/order_history_service.py
"""
Servicio del historial de pedidos del usuario autenticado.

Incluye el listado filtrado con estadísticas, el detalle de un pedido, el
seguimiento por número de pedido (historial de estados y fecha estimada de
entrega) y las solicitudes de devolución.

Todas las operaciones están acotadas al usuario: un pedido ajeno se
responde como inexistente.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from fastapi import HTTPException
from starlette import status

from ecommerce.db.models.order_model import Order, ReturnRequest
from ecommerce.db.models.user_model import User
from ecommerce.crud import order_crud
from ecommerce.schemas import order_schema
from ecommerce.schemas.pagination_schema import build_pagination, page_to_skip
from ecommerce.schemas.user_schema import UserSummary

logger = logging.getLogger(__name__)

# Plazo máximo para solicitar una devolución desde la creación del pedido
RETURN_WINDOW_DAYS = 30

# Secuencia normal de estados tras la creación (PENDING)
STATUS_FLOW = ["PROCESSING", "SHIPPED", "DELIVERED"]

STATUS_DESCRIPTIONS = {
    "PENDING": "Order received",
    "PROCESSING": "Being processed",
    "SHIPPED": "Handed over for delivery",
    "DELIVERED": "Delivered",
    "CANCELLED": "Cancelled",
}


def as_utc(value: datetime) -> datetime:
    """SQLite devuelve fechas sin zona horaria; se asumen en UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def get_status_description(order_status: str) -> str:
    return STATUS_DESCRIPTIONS.get(order_status, order_status)


def build_status_history(order_status: str, created_at: datetime) -> List[order_schema.StatusHistoryEntry]:
    """
    Reconstruye el historial de estados de un pedido.

    PENDING en la fecha de creación; cada estado del flujo hasta el actual,
    separado 24 horas del anterior; CANCELLED con la fecha actual.
    """
    created_at = as_utc(created_at)
    history = [
        order_schema.StatusHistoryEntry(
            status="PENDING", date=created_at, description=get_status_description("PENDING")
        )
    ]

    if order_status in STATUS_FLOW:
        for i, step in enumerate(STATUS_FLOW[: STATUS_FLOW.index(order_status) + 1]):
            history.append(
                order_schema.StatusHistoryEntry(
                    status=step,
                    date=created_at + timedelta(hours=24 * (i + 1)),
                    description=get_status_description(step),
                )
            )

    if order_status == "CANCELLED":
        history.append(
            order_schema.StatusHistoryEntry(
                status="CANCELLED",
                date=datetime.now(timezone.utc),
                description=get_status_description("CANCELLED"),
            )
        )

    return history


def estimate_delivery(order_status: str, created_at: datetime) -> Optional[datetime]:
    """Siete días para pedidos pendientes o en proceso, tres si ya se enviaron."""
    if order_status in ("PENDING", "PROCESSING"):
        return as_utc(created_at) + timedelta(days=7)
    if order_status == "SHIPPED":
        return as_utc(created_at) + timedelta(days=3)
    return None


class OrderHistoryService:

    async def _get_user_order_or_404(self, db: AsyncSession, order_id: int, current_user: User) -> Order:
        db_order = await order_crud.get_user_order(db, user_id=current_user.user_id, order_id=order_id)
        if not db_order:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Order with id {order_id} not found."
            )
        return db_order

    async def get_history(
        self,
        db: AsyncSession,
        current_user: User,
        page: int = 1,
        limit: int = 10,
        status_filter: Optional[str] = None,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        sort_by: str = "created_at",
        sort_order: str = "desc",
    ) -> order_schema.OrderHistoryResponse:
        """
        Historial paginado. stats.by_status cuenta todos los pedidos del
        usuario, sin aplicar los filtros del listado.
        """
        filters = {"status": status_filter, "start_date": start_date, "end_date": end_date}
        orders = await order_crud.get_user_orders(
            db,
            current_user.user_id,
            skip=page_to_skip(page, limit),
            limit=limit,
            sort_by=sort_by,
            sort_order=sort_order,
            **filters,
        )
        total = await order_crud.count_user_orders(db, current_user.user_id, **filters)
        by_status = await order_crud.count_user_orders_by_status(db, current_user.user_id)

        data = [
            order_schema.OrderHistoryEntry(
                **order_schema.Order.model_validate(o).model_dump(),
                total_items=sum(item.quantity for item in o.items),
            )
            for o in orders
        ]
        return order_schema.OrderHistoryResponse(
            count=len(data),
            total=total,
            stats=order_schema.OrderHistoryStats(total_orders=total, by_status=by_status),
            pagination=build_pagination(page, limit, total),
            data=data,
        )

    async def get_stats(self, db: AsyncSession, current_user: User) -> order_schema.OrderStatsResponse:
        """Totales del usuario. El gasto excluye los pedidos cancelados."""
        by_status = await order_crud.count_user_orders_by_status(db, current_user.user_id)
        spending = await order_crud.get_user_spending(db, current_user.user_id)
        return order_schema.OrderStatsResponse(
            total_orders=sum(by_status.values()),
            by_status=by_status,
            total_spent=float(spending["total_spent"]),
            total_items=int(spending["total_items"]),
        )

    async def get_order_details(self, db: AsyncSession, order_id: int, current_user: User) -> order_schema.OrderDetails:
        db_order = await self._get_user_order_or_404(db, order_id, current_user)

        items = [
            order_schema.OrderItemWithSubtotal(
                **order_schema.OrderItem.model_validate(item).model_dump(),
                subtotal=float(item.price * item.quantity),
            )
            for item in db_order.items
        ]
        base = order_schema.Order.model_validate(db_order).model_dump(exclude={"items"})
        return order_schema.OrderDetails(
            **base,
            user=UserSummary.model_validate(db_order.user) if db_order.user else None,
            items=items,
            items_count=len(items),
            total_quantity=sum(item.quantity for item in items),
        )

    async def track_order(self, db: AsyncSession, order_number: str, current_user: User) -> order_schema.OrderTracking:
        db_order = await order_crud.get_user_order_by_number(db, user_id=current_user.user_id, order_number=order_number)
        if not db_order:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Order '{order_number}' not found."
            )

        return order_schema.OrderTracking(
            order_id=db_order.order_id,
            order_number=db_order.order_number,
            status=db_order.status,
            created_at=as_utc(db_order.created_at),
            updated_at=db_order.updated_at,
            total_amount=float(db_order.total_amount),
            shipping_address=db_order.shipping_address,
            payment_status=db_order.payment_status,
            status_history=build_status_history(db_order.status, db_order.created_at),
            estimated_delivery=estimate_delivery(db_order.status, db_order.created_at),
            current_status=get_status_description(db_order.status),
        )

    async def request_return(
        self,
        db: AsyncSession,
        order_id: int,
        return_in: order_schema.ReturnRequestCreate,
        current_user: User,
    ) -> ReturnRequest:
        """
        Registra una solicitud de devolución.

        Solo para pedidos entregados del propio usuario y dentro de los 30
        días siguientes a su creación.
        """
        db_order = await order_crud.get_user_order(db, user_id=current_user.user_id, order_id=order_id)
        if not db_order or db_order.status != "DELIVERED":
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="This order cannot be returned."
            )

        deadline = as_utc(db_order.created_at) + timedelta(days=RETURN_WINDOW_DAYS)
        if datetime.now(timezone.utc) > deadline:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"The return period has expired ({RETURN_WINDOW_DAYS} days)."
            )

        db_request = await order_crud.create_return_request(
            db, order_id=order_id, user_id=current_user.user_id,
            reason=return_in.reason, comments=return_in.comments,
        )
        logger.info(f"↩️ DEVOLUCIÓN: pedido {order_id} del usuario {current_user.user_id}")
        return db_request


order_history_service = OrderHistoryService()
