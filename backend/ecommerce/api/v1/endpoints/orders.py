"""
Endpoints REST del historial de pedidos del usuario autenticado.
"""

from datetime import datetime
from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ecommerce.api import deps
from ecommerce.db.models.user_model import User
from ecommerce.schemas import order_schema
from ecommerce.services.order_history_service import order_history_service

router = APIRouter()


@router.get("/history", response_model=order_schema.OrderHistoryResponse)
async def read_order_history(
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    status_filter: Optional[order_schema.OrderStatus] = Query(None, alias="status"),
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    sort_by: Literal["created_at", "total_amount", "status"] = "created_at",
    sort_order: Literal["asc", "desc"] = "desc",
) -> order_schema.OrderHistoryResponse:
    """Historial de pedidos con filtros, ordenación y recuento por estado."""
    return await order_history_service.get_history(
        db,
        current_user,
        page=page,
        limit=limit,
        status_filter=status_filter.value if status_filter else None,
        start_date=start_date,
        end_date=end_date,
        sort_by=sort_by,
        sort_order=sort_order,
    )


@router.get("/history/stats", response_model=order_schema.OrderStatsResponse)
async def read_order_stats(
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
) -> order_schema.OrderStatsResponse:
    """Totales del usuario: pedidos, reparto por estado y gasto."""
    return await order_history_service.get_stats(db, current_user)


@router.get("/history/{order_id}", response_model=order_schema.OrderDetails)
async def read_order_details(
    *,
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
    order_id: int,
) -> order_schema.OrderDetails:
    """Detalle de un pedido propio con subtotales."""
    return await order_history_service.get_order_details(db, order_id, current_user)


@router.get("/history/{order_number}/track", response_model=order_schema.OrderTracking)
async def track_order(
    *,
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
    order_number: str,
) -> order_schema.OrderTracking:
    """Seguimiento de un pedido por su número."""
    return await order_history_service.track_order(db, order_number, current_user)


@router.post("/history/{order_id}/return", response_model=order_schema.ReturnRequestMessage)
async def request_order_return(
    *,
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
    order_id: int,
    return_in: order_schema.ReturnRequestCreate,
) -> order_schema.ReturnRequestMessage:
    """Solicita la devolución de un pedido entregado (máximo 30 días)."""
    return_request = await order_history_service.request_return(db, order_id, return_in, current_user)
    return order_schema.ReturnRequestMessage(
        message="Return request received",
        data=order_schema.ReturnRequestResponse.model_validate(return_request),
    )
