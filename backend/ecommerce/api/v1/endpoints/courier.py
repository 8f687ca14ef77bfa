"""
Endpoints REST para pedidos de mensajería a instituciones.
"""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from ecommerce.api import deps
from ecommerce.db.models.user_model import User
from ecommerce.schemas import courier_schema
from ecommerce.services.courier_service import courier_service

router = APIRouter()


@router.get("/institutions", response_model=courier_schema.InstitutionListResponse)
async def read_institutions() -> courier_schema.InstitutionListResponse:
    """Instituciones disponibles para el desplegable del formulario."""
    return courier_service.list_institutions()


@router.post("/orders", response_model=courier_schema.CourierOrderCreated, status_code=status.HTTP_201_CREATED)
async def create_courier_order(
    *,
    db: AsyncSession = Depends(deps.get_db),
    current_user: Optional[User] = Depends(deps.get_optional_user),
    order_in: courier_schema.CourierOrderCreate,
) -> courier_schema.CourierOrderCreated:
    """Registra un pedido de mensajería. La autenticación es opcional."""
    order = await courier_service.create_order(db, order_in, current_user)
    return courier_schema.CourierOrderCreated(
        message="Courier order created successfully",
        order_id=order.courier_order_id,
        data=courier_schema.CourierOrderResponse.model_validate(order),
    )


@router.get("/orders/my", response_model=courier_schema.CourierOrderListResponse)
async def read_my_courier_orders(
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
) -> courier_schema.CourierOrderListResponse:
    """Pedidos del usuario autenticado, del más reciente al más antiguo."""
    return await courier_service.list_my_orders(db, current_user, page=page, limit=limit)


@router.get("/orders", response_model=courier_schema.CourierOrderListResponse)
async def read_courier_orders(
    db: AsyncSession = Depends(deps.get_db),
    admin: User = Depends(deps.require_admin),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    status_filter: Optional[courier_schema.CourierOrderStatus] = Query(None, alias="status"),
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    search: Optional[str] = None,
) -> courier_schema.CourierOrderListResponse:
    """Listado completo para administración, con estadísticas por estado."""
    return await courier_service.list_all_orders(
        db,
        page=page,
        limit=limit,
        status_filter=status_filter.value if status_filter else None,
        start_date=start_date,
        end_date=end_date,
        search=search,
    )


@router.get("/orders/{courier_order_id}", response_model=courier_schema.CourierOrderResponse)
async def read_courier_order(
    *,
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
    courier_order_id: int,
) -> courier_schema.CourierOrderResponse:
    """Un pedido concreto: el propio o cualquiera si se es administrador."""
    return await courier_service.get_order_for_user(db, courier_order_id, current_user)


@router.patch("/orders/{courier_order_id}/status", response_model=courier_schema.CourierOrderMessage)
async def update_courier_order_status(
    *,
    db: AsyncSession = Depends(deps.get_db),
    admin: User = Depends(deps.require_admin),
    courier_order_id: int,
    body: courier_schema.CourierOrderStatusUpdate,
) -> courier_schema.CourierOrderMessage:
    """Cambia el estado de un pedido."""
    order = await courier_service.update_status(db, courier_order_id, body.status)
    return courier_schema.CourierOrderMessage(
        message="Order status updated successfully",
        data=courier_schema.CourierOrderResponse.model_validate(order),
    )


@router.delete("/orders/{courier_order_id}", response_model=courier_schema.CourierOrderMessage)
async def delete_courier_order(
    *,
    db: AsyncSession = Depends(deps.get_db),
    admin: User = Depends(deps.require_admin),
    courier_order_id: int,
) -> courier_schema.CourierOrderMessage:
    """Elimina un pedido."""
    await courier_service.delete_order(db, courier_order_id)
    return courier_schema.CourierOrderMessage(message="Courier order deleted successfully")
