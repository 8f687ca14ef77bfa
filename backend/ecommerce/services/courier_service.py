# backend/ecommerce/services/courier_service.py
"""
Servicio para los pedidos de mensajería (entregas a instituciones).

Cualquier visitante puede registrar un pedido; si está autenticado, el
pedido queda asociado a su usuario y aparece en "mis pedidos". La gestión
(listado completo, cambio de estado, borrado) es exclusiva de administradores.
"""

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession
from fastapi import HTTPException
from starlette import status

from ecommerce.db.models.courier_model import CourierOrder
from ecommerce.db.models.user_model import User
from ecommerce.crud import courier_crud
from ecommerce.schemas import courier_schema
from ecommerce.schemas.pagination_schema import build_pagination, page_to_skip
from ecommerce.services.institutions import get_all_institutions

logger = logging.getLogger(__name__)


class CourierService:

    def list_institutions(self) -> courier_schema.InstitutionListResponse:
        """Instituciones reducidas a id, nombre y código para el formulario."""
        options = [
            courier_schema.InstitutionOption(id=inst["id"], name=inst["name"], code=inst["code"])
            for inst in get_all_institutions()
        ]
        return courier_schema.InstitutionListResponse(count=len(options), data=options)

    async def create_order(
        self,
        db: AsyncSession,
        order_in: courier_schema.CourierOrderCreate,
        current_user: Optional[User] = None,
    ) -> CourierOrder:
        user_id = current_user.user_id if current_user else None
        db_order = await courier_crud.create_courier_order(db, order_in.model_dump(), user_id=user_id)
        logger.info(
            f"🚚 MENSAJERÍA: pedido {db_order.courier_order_id} para '{db_order.institution}' "
            f"(usuario: {user_id or 'anónimo'})"
        )
        return db_order

    async def get_order_for_user(self, db: AsyncSession, courier_order_id: int, current_user: User) -> CourierOrder:
        """
        Obtiene un pedido visible para el usuario: el suyo propio, o cualquiera
        si es administrador. Un pedido ajeno se trata como inexistente.
        """
        db_order = await courier_crud.get_courier_order(db, courier_order_id)
        if not db_order or (current_user.role != "ADMIN" and db_order.user_id != current_user.user_id):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Courier order with id {courier_order_id} not found."
            )
        return db_order

    async def list_my_orders(
        self, db: AsyncSession, current_user: User, page: int = 1, limit: int = 10
    ) -> courier_schema.CourierOrderListResponse:
        orders = await courier_crud.get_courier_orders(
            db, skip=page_to_skip(page, limit), limit=limit, user_id=current_user.user_id
        )
        total = await courier_crud.count_courier_orders(db, user_id=current_user.user_id)
        return courier_schema.CourierOrderListResponse(
            count=len(orders),
            total=total,
            pagination=build_pagination(page, limit, total),
            data=[courier_schema.CourierOrderResponse.model_validate(o) for o in orders],
        )

    async def list_all_orders(
        self,
        db: AsyncSession,
        page: int = 1,
        limit: int = 20,
        status_filter: Optional[str] = None,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        search: Optional[str] = None,
    ) -> courier_schema.CourierOrderListResponse:
        """
        Listado de administración con estadísticas por estado.

        Las estadísticas por estado respetan los filtros de fecha y búsqueda
        pero no el de estado, para que el panel muestre siempre el reparto.
        """
        filters = {"status": status_filter, "start_date": start_date, "end_date": end_date, "search": search}
        orders = await courier_crud.get_courier_orders(db, skip=page_to_skip(page, limit), limit=limit, **filters)
        total = await courier_crud.count_courier_orders(db, **filters)
        by_status = await courier_crud.count_by_status(db, **filters)

        stats = courier_schema.CourierOrderStats(
            total=total,
            **{s.value.lower(): by_status.get(s.value, 0) for s in courier_schema.CourierOrderStatus},
        )
        return courier_schema.CourierOrderListResponse(
            count=len(orders),
            total=total,
            stats=stats,
            pagination=build_pagination(page, limit, total),
            data=[courier_schema.CourierOrderResponse.model_validate(o) for o in orders],
        )

    async def update_status(
        self, db: AsyncSession, courier_order_id: int, new_status: courier_schema.CourierOrderStatus
    ) -> CourierOrder:
        db_order = await courier_crud.get_courier_order(db, courier_order_id)
        if not db_order:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Courier order with id {courier_order_id} not found."
            )
        logger.info(f"🔄 MENSAJERÍA: pedido {courier_order_id} {db_order.status} -> {new_status.value}")
        return await courier_crud.update_courier_order_status(db, db_order, new_status.value)

    async def delete_order(self, db: AsyncSession, courier_order_id: int) -> None:
        db_order = await courier_crud.get_courier_order(db, courier_order_id)
        if not db_order:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Courier order with id {courier_order_id} not found."
            )
        await courier_crud.delete_courier_order(db, db_order)


courier_service = CourierService()
