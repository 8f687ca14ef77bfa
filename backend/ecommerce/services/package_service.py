# backend/ecommerce/services/package_service.py
"""
Servicio para operaciones de negocio relacionadas con paquetes (bundles).

Un paquete agrupa varios productos con un precio conjunto. Este servicio
valida los productos referenciados, gestiona los items del paquete y compone
las respuestas con el resumen de precios calculado en services/pricing.py.
"""

import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession
from fastapi import HTTPException
from starlette import status

from ecommerce.db.models.package_model import Package, PackageItem
from ecommerce.crud import package_crud, product_crud
from ecommerce.schemas import package_schema
from ecommerce.schemas.category_schema import CategorySummary
from ecommerce.schemas.pagination_schema import build_pagination, page_to_skip
from ecommerce.schemas.user_schema import UserSummary
from ecommerce.services.pricing import compute_package_pricing, effective_unit_price, item_total

logger = logging.getLogger(__name__)


class PackageService:
    """
    Servicio para operaciones de negocio relacionadas con paquetes.

    Características:
    - Validación de productos al crear paquetes y añadir items
    - Precio efectivo por item (precio personalizado o de catálogo)
    - Resumen de descuento y ahorro por paquete
    """

    # ========================================
    # OPERACIONES DE CONSULTA
    # ========================================

    async def get_package_or_404(self, db: AsyncSession, package_id: int, active_only: bool = False) -> Package:
        db_package = await package_crud.get_package(db, package_id=package_id, active_only=active_only)
        if not db_package:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Package with id {package_id} not found."
            )
        return db_package

    async def list_packages(
        self,
        db: AsyncSession,
        page: int = 1,
        limit: int = 10,
        is_active: Optional[bool] = True,
        category_id: Optional[int] = None,
        min_price: Optional[float] = None,
        max_price: Optional[float] = None,
        search: Optional[str] = None,
        sort_by: str = "created_at",
        sort_order: str = "desc",
    ) -> package_schema.PackageListResponse:
        filters = {
            "is_active": is_active,
            "category_id": category_id,
            "min_price": min_price,
            "max_price": max_price,
            "search": search,
        }
        packages = await package_crud.get_packages(
            db,
            skip=page_to_skip(page, limit),
            limit=limit,
            sort_by=sort_by,
            sort_order=sort_order,
            **filters,
        )
        total = await package_crud.count_packages(db, **filters)

        data = [
            package_schema.PackageListItem(
                **package_schema.PackageResponse.model_validate(p).model_dump(),
                item_count=len(p.items),
            )
            for p in packages
        ]
        return package_schema.PackageListResponse(
            count=len(data),
            total=total,
            pagination=build_pagination(page, limit, total),
            data=data,
        )

    async def get_package_with_summary(self, db: AsyncSession, package_id: int) -> package_schema.PackageWithSummary:
        """
        Paquete con sus items valorados y el resumen de descuento.
        """
        db_package = await self.get_package_or_404(db, package_id)
        pricing = compute_package_pricing(db_package.price, db_package.original_price, db_package.items)

        items = [
            package_schema.PackageItemPriced(
                **package_schema.PackageItemResponse.model_validate(item).model_dump(),
                unit_price=float(effective_unit_price(item)),
                item_total=float(item_total(item)),
            )
            for item in db_package.items
        ]
        base = package_schema.PackageResponse.model_validate(db_package).model_dump(exclude={"items"})
        return package_schema.PackageWithSummary(
            **base,
            user=UserSummary.model_validate(db_package.user) if db_package.user else None,
            items=items,
            summary=package_schema.PackageSummary(**pricing.model_dump()),
        )

    async def get_package_details(self, db: AsyncSession, package_id: int) -> package_schema.PackageDetailsResponse:
        """
        Vista de cliente de un paquete activo: items formateados y ahorro
        respecto a comprar los productos por separado.
        """
        db_package = await self.get_package_or_404(db, package_id, active_only=True)

        items = [
            package_schema.PackageDetailsItem(
                product_id=item.product.product_id,
                name=item.product.name,
                description=item.product.description,
                price=float(effective_unit_price(item)),
                original_price=float(item.product.price),
                quantity=item.quantity,
                image=item.product.image,
                category=CategorySummary.model_validate(item.product.category) if item.product.category else None,
                total=float(item_total(item)),
            )
            for item in db_package.items
        ]

        # El ahorro se mide siempre contra la compra por separado
        pricing = compute_package_pricing(db_package.price, None, db_package.items)

        return package_schema.PackageDetailsResponse(
            package=package_schema.PackageDetailsInfo(
                package_id=db_package.package_id,
                name=db_package.name,
                description=db_package.description,
                price=float(db_package.price),
                original_price=float(db_package.original_price or pricing.items_total),
                image=db_package.image,
                weight=float(db_package.weight) if db_package.weight is not None else None,
                dimensions=db_package.dimensions,
                tags=db_package.tags or [],
                category=CategorySummary.model_validate(db_package.category) if db_package.category else None,
                stock=db_package.stock,
                is_active=db_package.is_active,
            ),
            items=items,
            summary=package_schema.PackageDetailsSummary(
                total_items=pricing.total_items,
                total_products=pricing.total_products,
                items_total=pricing.items_total,
                package_price=pricing.final_price,
                savings=pricing.discount,
                savings_percentage=pricing.discount_percentage,
                per_product_savings=pricing.per_product_savings,
            ),
        )

    # ========================================
    # OPERACIONES DE ESCRITURA CON LÓGICA DE NEGOCIO
    # ========================================

    async def create_new_package(
        self, db: AsyncSession, package_in: package_schema.PackageCreate, user_id: Optional[int]
    ) -> Package:
        """
        Crea un paquete con sus items. Todos los productos deben existir; se
        informa del primero que falte.
        """
        requested_ids = [item.product_id for item in package_in.items]
        existing_ids = set(await product_crud.get_existing_product_ids(db, requested_ids))
        for product_id in requested_ids:
            if product_id not in existing_ids:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail=f"Product with id {product_id} not found."
                )

        data = package_in.model_dump(exclude={"items"})
        items = [item.model_dump() for item in package_in.items]
        db_package = await package_crud.create_package(db, data, items, user_id=user_id)
        logger.info(f"📦 PAQUETE: {db_package.package_id} '{db_package.name}' creado con {len(items)} items")
        return db_package

    async def update_existing_package(
        self, db: AsyncSession, package_id: int, package_in: package_schema.PackageUpdate
    ) -> Package:
        db_package = await self.get_package_or_404(db, package_id)
        update_data = package_in.model_dump()
        if update_data.get("is_active") is None:
            update_data.pop("is_active", None)
        return await package_crud.update_package(db, db_package, update_data)

    async def add_item(
        self, db: AsyncSession, package_id: int, item_in: package_schema.PackageItemCreate
    ) -> PackageItem:
        await self.get_package_or_404(db, package_id)
        if not await product_crud.get_product(db, product_id=item_in.product_id):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Product with id {item_in.product_id} not found."
            )
        return await package_crud.add_package_item(db, package_id, item_in.model_dump())

    async def _get_item_in_package(self, db: AsyncSession, package_id: int, item_id: int) -> PackageItem:
        db_item = await package_crud.get_package_item(db, item_id=item_id)
        if not db_item or db_item.package_id != package_id:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Item {item_id} not found in package {package_id}."
            )
        return db_item

    async def update_item(
        self, db: AsyncSession, package_id: int, item_id: int, item_in: package_schema.PackageItemUpdate
    ) -> package_schema.PackageItemUpdateResponse:
        """
        Cambia la cantidad y/o el precio personalizado de un item y devuelve
        su precio efectivo y el total de la línea.
        """
        db_item = await self._get_item_in_package(db, package_id, item_id)

        update_data = item_in.model_dump(exclude_unset=True)
        if update_data.get("quantity") is None:
            update_data.pop("quantity", None)
        db_item = await package_crud.update_package_item(db, db_item, update_data)

        return package_schema.PackageItemUpdateResponse(
            message="Package item updated successfully",
            data=package_schema.PackageItemResponse.model_validate(db_item),
            item_price=float(effective_unit_price(db_item)),
            total_price=float(item_total(db_item)),
        )

    async def remove_item(self, db: AsyncSession, package_id: int, item_id: int) -> None:
        db_item = await self._get_item_in_package(db, package_id, item_id)
        await package_crud.delete_package_item(db, db_item)


# ========================================
# INSTANCIA SINGLETON DEL SERVICIO
# ========================================

package_service = PackageService()
