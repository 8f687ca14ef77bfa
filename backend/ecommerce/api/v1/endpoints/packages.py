"""
Endpoints REST para paquetes (bundles de productos) y sus items.
"""

import logging
from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from ecommerce.api import deps
from ecommerce.db.models.user_model import User
from ecommerce.schemas import package_schema
from ecommerce.services.package_service import package_service

router = APIRouter()
logger = logging.getLogger(__name__)

# ========================================
# CONSULTAS PÚBLICAS
# ========================================

@router.get("/", response_model=package_schema.PackageListResponse)
async def read_packages(
    db: AsyncSession = Depends(deps.get_db),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    category_id: Optional[int] = None,
    is_active: Optional[bool] = True,
    min_price: Optional[float] = Query(None, ge=0),
    max_price: Optional[float] = Query(None, ge=0),
    search: Optional[str] = None,
    sort_by: Literal["created_at", "price", "name"] = "created_at",
    sort_order: Literal["asc", "desc"] = "desc",
) -> package_schema.PackageListResponse:
    """Lista de paquetes con filtros; cada entrada incluye item_count."""
    return await package_service.list_packages(
        db,
        page=page,
        limit=limit,
        is_active=is_active,
        category_id=category_id,
        min_price=min_price,
        max_price=max_price,
        search=search,
        sort_by=sort_by,
        sort_order=sort_order,
    )


@router.get("/{package_id}", response_model=package_schema.PackageWithSummary)
async def read_package(
    *,
    db: AsyncSession = Depends(deps.get_db),
    package_id: int,
) -> package_schema.PackageWithSummary:
    """Paquete con items valorados y resumen de descuento."""
    return await package_service.get_package_with_summary(db, package_id)


@router.get("/{package_id}/details", response_model=package_schema.PackageDetailsResponse)
async def read_package_details(
    *,
    db: AsyncSession = Depends(deps.get_db),
    package_id: int,
) -> package_schema.PackageDetailsResponse:
    """Vista de cliente de un paquete activo."""
    return await package_service.get_package_details(db, package_id)

# ========================================
# ADMINISTRACIÓN
# ========================================

@router.post("/", response_model=package_schema.PackageMessage, status_code=status.HTTP_201_CREATED)
async def create_package(
    *,
    db: AsyncSession = Depends(deps.get_db),
    admin: User = Depends(deps.require_admin),
    package_in: package_schema.PackageCreate,
) -> package_schema.PackageMessage:
    """Crea un paquete con sus productos."""
    package = await package_service.create_new_package(db, package_in, user_id=admin.user_id)
    return package_schema.PackageMessage(
        message="Package created successfully",
        data=package_schema.PackageResponse.model_validate(package),
    )


@router.put("/{package_id}", response_model=package_schema.PackageMessage)
async def update_package(
    *,
    db: AsyncSession = Depends(deps.get_db),
    admin: User = Depends(deps.require_admin),
    package_id: int,
    package_in: package_schema.PackageUpdate,
) -> package_schema.PackageMessage:
    """Actualización completa de los datos de un paquete (sin sus items)."""
    package = await package_service.update_existing_package(db, package_id, package_in)
    logger.info(f"✏️ PAQUETE: {package_id} actualizado por {admin.email}")
    return package_schema.PackageMessage(
        message="Package updated successfully",
        data=package_schema.PackageResponse.model_validate(package),
    )


@router.post("/{package_id}/items", response_model=package_schema.PackageItemMessage, status_code=status.HTTP_201_CREATED)
async def add_package_item(
    *,
    db: AsyncSession = Depends(deps.get_db),
    admin: User = Depends(deps.require_admin),
    package_id: int,
    item_in: package_schema.PackageItemCreate,
) -> package_schema.PackageItemMessage:
    """Añade un producto a un paquete."""
    item = await package_service.add_item(db, package_id, item_in)
    return package_schema.PackageItemMessage(
        message="Product added to package",
        data=package_schema.PackageItemResponse.model_validate(item),
    )


@router.put("/{package_id}/items/{item_id}", response_model=package_schema.PackageItemUpdateResponse)
async def update_package_item(
    *,
    db: AsyncSession = Depends(deps.get_db),
    admin: User = Depends(deps.require_admin),
    package_id: int,
    item_id: int,
    item_in: package_schema.PackageItemUpdate,
) -> package_schema.PackageItemUpdateResponse:
    """Cambia la cantidad o el precio personalizado de un item."""
    return await package_service.update_item(db, package_id, item_id, item_in)


@router.delete("/{package_id}/items/{item_id}", response_model=package_schema.PackageItemMessage)
async def delete_package_item(
    *,
    db: AsyncSession = Depends(deps.get_db),
    admin: User = Depends(deps.require_admin),
    package_id: int,
    item_id: int,
) -> package_schema.PackageItemMessage:
    """Quita un producto de un paquete."""
    await package_service.remove_item(db, package_id, item_id)
    return package_schema.PackageItemMessage(message="Product removed from package")
