"""
Endpoints REST para operaciones CRUD de productos.
"""

from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from ecommerce.api import deps
from ecommerce.db.models.user_model import User
from ecommerce.schemas import product_schema
from ecommerce.services.product_service import product_service

router = APIRouter()


@router.get("/", response_model=product_schema.ProductListResponse)
async def read_products(
    db: AsyncSession = Depends(deps.get_db),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    category_id: Optional[int] = None,
    search: Optional[str] = None,
    sort_by: Literal["created_at", "price", "name"] = "created_at",
    sort_order: Literal["asc", "desc"] = "desc",
) -> product_schema.ProductListResponse:
    """Obtiene una lista de productos con filtros, ordenación y paginación."""
    return await product_service.list_products(
        db,
        page=page,
        limit=limit,
        category_id=category_id,
        search=search,
        sort_by=sort_by,
        sort_order=sort_order,
    )


@router.get("/{product_id}", response_model=product_schema.ProductResponse)
async def read_product(
    *,
    db: AsyncSession = Depends(deps.get_db),
    product_id: int,
) -> product_schema.ProductResponse:
    """Obtiene los detalles de un producto por su ID."""
    return await product_service.get_product_or_404(db, product_id)


@router.post("/", response_model=product_schema.ProductMessage, status_code=status.HTTP_201_CREATED)
async def create_product(
    *,
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
    product_in: product_schema.ProductCreate,
) -> product_schema.ProductMessage:
    """Crea un nuevo producto. El usuario autenticado queda como propietario."""
    product = await product_service.create_new_product(db, product_in, current_user)
    return product_schema.ProductMessage(
        message="Product created successfully",
        data=product_schema.ProductResponse.model_validate(product),
    )


@router.put("/{product_id}", response_model=product_schema.ProductMessage)
async def update_product(
    *,
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
    product_id: int,
    product_in: product_schema.ProductUpdate,
) -> product_schema.ProductMessage:
    """Actualiza un producto (propietario o administrador)."""
    product = await product_service.update_existing_product(db, product_id, product_in, current_user)
    return product_schema.ProductMessage(
        message="Product updated successfully",
        data=product_schema.ProductResponse.model_validate(product),
    )


@router.delete("/{product_id}", response_model=product_schema.ProductMessage)
async def delete_product(
    *,
    db: AsyncSession = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user),
    product_id: int,
) -> product_schema.ProductMessage:
    """Elimina un producto (solo administradores)."""
    await product_service.delete_existing_product(db, product_id, current_user)
    return product_schema.ProductMessage(message="Product deleted successfully")
