"""
Endpoints REST para operaciones CRUD de categorías.

Incluye el árbol jerárquico completo y el listado de productos de una
categoría (por slug) junto con sus subcategorías directas.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from ecommerce.api import deps
from ecommerce.db.models.user_model import User
from ecommerce.schemas import category_schema, product_schema
from ecommerce.services.category_service import category_service

router = APIRouter()
logger = logging.getLogger(__name__)

# ========================================
# CONSULTAS PÚBLICAS
# ========================================

@router.get("/", response_model=category_schema.CategoryListResponse)
async def read_categories(
    db: AsyncSession = Depends(deps.get_db),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    is_active: Optional[bool] = None,
    parent_id: Optional[str] = Query(None, pattern=r"^(null|\d+)$", description="ID del padre o 'null' para raíces"),
    search: Optional[str] = None,
) -> category_schema.CategoryListResponse:
    """Obtiene una lista de categorías con filtros, estadísticas y paginación."""
    return await category_service.list_categories(
        db, page=page, limit=limit, is_active=is_active, parent_id=parent_id, search=search
    )


@router.get("/tree", response_model=category_schema.CategoryTreeResponse)
async def read_category_tree(db: AsyncSession = Depends(deps.get_db)) -> category_schema.CategoryTreeResponse:
    """Árbol completo de categorías activas, hermanos ordenados por (display_order, name)."""
    return await category_service.get_category_tree(db)


@router.get("/slug/{slug}/products", response_model=product_schema.ProductListResponse)
async def read_products_by_category_slug(
    *,
    db: AsyncSession = Depends(deps.get_db),
    slug: str,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
) -> product_schema.ProductListResponse:
    """Productos de la categoría y de sus subcategorías activas directas."""
    return await category_service.get_products_by_category_slug(db, slug=slug, page=page, limit=limit)


@router.get("/{category_id}", response_model=category_schema.CategoryDetailResponse)
async def read_category(
    *,
    db: AsyncSession = Depends(deps.get_db),
    category_id: int,
) -> category_schema.CategoryDetailResponse:
    """Obtiene los detalles de una categoría específica por su ID."""
    return await category_service.get_category_detail(db, category_id=category_id)

# ========================================
# ADMINISTRACIÓN
# ========================================

@router.post("/", response_model=category_schema.CategoryMessage, status_code=status.HTTP_201_CREATED)
async def create_category(
    *,
    db: AsyncSession = Depends(deps.get_db),
    admin: User = Depends(deps.require_admin),
    category_in: category_schema.CategoryCreate,
) -> category_schema.CategoryMessage:
    """Crea una nueva categoría en el sistema."""
    category = await category_service.create_new_category(db, category_in, user_id=admin.user_id)
    return category_schema.CategoryMessage(
        message="Category created successfully",
        data=category_schema.CategoryResponse.model_validate(category),
    )


@router.put("/{category_id}", response_model=category_schema.CategoryMessage)
async def update_category(
    *,
    db: AsyncSession = Depends(deps.get_db),
    admin: User = Depends(deps.require_admin),
    category_id: int,
    category_in: category_schema.CategoryUpdate,
) -> category_schema.CategoryMessage:
    """Actualiza una categoría existente."""
    category = await category_service.update_existing_category(db, category_id, category_in)
    logger.info(f"✏️ CATEGORÍA: {category_id} actualizada por {admin.email}")
    return category_schema.CategoryMessage(
        message="Category updated successfully",
        data=category_schema.CategoryResponse.model_validate(category),
    )


@router.delete("/{category_id}", response_model=category_schema.CategoryMessage)
async def delete_category(
    *,
    db: AsyncSession = Depends(deps.get_db),
    admin: User = Depends(deps.require_admin),
    category_id: int,
) -> category_schema.CategoryMessage:
    """Elimina una categoría del sistema."""
    await category_service.delete_existing_category(db, category_id)
    return category_schema.CategoryMessage(message="Category deleted successfully")


@router.patch("/{category_id}/activate", response_model=category_schema.CategoryMessage)
async def set_category_active(
    *,
    db: AsyncSession = Depends(deps.get_db),
    admin: User = Depends(deps.require_admin),
    category_id: int,
    body: category_schema.CategoryActiveUpdate,
) -> category_schema.CategoryMessage:
    """Activa o desactiva una categoría."""
    category = await category_service.set_category_active(db, category_id, body.is_active)
    state = "activated" if category.is_active else "deactivated"
    return category_schema.CategoryMessage(
        message=f"Category {state} successfully",
        data=category_schema.CategoryResponse.model_validate(category),
    )
