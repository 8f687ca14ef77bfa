# backend/ecommerce/services/product_service.py

"""
Capa de servicios para operaciones de negocio relacionadas con productos.

Esta capa implementa el patrón Service Layer para el dominio de productos,
proporcionando una abstracción de alto nivel que orquesta operaciones CRUD,
maneja validaciones de negocio y aplica las reglas de propiedad.

Responsabilidades principales:
- Listados paginados con filtro por categoría, búsqueda y ordenación
- Validación de la categoría referenciada
- Reglas de propiedad: solo el propietario o un admin modifica, solo un admin borra
"""

import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession
from fastapi import HTTPException
from starlette import status

from ecommerce.db.models.product_model import Product
from ecommerce.db.models.user_model import User
from ecommerce.crud import category_crud, product_crud
from ecommerce.schemas import product_schema
from ecommerce.schemas.pagination_schema import build_pagination, page_to_skip

# Configurar logger
logger = logging.getLogger(__name__)

# Límite de seguridad para consultas paginadas
MAX_PAGE_SIZE = 100


class ProductService:
    """
    Servicio para operaciones de negocio relacionadas con productos.

    Características principales:
    - Gestión de la relación opcional con categorías
    - Control de permisos por propietario / rol
    - Respuestas paginadas homogéneas con el resto de la API
    """

    # ========================================
    # OPERACIONES DE CONSULTA
    # ========================================

    async def get_product_or_404(self, db: AsyncSession, product_id: int) -> Product:
        product = await product_crud.get_product(db, product_id=product_id)
        if not product:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Product with id {product_id} not found."
            )
        return product

    async def list_products(
        self,
        db: AsyncSession,
        page: int = 1,
        limit: int = 20,
        category_id: Optional[int] = None,
        search: Optional[str] = None,
        sort_by: str = "created_at",
        sort_order: str = "desc",
    ) -> product_schema.ProductListResponse:
        """
        Obtiene una lista filtrada y paginada de productos.
        """
        limit = min(limit, MAX_PAGE_SIZE)
        category_ids = [category_id] if category_id is not None else None

        products = await product_crud.get_products(
            db,
            skip=page_to_skip(page, limit),
            limit=limit,
            category_ids=category_ids,
            search=search,
            sort_by=sort_by,
            sort_order=sort_order,
        )
        total = await product_crud.count_products(db, category_ids=category_ids, search=search)

        return product_schema.ProductListResponse(
            count=len(products),
            total=total,
            pagination=build_pagination(page, limit, total),
            data=[product_schema.ProductResponse.model_validate(p) for p in products],
        )

    # ========================================
    # OPERACIONES DE ESCRITURA CON LÓGICA DE NEGOCIO
    # ========================================

    async def _ensure_category_exists(self, db: AsyncSession, category_id: Optional[int]) -> None:
        if category_id is None:
            return
        if not await category_crud.get_category(db, category_id=category_id):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Category with id {category_id} not found."
            )

    async def create_new_product(
        self, db: AsyncSession, product_in: product_schema.ProductCreate, current_user: User
    ) -> Product:
        """
        Crea un nuevo producto cuyo propietario es el usuario autenticado.
        """
        await self._ensure_category_exists(db, product_in.category_id)
        product = await product_crud.create_product(db, product_in.model_dump(), user_id=current_user.user_id)
        logger.info(f"🆕 PRODUCTO: {product.product_id} '{product.name}' creado por {current_user.email}")
        return product

    async def update_existing_product(
        self,
        db: AsyncSession,
        product_id: int,
        product_in: product_schema.ProductUpdate,
        current_user: User,
    ) -> Product:
        """
        Actualiza un producto. Solo el propietario o un administrador pueden hacerlo.
        """
        db_product = await self.get_product_or_404(db, product_id)

        if db_product.user_id != current_user.user_id and current_user.role != "ADMIN":
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="You are not allowed to update this product."
            )

        update_data = product_in.model_dump(exclude_unset=True)
        # name, price y stock son NOT NULL
        for key in ("name", "price", "stock"):
            if key in update_data and update_data[key] is None:
                update_data.pop(key)
        if "category_id" in update_data:
            await self._ensure_category_exists(db, update_data["category_id"])

        return await product_crud.update_product(db, db_product, update_data)

    async def delete_existing_product(self, db: AsyncSession, product_id: int, current_user: User) -> None:
        """
        Elimina un producto. Operación reservada a administradores.
        """
        db_product = await self.get_product_or_404(db, product_id)

        if current_user.role != "ADMIN":
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Only administrators can delete products."
            )

        await product_crud.delete_product(db, db_product)
        logger.info(f"🗑️ PRODUCTO: {product_id} eliminado por {current_user.email}")


# ========================================
# INSTANCIA SINGLETON DEL SERVICIO
# ========================================

product_service = ProductService()
