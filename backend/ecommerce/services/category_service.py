# backend/ecommerce/services/category_service.py
"""
Servicio para operaciones de negocio relacionadas con categorías.

Este servicio se encarga de gestionar la lógica de negocio para el manejo de categorías,
incluyendo validaciones de duplicados, verificación de integridad referencial
padre-hijo y la construcción de vistas jerárquicas (árbol, productos de una
categoría y sus subcategorías directas).

La parte puramente jerárquica vive en services/category_tree.py; aquí solo
se orquesta: se obtiene la instantánea de la base de datos y se delega.
"""

import logging
import re
from typing import Any, Dict, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from fastapi import HTTPException
from starlette import status

from ecommerce.db.models.category_model import Category
from ecommerce.crud import category_crud, product_crud
from ecommerce.schemas import category_schema, product_schema
from ecommerce.schemas.pagination_schema import build_pagination, page_to_skip
from ecommerce.services.category_tree import (
    build_category_tree,
    collect_subtree_ids,
    resolve_descendant_ids,
)

logger = logging.getLogger(__name__)


def slugify(name: str) -> str:
    """
    Genera el slug de una categoría a partir de su nombre.

    Minúsculas, se eliminan los caracteres que no son de palabra (salvo
    espacios y guiones), los espacios pasan a '-' y se colapsan los '--'.
    """
    slug = name.lower()
    slug = re.sub(r"[^\w\s-]", "", slug)
    slug = re.sub(r"\s+", "-", slug)
    return re.sub(r"--+", "-", slug)


class CategoryService:
    """
    Servicio para operaciones de negocio relacionadas con categorías.

    Características:
    - Validación de nombres y slugs únicos
    - Verificación de integridad referencial padre-hijo (sin ciclos)
    - Árbol completo de categorías activas
    - Listado de productos de una categoría y sus hijos directos
    """

    # ========================================
    # OPERACIONES DE CONSULTA
    # ========================================

    async def get_category_or_404(self, db: AsyncSession, category_id: int) -> Category:
        db_category = await category_crud.get_category(db, category_id=category_id)
        if not db_category:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Category with id {category_id} not found."
            )
        return db_category

    async def list_categories(
        self,
        db: AsyncSession,
        page: int = 1,
        limit: int = 20,
        is_active: Optional[bool] = None,
        parent_id: Any = None,
        search: Optional[str] = None,
    ) -> category_schema.CategoryListResponse:
        """
        Listado paginado de categorías con estadísticas bajo los mismos filtros.

        parent_id admite el literal "null" para pedir solo categorías raíz.
        """
        filters = {"is_active": is_active, "parent_id": parent_id, "search": search}
        categories = await category_crud.get_categories(
            db, skip=page_to_skip(page, limit), limit=limit, **filters
        )
        stats = await category_crud.get_category_stats(db, **filters)

        return category_schema.CategoryListResponse(
            count=len(categories),
            total=stats["total"],
            stats=category_schema.CategoryStats(**stats),
            pagination=build_pagination(page, limit, stats["total"]),
            data=[category_schema.CategoryResponse.model_validate(c) for c in categories],
        )

    async def get_category_tree(self, db: AsyncSession) -> category_schema.CategoryTreeResponse:
        """
        Árbol completo de categorías activas.

        Las categorías inactivas (y por tanto toda su rama) no aparecen.
        CategoryCycleError se propaga: es un problema de integridad de datos
        que se traduce a 500 en el manejador global.
        """
        records = await category_crud.get_categories_snapshot(db, active_only=True)
        # La instantánea ya viene ordenada por la base de datos (su collation)
        tree = build_category_tree(records, presorted=True)
        return category_schema.CategoryTreeResponse(count=len(records), data=tree)

    async def get_category_detail(self, db: AsyncSession, category_id: int) -> category_schema.CategoryDetailResponse:
        """Categoría con su padre y sus hijos activos directos."""
        db_category = await self.get_category_or_404(db, category_id)
        children = await category_crud.get_subcategories(db, parent_id=category_id, active_only=True)

        # La relación children no está precargada: se valida primero la base
        base = category_schema.CategoryResponse.model_validate(db_category)
        return category_schema.CategoryDetailResponse(
            **base.model_dump(),
            children=[category_schema.CategoryChild.model_validate(c) for c in children],
        )

    async def get_products_by_category_slug(
        self,
        db: AsyncSession,
        slug: str,
        page: int = 1,
        limit: int = 20,
    ) -> product_schema.ProductListResponse:
        """
        Productos de una categoría (por slug) y de sus subcategorías activas directas.
        """
        db_category = await category_crud.get_category_by_slug(db, slug=slug)
        if not db_category:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Category with slug '{slug}' not found."
            )

        records = await category_crud.get_categories_snapshot(db, active_only=True)
        category_ids = resolve_descendant_ids(records, db_category.category_id)

        products = await product_crud.get_products(
            db, skip=page_to_skip(page, limit), limit=limit, category_ids=category_ids
        )
        total = await product_crud.count_products(db, category_ids=category_ids)

        return product_schema.ProductListResponse(
            count=len(products),
            total=total,
            pagination=build_pagination(page, limit, total),
            data=[product_schema.ProductResponse.model_validate(p) for p in products],
        )

    # ========================================
    # OPERACIONES DE ESCRITURA CON LÓGICA DE NEGOCIO
    # ========================================

    async def _ensure_parent_exists(self, db: AsyncSession, parent_id: Optional[int]) -> None:
        if parent_id is None:
            return
        parent = await category_crud.get_category(db, category_id=parent_id)
        if not parent:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Parent category with id {parent_id} not found."
            )

    async def create_new_category(
        self,
        db: AsyncSession,
        category_in: category_schema.CategoryCreate,
        user_id: Optional[int] = None,
    ) -> Category:
        """
        Crea una nueva categoría con validaciones completas de negocio.

        El slug se deriva del nombre; nombre y slug deben ser únicos y el padre,
        si se indica, debe existir. meta_title toma el nombre por defecto.
        """
        slug = slugify(category_in.name)

        existing = await category_crud.get_category_by_name_or_slug(db, name=category_in.name, slug=slug)
        if existing:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Category name or slug '{slug}' is already in use."
            )

        await self._ensure_parent_exists(db, category_in.parent_id)

        data = category_in.model_dump()
        data["slug"] = slug
        data["meta_title"] = category_in.meta_title or category_in.name
        data["user_id"] = user_id

        db_category = await category_crud.create_category(db, data)
        logger.info(f"🗂️ Categoría creada: {db_category.category_id} '{db_category.name}'")
        return db_category

    async def update_existing_category(
        self, db: AsyncSession, category_id: int, category_in: category_schema.CategoryUpdate
    ) -> Category:
        """
        Actualiza una categoría existente con validaciones de jerarquía.

        Un cambio de nombre regenera el slug. Un cambio de padre no puede
        apuntar a la propia categoría ni a ninguno de sus descendientes, ya que
        eso crearía un ciclo.
        """
        db_category = await self.get_category_or_404(db, category_id)
        update_data: Dict[str, Any] = category_in.model_dump(exclude_unset=True)

        if update_data.get("name") is not None:
            update_data["slug"] = slugify(update_data["name"])
            existing = await category_crud.get_category_by_name_or_slug(
                db, name=update_data["name"], slug=update_data["slug"], exclude_id=category_id
            )
            if existing:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail=f"Category name or slug '{update_data['slug']}' is already in use."
                )
        else:
            update_data.pop("name", None)

        # Columnas NOT NULL: un null explícito equivale a no tocarlas
        for key in ("is_active", "display_order"):
            if key in update_data and update_data[key] is None:
                update_data.pop(key)

        new_parent_id = update_data.get("parent_id")
        if new_parent_id is not None:
            if new_parent_id == category_id:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="A category cannot be its own parent."
                )

            # Todas las categorías, también las inactivas: una rama oculta sigue siendo rama
            records = await category_crud.get_categories_snapshot(db, active_only=False)
            if new_parent_id in collect_subtree_ids(records, category_id):
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="Cannot move a category under one of its own descendants."
                )

            await self._ensure_parent_exists(db, new_parent_id)

        return await category_crud.update_category(db, db_category, update_data)

    async def set_category_active(self, db: AsyncSession, category_id: int, is_active: bool) -> Category:
        db_category = await self.get_category_or_404(db, category_id)
        return await category_crud.update_category(db, db_category, {"is_active": is_active})

    async def delete_existing_category(self, db: AsyncSession, category_id: int) -> None:
        """
        Elimina una categoría si no tiene subcategorías activas.

        Los productos asociados quedan sin categoría y las subcategorías
        inactivas pasan a ser raíz (ON DELETE SET NULL).
        """
        db_category = await self.get_category_or_404(db, category_id)

        children = await category_crud.get_subcategories(db, parent_id=category_id, active_only=True)
        if children:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Cannot delete a category with active subcategories."
            )

        await category_crud.delete_category(db, db_category)
        logger.info(f"🗑️ Categoría eliminada: {category_id}")

# ========================================
# INSTANCIA SINGLETON DEL SERVICIO
# ========================================

# Instancia única del servicio para uso en endpoints
category_service = CategoryService()
