# backend/ecommerce/schemas/category_schema.py

"""
Esquemas Pydantic para el modelo Category.

Patrón de esquemas utilizado:
- CategoryBase: Propiedades comunes compartidas
- CategoryCreate: Para crear nuevas categorías (POST)
- CategoryUpdate: Para actualizar categorías existentes (PUT)
- CategoryResponse: Para respuestas de la API (GET)
- CategoryTreeNode: Nodo del árbol jerárquico (GET /tree)
"""

from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .pagination_schema import Pagination

# ========================================
# ESQUEMA BASE
# ========================================

class CategoryBase(BaseModel):
    """Propiedades comunes compartidas entre esquemas de categoría."""
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    parent_id: Optional[int] = Field(default=None, ge=1)
    is_active: bool = True
    image_url: Optional[str] = None
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None
    display_order: int = 0

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Category name is required")
        return v.strip()

    @field_validator("image_url")
    @classmethod
    def image_url_is_url(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.startswith(("http://", "https://")):
            raise ValueError("image_url must be an http(s) URL")
        return v


# ========================================
# ESQUEMAS PARA OPERACIONES
# ========================================

class CategoryCreate(CategoryBase):
    """Esquema para crear una nueva categoría. El slug se deriva del nombre."""
    pass


class CategoryUpdate(CategoryBase):
    """Esquema para actualizar una categoría. Todos los campos son opcionales."""
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    is_active: Optional[bool] = None
    display_order: Optional[int] = None

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        if not v.strip():
            raise ValueError("Category name cannot be empty")
        return v.strip()


class CategoryActiveUpdate(BaseModel):
    """Cuerpo de PATCH /{id}/activate."""
    is_active: bool


# ========================================
# ESQUEMAS DE RESPUESTA
# ========================================

class CategorySummary(BaseModel):
    """Referencia mínima a una categoría (padre de otra, categoría de un producto...)."""
    category_id: int
    name: str
    slug: str

    model_config = ConfigDict(from_attributes=True)


class CategoryChild(CategorySummary):
    description: Optional[str] = None
    image_url: Optional[str] = None
    display_order: int = 0


class CategoryResponse(CategoryBase):
    """Esquema para las respuestas de la API al leer categorías."""
    category_id: int
    slug: str
    user_id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    parent: Optional[CategorySummary] = None

    model_config = ConfigDict(from_attributes=True)


class CategoryDetailResponse(CategoryResponse):
    """Categoría con sus hijos activos directos."""
    children: List[CategoryChild] = []


class CategoryStats(BaseModel):
    total: int
    active: int
    inactive: int
    with_parent: int
    root_categories: int


class CategoryListResponse(BaseModel):
    count: int
    total: int
    stats: CategoryStats
    pagination: Pagination
    data: List[CategoryResponse]


class CategoryTreeNode(BaseModel):
    """
    Nodo del árbol de categorías.

    Se construye en cada petición a partir de la lista plana y nunca se persiste.
    Los hijos están ordenados por (display_order, name).
    """
    category_id: int
    name: str
    slug: str
    description: Optional[str] = None
    image_url: Optional[str] = None
    display_order: int = 0
    children: List["CategoryTreeNode"] = []


class CategoryTreeResponse(BaseModel):
    count: int
    data: List[CategoryTreeNode]


class CategoryMessage(BaseModel):
    message: str
    data: Optional[CategoryResponse] = None


CategoryTreeNode.model_rebuild()
