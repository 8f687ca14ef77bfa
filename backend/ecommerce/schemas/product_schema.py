# backend/ecommerce/schemas/product_schema.py
"""
Esquemas Pydantic para el modelo Product.
"""

from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .category_schema import CategorySummary
from .pagination_schema import Pagination
from .user_schema import UserSummary

# ========================================
# ESQUEMA BASE
# ========================================

class ProductBase(BaseModel):
    """Propiedades comunes compartidas entre esquemas de producto."""
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    price: float = Field(..., gt=0)
    stock: int = Field(default=0, ge=0)
    image: Optional[str] = None
    category_id: Optional[int] = None

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Product name is required")
        return v.strip()


# ========================================
# ESQUEMAS PARA OPERACIONES
# ========================================

class ProductCreate(ProductBase):
    """Esquema para crear un nuevo producto."""
    pass


class ProductUpdate(BaseModel):
    """Esquema para actualizar un producto. Todos los campos son opcionales."""
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None
    price: Optional[float] = Field(default=None, gt=0)
    stock: Optional[int] = Field(default=None, ge=0)
    image: Optional[str] = None
    category_id: Optional[int] = None


# ========================================
# ESQUEMAS DE RESPUESTA
# ========================================

class ProductSummary(BaseModel):
    """Producto reducido, tal como aparece dentro de paquetes y pedidos."""
    product_id: int
    name: str
    price: float
    image: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class ProductResponse(ProductBase):
    """
    Esquema de respuesta para un producto, incluyendo relaciones anidadas
    como categoría y propietario.
    """
    product_id: int
    user_id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    category: Optional[CategorySummary] = None
    user: Optional[UserSummary] = None

    model_config = ConfigDict(from_attributes=True)


class ProductListResponse(BaseModel):
    count: int
    total: int
    pagination: Pagination
    data: List[ProductResponse]


class ProductMessage(BaseModel):
    message: str
    data: Optional[ProductResponse] = None
