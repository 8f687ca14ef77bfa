# backend/ecommerce/schemas/package_schema.py
"""
Esquemas Pydantic para paquetes (bundles) y sus items.
"""

from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .category_schema import CategorySummary
from .pagination_schema import Pagination
from .product_schema import ProductSummary
from .user_schema import UserSummary

# ========================================
# ITEMS DE PAQUETE
# ========================================

class PackageItemCreate(BaseModel):
    """Un producto dentro de un paquete."""
    product_id: int = Field(..., ge=1)
    quantity: int = Field(default=1, ge=1)
    custom_price: Optional[float] = Field(default=None, ge=0)


class PackageItemUpdate(BaseModel):
    quantity: Optional[int] = Field(default=None, ge=1)
    custom_price: Optional[float] = Field(default=None, ge=0)


class PackageItemResponse(BaseModel):
    item_id: int
    package_id: int
    product_id: int
    quantity: int
    custom_price: Optional[float] = None
    product: Optional[ProductSummary] = None

    model_config = ConfigDict(from_attributes=True)


class PackageItemPriced(PackageItemResponse):
    """Item con el precio efectivo y el total de la línea."""
    unit_price: float
    item_total: float


class PackageItemUpdateResponse(BaseModel):
    message: str
    data: PackageItemResponse
    item_price: float
    total_price: float


# ========================================
# PAQUETES
# ========================================

class PackageBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    price: float = Field(..., gt=0)
    original_price: Optional[float] = Field(default=None, gt=0)
    image: Optional[str] = None
    category_id: Optional[int] = None
    weight: Optional[float] = Field(default=None, gt=0)
    dimensions: Optional[str] = None
    tags: List[str] = []

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Package name is required")
        return v.strip()


class PackageCreate(PackageBase):
    """Esquema para crear un paquete con al menos un producto."""
    items: List[PackageItemCreate] = Field(..., min_length=1)


class PackageUpdate(PackageBase):
    """Actualización completa (PUT): name y price son obligatorios."""
    is_active: Optional[bool] = None
    stock: Optional[int] = Field(default=None, ge=0)


class PackageResponse(PackageBase):
    package_id: int
    stock: Optional[int] = None
    is_active: bool
    user_id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    category: Optional[CategorySummary] = None
    items: List[PackageItemResponse] = []

    model_config = ConfigDict(from_attributes=True)


class PackageListItem(PackageResponse):
    item_count: int


class PackageListResponse(BaseModel):
    count: int
    total: int
    pagination: Pagination
    data: List[PackageListItem]


class PackageSummary(BaseModel):
    total_items: int
    total_products: int
    original_total: float
    final_price: float
    discount: float
    discount_percentage: int
    savings: Optional[str] = None


class PackageWithSummary(PackageResponse):
    """Respuesta de GET /packages/{id}."""
    user: Optional[UserSummary] = None
    items: List[PackageItemPriced] = []
    summary: PackageSummary


class PackageDetailsItem(BaseModel):
    """Item formateado para el cliente."""
    product_id: int
    name: str
    description: Optional[str] = None
    price: float
    original_price: float
    quantity: int
    image: Optional[str] = None
    category: Optional[CategorySummary] = None
    total: float


class PackageDetailsSummary(BaseModel):
    total_items: int
    total_products: int
    items_total: float
    package_price: float
    savings: float
    savings_percentage: int
    per_product_savings: int


class PackageDetailsInfo(BaseModel):
    package_id: int
    name: str
    description: Optional[str] = None
    price: float
    original_price: float
    image: Optional[str] = None
    weight: Optional[float] = None
    dimensions: Optional[str] = None
    tags: List[str] = []
    category: Optional[CategorySummary] = None
    stock: Optional[int] = None
    is_active: bool


class PackageDetailsResponse(BaseModel):
    """Respuesta de GET /packages/{id}/details."""
    package: PackageDetailsInfo
    items: List[PackageDetailsItem]
    summary: PackageDetailsSummary


class PackageMessage(BaseModel):
    message: str
    data: Optional[PackageResponse] = None


class PackageItemMessage(BaseModel):
    message: str
    data: Optional[PackageItemResponse] = None
