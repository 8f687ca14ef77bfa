# backend/ecommerce/schemas/courier_schema.py
"""
Esquemas Pydantic para los pedidos de mensajería y las instituciones.
"""

from datetime import datetime
from typing import Optional, List
import enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .pagination_schema import Pagination
from .user_schema import UserSummary


class CourierOrderStatus(str, enum.Enum):
    """Estados posibles de un pedido de mensajería."""
    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"


class CourierOrderCreate(BaseModel):
    full_name: str = Field(..., description="Nombre completo del solicitante")
    phone_number: str = Field(..., description="Teléfono de contacto")
    address: str = Field(..., description="Dirección de recogida")
    institution: str = Field(..., description="Institución de destino")
    delivery_to: str = Field(..., description="Nombre del destinatario")
    description: Optional[str] = None

    @field_validator("full_name", "phone_number", "address", "institution", "delivery_to")
    @classmethod
    def not_blank(cls, v: str, info) -> str:
        if not v or not v.strip():
            raise ValueError(f"{info.field_name} is required")
        return v.strip()


class CourierOrderStatusUpdate(BaseModel):
    status: CourierOrderStatus


class CourierOrderResponse(BaseModel):
    courier_order_id: int
    full_name: str
    phone_number: str
    address: str
    institution: str
    delivery_to: str
    description: Optional[str] = None
    status: CourierOrderStatus
    user_id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    user: Optional[UserSummary] = None

    model_config = ConfigDict(from_attributes=True)


class CourierOrderCreated(BaseModel):
    message: str
    order_id: int
    data: CourierOrderResponse


class CourierOrderMessage(BaseModel):
    message: str
    data: Optional[CourierOrderResponse] = None


class CourierOrderStats(BaseModel):
    total: int
    pending: int
    processing: int
    delivered: int
    cancelled: int


class CourierOrderListResponse(BaseModel):
    count: int
    total: int
    stats: Optional[CourierOrderStats] = None
    pagination: Pagination
    data: List[CourierOrderResponse]


class InstitutionOption(BaseModel):
    """Institución reducida para listas desplegables."""
    id: int
    name: str
    code: str


class InstitutionListResponse(BaseModel):
    count: int
    data: List[InstitutionOption]
