# backend/ecommerce/schemas/order_schema.py
"""
Se encarga de definir los esquemas Pydantic para el historial de pedidos,
el seguimiento y las devoluciones.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Dict, List, Optional
from datetime import datetime
import enum

from .pagination_schema import Pagination
from .product_schema import ProductSummary
from .user_schema import UserSummary

class OrderStatus(str, enum.Enum):
    """Define los posibles estados de una orden."""
    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"

class OrderItem(BaseModel):
    """Esquema de respuesta para un item de orden."""
    item_id: int
    order_id: int
    product_id: int
    quantity: int
    price: float
    product: Optional[ProductSummary] = None

    model_config = ConfigDict(from_attributes=True)

class OrderItemWithSubtotal(OrderItem):
    subtotal: float

class Order(BaseModel):
    """Esquema completo de respuesta para una orden."""
    order_id: int
    order_number: str
    user_id: int
    status: OrderStatus
    total_amount: float
    shipping_address: Optional[str] = None
    payment_status: str
    created_at: datetime
    updated_at: Optional[datetime] = None
    items: List[OrderItem] = []

    model_config = ConfigDict(from_attributes=True)

class OrderHistoryEntry(Order):
    total_items: int

class OrderHistoryStats(BaseModel):
    total_orders: int
    by_status: Dict[str, int]

class OrderHistoryResponse(BaseModel):
    count: int
    total: int
    stats: OrderHistoryStats
    pagination: Pagination
    data: List[OrderHistoryEntry]

class OrderDetails(Order):
    """Detalle de una orden con totales calculados."""
    user: Optional[UserSummary] = None
    items: List[OrderItemWithSubtotal] = []
    items_count: int
    total_quantity: int

class StatusHistoryEntry(BaseModel):
    status: str
    date: datetime
    description: str

class OrderTracking(BaseModel):
    order_id: int
    order_number: str
    status: OrderStatus
    created_at: datetime
    updated_at: Optional[datetime] = None
    total_amount: float
    shipping_address: Optional[str] = None
    payment_status: str
    status_history: List[StatusHistoryEntry]
    estimated_delivery: Optional[datetime] = None
    current_status: str

class ReturnRequestCreate(BaseModel):
    reason: str = Field(..., description="Motivo de la devolución")
    comments: Optional[str] = None

    @field_validator("reason")
    @classmethod
    def validate_reason(cls, v):
        if not v or not v.strip():
            raise ValueError('The return reason is required')
        return v.strip()

class ReturnRequestResponse(BaseModel):
    return_id: int
    order_id: int
    reason: str
    comments: Optional[str] = None
    status: str
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

class ReturnRequestMessage(BaseModel):
    message: str
    data: ReturnRequestResponse

class OrderStatsResponse(BaseModel):
    """Estadísticas agregadas del historial de un usuario."""
    total_orders: int
    by_status: Dict[str, int]
    total_spent: float
    total_items: int
