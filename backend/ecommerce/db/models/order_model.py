# backend/ecommerce/db/models/order_model.py
"""
Este archivo contiene el modelo de pedido para la aplicación.
"""

from sqlalchemy import (
    Column, Integer, String, DateTime, Numeric, ForeignKey, Text
)
from sqlalchemy.orm import relationship

from ecommerce.db.database import Base
from ecommerce.db.models.user_model import utcnow

class Order(Base):
    __tablename__ = "orders"

    order_id = Column(Integer, primary_key=True, index=True)
    order_number = Column(String(50), unique=True, index=True, nullable=False)
    user_id = Column(Integer, ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False, index=True)
    status = Column(String(20), nullable=False, default="PENDING")
    total_amount = Column(Numeric(10, 2), nullable=False)
    shipping_address = Column(Text, nullable=True)
    payment_status = Column(String(20), nullable=False, default="PENDING")
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    items = relationship("OrderItem", back_populates="order", cascade="all, delete-orphan", order_by="OrderItem.item_id")
    user = relationship("User", back_populates="orders")
    return_requests = relationship("ReturnRequest", back_populates="order", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Order(id={self.order_id}, number='{self.order_number}', status='{self.status}')>"


class OrderItem(Base):
    __tablename__ = "order_items"

    item_id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.order_id", ondelete="CASCADE"), nullable=False)
    product_id = Column(Integer, ForeignKey("products.product_id"), nullable=False)
    quantity = Column(Integer, nullable=False)
    # Precio en el momento de la compra
    price = Column(Numeric(10, 2), nullable=False)

    order = relationship("Order", back_populates="items")
    product = relationship("Product")

    def __repr__(self):
        return f"<OrderItem(id={self.item_id}, order_id={self.order_id}, product_id={self.product_id})>"


class ReturnRequest(Base):
    __tablename__ = "return_requests"

    return_id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.order_id", ondelete="CASCADE"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False)
    reason = Column(Text, nullable=False)
    comments = Column(Text, nullable=True)
    status = Column(String(30), nullable=False, default="PENDING_REVIEW")
    created_at = Column(DateTime(timezone=True), default=utcnow)

    order = relationship("Order", back_populates="return_requests")
