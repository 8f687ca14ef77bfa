# backend/ecommerce/db/models/courier_model.py
"""
Modelo de pedidos de mensajería (entrega a una institución).
"""

from sqlalchemy import Column, Integer, String, ForeignKey, Text, DateTime
from sqlalchemy.orm import relationship

from ecommerce.db.database import Base
from ecommerce.db.models.user_model import utcnow

class CourierOrder(Base):
    __tablename__ = "courier_orders"

    courier_order_id = Column(Integer, primary_key=True, index=True)
    full_name = Column(String(255), nullable=False)
    phone_number = Column(String(50), nullable=False, index=True)
    address = Column(Text, nullable=False)
    institution = Column(String(255), nullable=False)
    delivery_to = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    status = Column(String(20), nullable=False, default="PENDING", index=True)
    # Solo se rellena si el solicitante estaba autenticado
    user_id = Column(Integer, ForeignKey("users.user_id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, index=True)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    user = relationship("User", back_populates="courier_orders")

    def __repr__(self):
        return f"<CourierOrder(id={self.courier_order_id}, status='{self.status}')>"
