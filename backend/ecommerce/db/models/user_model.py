# backend/ecommerce/db/models/user_model.py
"""
Se encarga de definir el modelo de usuario para la aplicación.
"""

from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.orm import relationship
from ecommerce.db.database import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    __tablename__ = "users"

    user_id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    name = Column(String(255), nullable=False)
    # Hash bcrypt, nunca la contraseña en claro
    password = Column(String(255), nullable=False)
    phone = Column(String(50), nullable=True)
    role = Column(String(20), nullable=False, default="USER")
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    products = relationship("Product", back_populates="user")
    orders = relationship("Order", back_populates="user")
    courier_orders = relationship("CourierOrder", back_populates="user")

    def __repr__(self):
        return f"<User(id={self.user_id}, email='{self.email}', role='{self.role}')>"
