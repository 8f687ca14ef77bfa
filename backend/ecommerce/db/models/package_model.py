# backend/ecommerce/db/models/package_model.py
"""
Modelos de paquetes (bundles): un conjunto de productos vendidos juntos
a un precio combinado distinto de la suma de sus partes.
"""

from sqlalchemy import Column, Integer, String, ForeignKey, Text, Numeric, Boolean, DateTime, JSON
from sqlalchemy.orm import relationship

from ecommerce.db.database import Base
from ecommerce.db.models.user_model import utcnow

class Package(Base):
    __tablename__ = "packages"

    package_id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False, index=True)
    description = Column(Text, nullable=True)
    price = Column(Numeric(10, 2), nullable=False)
    # Precio "antes" explícito; si es NULL se usa la suma de los items
    original_price = Column(Numeric(10, 2), nullable=True)
    image = Column(Text, nullable=True)
    category_id = Column(Integer, ForeignKey("categories.category_id", ondelete="SET NULL"), nullable=True, index=True)
    weight = Column(Numeric(10, 3), nullable=True)
    dimensions = Column(String(100), nullable=True)
    tags = Column(JSON, nullable=False, default=list)
    stock = Column(Integer, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    user_id = Column(Integer, ForeignKey("users.user_id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    category = relationship("Category")
    user = relationship("User")
    items = relationship(
        "PackageItem",
        back_populates="package",
        cascade="all, delete-orphan",
        order_by="PackageItem.item_id",
    )

    def __repr__(self):
        return f"<Package(id={self.package_id}, name='{self.name}', price={self.price})>"


class PackageItem(Base):
    __tablename__ = "package_items"

    item_id = Column(Integer, primary_key=True, index=True)
    package_id = Column(Integer, ForeignKey("packages.package_id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.product_id", ondelete="CASCADE"), nullable=False)
    quantity = Column(Integer, nullable=False, default=1)
    custom_price = Column(Numeric(10, 2), nullable=True)

    package = relationship("Package", back_populates="items")
    product = relationship("Product", back_populates="package_items")

    def __repr__(self):
        return f"<PackageItem(id={self.item_id}, package_id={self.package_id}, product_id={self.product_id})>"
