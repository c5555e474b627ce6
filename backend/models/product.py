# backend/models/product.py
from sqlalchemy import Column, Integer, String, Boolean, DateTime, Text, ForeignKey, CheckConstraint, func
from sqlalchemy.orm import relationship
from database import Base
from models.users import utcnow

# Model Product
# A single digital good listed in a category.
# Price is stored in minor currency units, stock is never negative.
class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    category_id = Column(
        Integer, ForeignKey("categories.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name = Column(String(200), nullable=False, index=True)
    description = Column(Text, nullable=True)

    price = Column(Integer, CheckConstraint("price >= 0"), nullable=False)
    image_url = Column(String, nullable=True)
    stock = Column(Integer, CheckConstraint("stock >= 0"), nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    category = relationship("Category", back_populates="products")
