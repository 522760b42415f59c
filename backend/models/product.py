# backend/models/product.py
from sqlalchemy import Column, Integer, String, Numeric, Boolean, DateTime, JSON, CheckConstraint, func
from database import Base

# Model Product
# A single catalog item. Prices are fixed-point, stock never goes negative
# (enforced by the database), and deactivation is a soft flag.
class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False, index=True)
    description = Column(String)
    category = Column(String, nullable=False, default="shoes")
    brand = Column(String, index=True)

    price = Column(Numeric(10, 2), CheckConstraint("price >= 0"), nullable=False)

    # Available variants (sizes), e.g. ["7", "8", "9"]
    sizes = Column(JSON, nullable=False, default=list)

    stock_quantity = Column(Integer, CheckConstraint("stock_quantity >= 0"), nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True, index=True)

    image_url = Column(String, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
