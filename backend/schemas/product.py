# backend/schemas/product.py
from pydantic import BaseModel, Field, ConfigDict
from typing import Optional, List
from datetime import datetime


# Base configuration for ORM compatibility
class ORMBase(BaseModel):
    model_config = ConfigDict(from_attributes=True)


# Shared base attributes for product entities
class ProductBase(ORMBase):
    name: str
    description: Optional[str] = None
    category: str = "shoes"
    brand: Optional[str] = None
    price: float = Field(ge=0)
    sizes: List[str] = Field(default_factory=list)
    stock_quantity: int = Field(default=0, ge=0)
    image_url: Optional[str] = None


# Schema for creating a new product
class ProductCreate(ProductBase):
    is_active: bool = True


# Schema for partial product updates
class ProductEditRequest(ORMBase):
    """Schema for PATCH requests - all fields optional."""
    name: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    brand: Optional[str] = None
    price: Optional[float] = Field(None, ge=0)
    sizes: Optional[List[str]] = None
    stock_quantity: Optional[int] = Field(None, ge=0)
    image_url: Optional[str] = None
    is_active: Optional[bool] = None


# Full product representation
class ProductOut(ProductBase):
    id: int
    is_active: bool
    created_at: Optional[datetime] = None


class ProductActiveToggle(BaseModel):
    # Omit to flip the current flag
    is_active: Optional[bool] = None
