from pydantic import BaseModel
from typing import List, Optional
from datetime import datetime

from models.order import OrderStatus


# Output schema for an individual order line item
class OrderItemOut(BaseModel):
    product_id: int
    product_name: str
    image_url: Optional[str] = None
    size: Optional[str] = None
    qty: int
    unit_price: float
    line_total: float


# Optional shipping details supplied at checkout
class ShippingAddress(BaseModel):
    street: str
    zip: str
    city: str
    country: Optional[str] = None


class OrderCreatePayload(BaseModel):
    shipping_address: Optional[ShippingAddress] = None


# Output schema representing the full order details
class OrderResponse(BaseModel):
    id: int
    user_id: int
    status: str
    total_amount: float
    shipping_address: Optional[dict] = None
    created_at: Optional[datetime] = None
    items: List[OrderItemOut]


# Schema for updating order status
class OrderStatusPatch(BaseModel):
    status: OrderStatus
