from pydantic import BaseModel, Field
from typing import List, Optional

# Request schema for adding an item to the cart
class CartAddItem(BaseModel):
    product_id: int
    size: Optional[str] = None
    qty: int = Field(default=1, ge=1)

# Request schema for updating cart item quantity.
# Lower bound is checked by the cart store so the error matches every caller.
class CartUpdateItem(BaseModel):
    qty: int

# Response schema for a single cart line item
class CartItemOut(BaseModel):
    id: int
    product_id: int
    name: str
    image_url: Optional[str] = None
    size: Optional[str] = None
    qty: int
    unit_price: float
    line_total: float
    stock_quantity: int

# Response schema for the entire cart summary
class CartOut(BaseModel):
    items: List[CartItemOut]
    total: float
