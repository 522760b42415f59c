# backend/routes/orders.py
from typing import List, Optional
from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from database import get_db
from utils.tokenJWT import get_current_user
from utils.audit import write_log, client_ip
from utils.errors import to_http
from models.users import User
from models.order import Order
from schemas.order import OrderResponse, OrderItemOut, OrderCreatePayload
from services import orders as order_reader
from services import role_gate
from services.checkout import CheckoutOrchestrator
from services.exceptions import StoreError

router = APIRouter(prefix="/orders", tags=["Orders"])

# Map Order model to OrderResponse schema
def _order_to_out(order: Order) -> OrderResponse:
    items: List[OrderItemOut] = []
    for it in order.items:
        product = it.product
        price = float(it.price)
        items.append(OrderItemOut(
            product_id=it.product_id,
            product_name=product.name if product else "Deleted product",
            image_url=product.image_url if product else None,
            size=it.selected_size,
            qty=it.quantity,
            unit_price=price,
            line_total=round(price * it.quantity, 2),
        ))
    return OrderResponse(
        id=order.id,
        user_id=order.user_id,
        status=order.status,
        total_amount=float(order.total_amount),
        shipping_address=order.shipping_address,
        created_at=order.created_at,
        items=items,
    )

# Turn the caller's cart into an order
@router.post("", response_model=OrderResponse, status_code=status.HTTP_201_CREATED)
def place_order(
    request: Request,
    payload: Optional[OrderCreatePayload] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    address = payload.shipping_address.model_dump() if payload and payload.shipping_address else None
    checkout = CheckoutOrchestrator(db)
    try:
        order = checkout.place_order(current_user.id, shipping_address=address)
    except StoreError as e:
        write_log(db, user_id=current_user.id, action="ORDER_PLACE", resource="orders", status="FAIL",
                  ip=client_ip(request), meta={"state": checkout.state.value, "error": e.message})
        raise to_http(e)

    write_log(db, user_id=current_user.id, action="ORDER_PLACE", resource="orders", status="SUCCESS",
              ip=client_ip(request), meta={"order_id": order.id, "total": float(order.total_amount)})
    return _order_to_out(order_reader.get_order(db, current_user.id, order.id))

# List the caller's orders, newest first
@router.get("", response_model=List[OrderResponse])
def list_my_orders(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return [_order_to_out(o) for o in order_reader.list_orders(db, current_user.id)]

# Get details of a specific order
@router.get("/{order_id}", response_model=OrderResponse)
def get_order_detail(
    order_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    try:
        order = order_reader.get_order(db, current_user.id, order_id, any_owner=role_gate.is_admin(current_user))
    except StoreError as e:
        raise to_http(e)
    return _order_to_out(order)
