# backend/routes/cart.py
from typing import List
from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session
from database import get_db
from utils.tokenJWT import get_current_user
from utils.audit import write_log, client_ip
from utils.errors import to_http
from models.users import User
from models.cart import CartItem
from schemas.cart import CartAddItem, CartUpdateItem, CartOut, CartItemOut
from services.cart_store import CartStore, cart_total
from services.exceptions import StoreError

router = APIRouter(prefix="/cart", tags=["Cart"])

def _cart_to_out(lines: List[CartItem]) -> CartOut:
    items_out = []
    for it in lines:
        product = it.product
        price = float(product.price) if product else 0.0
        items_out.append(CartItemOut(
            id=it.id,
            product_id=it.product_id,
            name=product.name if product else "",
            image_url=product.image_url if product else None,
            size=it.selected_size,
            qty=it.quantity,
            unit_price=round(price, 2),
            line_total=round(price * it.quantity, 2),
            stock_quantity=product.stock_quantity if product else 0,
        ))
    # Total is always re-derived from the current lines
    return CartOut(items=items_out, total=float(cart_total(lines)))

def _fail(db: Session, user: User, request: Request, action: str, e: StoreError, meta: dict):
    write_log(db, user_id=user.id, action=action, resource="cart", status="FAIL",
              ip=client_ip(request), meta={**meta, "error": e.message})
    return to_http(e)

@router.get("", response_model=CartOut)
def get_cart(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return _cart_to_out(CartStore(db).lines(current_user.id))

@router.post("/add", response_model=CartOut)
def add_to_cart(
    payload: CartAddItem,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    store = CartStore(db)
    meta = {"product_id": payload.product_id, "size": payload.size, "qty": payload.qty}
    try:
        store.add(current_user.id, payload.product_id, payload.size, payload.qty)
    except StoreError as e:
        raise _fail(db, current_user, request, "CART_ADD", e, meta)

    out = _cart_to_out(store.lines(current_user.id))
    write_log(db, user_id=current_user.id, action="CART_ADD", resource="cart", status="SUCCESS",
              ip=client_ip(request), meta={**meta, "cart_items": len(out.items), "total": out.total})
    return out

@router.put("/items/{item_id}", response_model=CartOut)
def update_cart_item(
    item_id: int,
    payload: CartUpdateItem,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    store = CartStore(db)
    meta = {"item_id": item_id, "qty": payload.qty}
    try:
        store.set_quantity(current_user.id, item_id, payload.qty)
    except StoreError as e:
        raise _fail(db, current_user, request, "CART_UPDATE", e, meta)

    out = _cart_to_out(store.lines(current_user.id))
    write_log(db, user_id=current_user.id, action="CART_UPDATE", resource="cart", status="SUCCESS",
              ip=client_ip(request), meta={**meta, "total": out.total})
    return out

@router.delete("/items/{item_id}", response_model=CartOut)
def delete_cart_item(
    item_id: int,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    store = CartStore(db)
    try:
        store.remove(current_user.id, item_id)
    except StoreError as e:
        raise _fail(db, current_user, request, "CART_DELETE", e, {"item_id": item_id})

    out = _cart_to_out(store.lines(current_user.id))
    write_log(db, user_id=current_user.id, action="CART_DELETE", resource="cart", status="SUCCESS",
              ip=client_ip(request), meta={"item_id": item_id, "cart_items": len(out.items), "total": out.total})
    return out

@router.delete("", response_model=CartOut)
def clear_cart(
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    store = CartStore(db)
    try:
        removed = store.clear(current_user.id)
    except StoreError as e:
        raise _fail(db, current_user, request, "CART_CLEAR", e, {})

    write_log(db, user_id=current_user.id, action="CART_CLEAR", resource="cart", status="SUCCESS",
              ip=client_ip(request), meta={"removed": removed})
    return CartOut(items=[], total=0.0)
