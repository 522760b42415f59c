# backend/services/orders.py
from typing import List, Optional

from sqlalchemy.orm import Session, joinedload

from models.order import Order, OrderItem, OrderStatus, TERMINAL_STATUSES
from services.exceptions import InvalidStatusTransition, OrderNotFound, Unauthenticated


def _with_items(db: Session):
    return db.query(Order).options(joinedload(Order.items).joinedload(OrderItem.product))


def list_orders(db: Session, owner_id: Optional[int]) -> List[Order]:
    """The owner's orders with their lines, newest first."""
    if owner_id is None:
        raise Unauthenticated()
    return (
        _with_items(db)
        .filter(Order.user_id == owner_id)
        .order_by(Order.created_at.desc(), Order.id.desc())
        .all()
    )


def get_order(db: Session, owner_id: Optional[int], order_id: int, any_owner: bool = False) -> Order:
    if owner_id is None:
        raise Unauthenticated()
    order = _with_items(db).filter(Order.id == order_id).first()
    # Other owners' orders are reported as missing
    if not order or (order.user_id != owner_id and not any_owner):
        raise OrderNotFound()
    return order


def list_all_orders(db: Session, status: Optional[str] = None) -> List[Order]:
    query = _with_items(db)
    if status:
        query = query.filter(Order.status == status)
    return query.order_by(Order.created_at.desc(), Order.id.desc()).all()


def change_status(db: Session, order_id: int, new_status: OrderStatus) -> Order:
    order = db.query(Order).filter(Order.id == order_id).first()
    if not order:
        raise OrderNotFound()

    if order.status in TERMINAL_STATUSES and order.status != new_status.value:
        raise InvalidStatusTransition(order.status, new_status.value)

    order.status = new_status.value
    db.commit()
    return _with_items(db).filter(Order.id == order_id).first()
