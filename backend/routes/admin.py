# backend/routes/admin.py
from fastapi import APIRouter, Depends, HTTPException, status, Query, Request
from typing import List, Optional
from sqlalchemy.orm import Session
from database import get_db
from models.users import User
from models.order import OrderStatus
from utils.tokenJWT import role_required
from utils.audit import write_log, client_ip
from utils.errors import to_http
from schemas.user import RoleUpdate, UserResponse
from schemas.order import OrderResponse, OrderStatusPatch
from services import orders as order_reader
from services import role_gate
from services.exceptions import StoreError
from routes.orders import _order_to_out

router = APIRouter(prefix="/admin", tags=["Admin"])

admin_only = role_required("admin")


# List every user's orders (back-office view)
@router.get("/orders", response_model=List[OrderResponse])
def list_all_orders(
    status_filter: Optional[OrderStatus] = Query(None, alias="status"),
    db: Session = Depends(get_db),
    current_user: User = Depends(admin_only),
):
    orders = order_reader.list_all_orders(db, status_filter.value if status_filter else None)
    return [_order_to_out(o) for o in orders]


# Back-office status change; terminal orders are frozen
@router.patch("/orders/{order_id}/status", response_model=OrderResponse)
def update_order_status(
    order_id: int,
    payload: OrderStatusPatch,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(admin_only),
):
    try:
        order = order_reader.change_status(db, order_id, payload.status)
    except StoreError as e:
        raise to_http(e)

    write_log(db, user_id=current_user.id, action="ORDER_STATUS_CHANGE", resource="orders", status="SUCCESS",
              ip=client_ip(request), meta={"order_id": order_id, "new": payload.status.value})
    return _order_to_out(order)


# Retrieve all users
@router.get("/users", response_model=List[UserResponse])
def get_all_users(
    q: Optional[str] = Query(None, description="Search by e-mail"),
    db: Session = Depends(get_db),
    current_user: User = Depends(admin_only),
):
    query = db.query(User)
    if q:
        query = query.filter(User.email.ilike(f"%{q.lower()}%"))
    return query.order_by(User.id.asc()).all()


# Update user role
@router.put("/users/{user_id}/role", response_model=UserResponse)
def update_user_role(
    user_id: int,
    new_role: RoleUpdate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(admin_only),
):
    # Prevent an admin from locking themselves out
    if user_id == current_user.id and new_role.role != role_gate.ADMIN:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="You cannot revoke your own admin role")

    user = role_gate.assign_role(db, user_id, new_role.role)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    write_log(db, user_id=current_user.id, action="ROLE_CHANGE", resource="users", status="SUCCESS",
              ip=client_ip(request), meta={"target_user_id": user.id, "role": user.role})
    return user
