# backend/routes/products.py
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.orm import Session

from database import get_db
from utils.tokenJWT import role_required
from utils.audit import write_log, client_ip
from utils.errors import to_http
from models.users import User
import schemas.product as product_schemas
from services import catalog_admin
from services.exceptions import StoreError

# Catalog management; every route requires the admin role
router = APIRouter(prefix="/admin/products", tags=["Products"])

admin_only = role_required("admin")


@router.get("", response_model=List[product_schemas.ProductOut])
def list_products(
    include_inactive: bool = Query(True),
    db: Session = Depends(get_db),
    current_user: User = Depends(admin_only),
):
    return catalog_admin.list_all_products(db, include_inactive=include_inactive)


@router.post("", response_model=product_schemas.ProductOut, status_code=status.HTTP_201_CREATED)
def create_product(
    payload: product_schemas.ProductCreate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(admin_only),
):
    product = catalog_admin.create_product(db, payload.model_dump())
    write_log(
        db, user_id=current_user.id, action="PRODUCT_CREATE", resource="products",
        status="SUCCESS", ip=client_ip(request), meta={"product_id": product.id, "name": product.name},
    )
    return product


@router.patch("/{product_id}", response_model=product_schemas.ProductOut)
def update_product(
    product_id: int,
    payload: product_schemas.ProductEditRequest,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(admin_only),
):
    changes = payload.model_dump(exclude_unset=True)
    try:
        product = catalog_admin.update_product(db, product_id, changes)
    except StoreError as e:
        raise to_http(e)
    write_log(
        db, user_id=current_user.id, action="PRODUCT_UPDATE", resource="products",
        status="SUCCESS", ip=client_ip(request), meta={"product_id": product_id, "fields": sorted(changes)},
    )
    return product


@router.post("/{product_id}/toggle-active", response_model=product_schemas.ProductOut)
def toggle_product_active(
    product_id: int,
    request: Request,
    payload: Optional[product_schemas.ProductActiveToggle] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(admin_only),
):
    try:
        product = catalog_admin.set_active(db, product_id, payload.is_active if payload else None)
    except StoreError as e:
        raise to_http(e)
    write_log(
        db, user_id=current_user.id, action="PRODUCT_TOGGLE", resource="products",
        status="SUCCESS", ip=client_ip(request), meta={"product_id": product_id, "is_active": product.is_active},
    )
    return product
