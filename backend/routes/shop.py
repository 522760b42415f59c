from typing import Optional, List, Literal
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from database import get_db
from schemas.product import ProductOut
from services import catalog
from services.exceptions import StoreError
from utils.errors import to_http


router = APIRouter(
    prefix="/shop",
    tags=["Shop"]
)

# Distinct brands of active products, for the brand filter
@router.get("/brands", response_model=List[str])
def get_brands(db: Session = Depends(get_db)):
    return catalog.list_brands(db)

# Browsing the catalog does not require an account
@router.get("/products", response_model=List[ProductOut])
def list_products_for_shop(
    q: Optional[str] = Query(None, description="Substring of the name or brand"),
    brand: Optional[str] = Query(None),
    category: Optional[str] = Query(None),
    price_range: Optional[Literal["under-100", "100-200", "over-200"]] = Query(None),
    db: Session = Depends(get_db),
):
    return catalog.list_products(db, q=q, brand=brand, category=category, price_range=price_range)

@router.get("/products/{product_id}", response_model=ProductOut)
def get_product_for_shop(product_id: int, db: Session = Depends(get_db)):
    try:
        return catalog.get_product(db, product_id)
    except StoreError as e:
        raise to_http(e)
