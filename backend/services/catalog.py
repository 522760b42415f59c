# backend/services/catalog.py
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from models.product import Product
from services.exceptions import ProductNotFound

# Price brackets offered by the shop filter
PRICE_RANGES = ("under-100", "100-200", "over-200")

_LOW = Decimal("100")
_HIGH = Decimal("200")


def _escape_like(text: str) -> str:
    # Wildcards in user input match literally
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _price_filter(query, price_range: str):
    if price_range == "under-100":
        return query.filter(Product.price < _LOW)
    if price_range == "100-200":
        return query.filter(Product.price >= _LOW, Product.price <= _HIGH)
    if price_range == "over-200":
        return query.filter(Product.price > _HIGH)
    raise ValueError(f"Unknown price range: {price_range}")


def list_products(
    db: Session,
    q: Optional[str] = None,
    brand: Optional[str] = None,
    category: Optional[str] = None,
    price_range: Optional[str] = None,
) -> List[Product]:
    """Active products matching every given predicate, newest first."""
    query = db.query(Product).filter(Product.is_active.is_(True))

    if q:
        like = f"%{_escape_like(q.strip())}%"
        query = query.filter(or_(
            Product.name.ilike(like, escape="\\"),
            Product.brand.ilike(like, escape="\\"),
        ))

    if brand:
        query = query.filter(Product.brand == brand)

    if category:
        query = query.filter(Product.category == category)

    if price_range:
        query = _price_filter(query, price_range)

    return query.order_by(Product.created_at.desc(), Product.id.desc()).all()


def get_product(db: Session, product_id: int) -> Product:
    product = db.query(Product).filter(Product.id == product_id, Product.is_active.is_(True)).first()
    if not product:
        raise ProductNotFound()
    return product


def list_brands(db: Session) -> List[str]:
    rows = (
        db.query(Product.brand)
        .distinct()
        .filter(Product.is_active.is_(True), Product.brand != None, Product.brand != "")  # noqa: E711
        .order_by(Product.brand)
        .all()
    )
    return [r[0] for r in rows]
