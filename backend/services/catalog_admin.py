# backend/services/catalog_admin.py
import logging
from typing import Optional

from sqlalchemy.orm import Session

from models.product import Product
from services.exceptions import ProductNotFound

logger = logging.getLogger(__name__)


def list_all_products(db: Session, include_inactive: bool = True):
    query = db.query(Product)
    if not include_inactive:
        query = query.filter(Product.is_active.is_(True))
    return query.order_by(Product.created_at.desc(), Product.id.desc()).all()


def _get(db: Session, product_id: int) -> Product:
    product = db.query(Product).filter(Product.id == product_id).first()
    if not product:
        raise ProductNotFound()
    return product


def create_product(db: Session, data: dict) -> Product:
    product = Product(**data)
    db.add(product)
    db.commit()
    db.refresh(product)
    logger.info("Product %s created: %s", product.id, product.name)
    return product


def update_product(db: Session, product_id: int, changes: dict) -> Product:
    product = _get(db, product_id)
    for field, value in changes.items():
        setattr(product, field, value)
    db.commit()
    db.refresh(product)
    return product


def set_active(db: Session, product_id: int, active: Optional[bool] = None) -> Product:
    """Activate or deactivate a product; ``None`` flips the current flag."""
    product = _get(db, product_id)
    product.is_active = (not product.is_active) if active is None else active
    db.commit()
    db.refresh(product)
    logger.info("Product %s %s", product.id, "activated" if product.is_active else "deactivated")
    return product
