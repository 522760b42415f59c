# backend/services/cart_store.py
import logging
from contextlib import contextmanager
from decimal import Decimal
from typing import Iterable, List, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from models.cart import CartItem
from models.product import Product
from services.exceptions import (
    CartLineNotFound, InvalidQuantity, InvalidVariant, ProductNotFound,
    RemoteFailure, StockExhausted, Unauthenticated,
)

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")


def cart_total(lines: Iterable[CartItem]) -> Decimal:
    """Sum of price * quantity over the lines, at the products' current prices."""
    total = sum((Decimal(line.product.price) * line.quantity for line in lines if line.product), Decimal("0"))
    return total.quantize(CENT)


def _require_owner(owner_id: Optional[int]) -> int:
    if owner_id is None:
        raise Unauthenticated()
    return owner_id


def _normalize_size(size: Optional[str]) -> Optional[str]:
    if size is None:
        return None
    size = size.strip()
    return size or None


class CartStore:
    """Per-owner cart lines keyed by (product, size).

    Every method takes the caller's id explicitly; lines owned by someone
    else behave exactly like missing lines.
    """

    def __init__(self, db: Session):
        self.db = db

    @contextmanager
    def _committing(self):
        try:
            yield
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("Cart mutation failed: %s", e)
            raise RemoteFailure() from e

    def lines(self, owner_id: Optional[int]) -> List[CartItem]:
        owner_id = _require_owner(owner_id)
        return (
            self.db.query(CartItem)
            .options(joinedload(CartItem.product))
            .filter(CartItem.user_id == owner_id)
            .order_by(CartItem.created_at.asc(), CartItem.id.asc())
            .all()
        )

    def _line(self, owner_id: int, line_id: int) -> CartItem:
        line = self.db.query(CartItem).filter(CartItem.id == line_id, CartItem.user_id == owner_id).first()
        if not line:
            raise CartLineNotFound()
        return line

    def _matching(self, owner_id: int, product_id: int, size: Optional[str]) -> Optional[CartItem]:
        size_filter = CartItem.selected_size.is_(None) if size is None else CartItem.selected_size == size
        return self.db.query(CartItem).filter(
            CartItem.user_id == owner_id, CartItem.product_id == product_id, size_filter
        ).first()

    def _insert(self, owner_id: int, product: Product, size: Optional[str], quantity: int) -> Optional[CartItem]:
        """New line, or None when a concurrent add already created it."""
        line = CartItem(user_id=owner_id, product_id=product.id, quantity=quantity, selected_size=size)
        self.db.add(line)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            logger.info("Cart line for user %s, product %s already exists", owner_id, product.id)
            return None
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("Cart mutation failed: %s", e)
            raise RemoteFailure() from e
        self.db.refresh(line)
        return line

    def add(self, owner_id: Optional[int], product_id: int, size: Optional[str] = None, quantity: int = 1) -> CartItem:
        owner_id = _require_owner(owner_id)
        if quantity < 1:
            raise InvalidQuantity()

        product = self.db.query(Product).filter(Product.id == product_id, Product.is_active.is_(True)).first()
        if not product:
            raise ProductNotFound()

        size = _normalize_size(size)
        if product.sizes and size not in product.sizes:
            raise InvalidVariant()

        line = self._matching(owner_id, product.id, size)
        if line is None:
            if quantity > product.stock_quantity:
                raise StockExhausted(product.id, product.stock_quantity, quantity, product.name)
            created = self._insert(owner_id, product, size, quantity)
            if created is not None:
                return created
            line = self._matching(owner_id, product.id, size)
            if line is None:
                raise RemoteFailure()

        new_qty = line.quantity + quantity
        if new_qty > product.stock_quantity:
            raise StockExhausted(product.id, product.stock_quantity, new_qty, product.name)

        with self._committing():
            line.quantity = new_qty
        self.db.refresh(line)
        return line

    def set_quantity(self, owner_id: Optional[int], line_id: int, quantity: int) -> CartItem:
        owner_id = _require_owner(owner_id)
        if quantity < 1:
            raise InvalidQuantity()

        line = self._line(owner_id, line_id)
        product = line.product
        if product is not None and quantity > product.stock_quantity:
            raise StockExhausted(product.id, product.stock_quantity, quantity, product.name)

        with self._committing():
            line.quantity = quantity
        self.db.refresh(line)
        return line

    def remove(self, owner_id: Optional[int], line_id: int) -> None:
        owner_id = _require_owner(owner_id)
        line = self._line(owner_id, line_id)
        with self._committing():
            self.db.delete(line)

    def clear(self, owner_id: Optional[int]) -> int:
        owner_id = _require_owner(owner_id)
        with self._committing():
            removed = self.db.query(CartItem).filter(CartItem.user_id == owner_id).delete(synchronize_session=False)
        return removed
