# backend/services/checkout.py
"""Cart-to-order transition.

A checkout moves IDLE -> SUBMITTING -> COMMITTED | FAILED. While SUBMITTING
it creates the order, copies every cart line into an order line at the
current price, reserves stock and clears the cart. All four steps share one
database transaction: either every step is committed or none is.

Stock is reserved with a conditional UPDATE (``stock >= qty``), so two
concurrent checkouts can never take more units than exist. The loser fails
with StockExhausted and its cart is left untouched.
"""
import enum
import logging
from decimal import Decimal
from typing import Dict, List, Optional

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from models.cart import CartItem
from models.order import Order, OrderItem, OrderStatus
from models.product import Product
from services.exceptions import (
    EmptyCart, ProductUnavailable, RemoteFailure, StockExhausted, StoreError, Unauthenticated,
)

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")


class CheckoutState(str, enum.Enum):
    IDLE = "idle"
    SUBMITTING = "submitting"
    COMMITTED = "committed"
    FAILED = "failed"


class CheckoutOrchestrator:
    """Single-use: one instance places at most one order."""

    def __init__(self, db: Session):
        self.db = db
        self.state = CheckoutState.IDLE
        self.order: Optional[Order] = None
        self.error: Optional[StoreError] = None

    def place_order(self, owner_id: Optional[int], shipping_address: Optional[dict] = None) -> Order:
        if self.state is not CheckoutState.IDLE:
            raise RuntimeError(f"Checkout already {self.state.value}")

        if owner_id is None:
            raise Unauthenticated()

        try:
            lines = self._cart_lines(owner_id)
        except SQLAlchemyError as e:
            err = RemoteFailure()
            self._fail(owner_id, err, cause=e)
            raise err from e
        if not lines:
            raise EmptyCart()

        self.state = CheckoutState.SUBMITTING
        logger.info("Placing order for user %s (%d lines)", owner_id, len(lines))
        try:
            order = self._submit(owner_id, lines, shipping_address)
            self.db.commit()
        except StoreError as e:
            self._fail(owner_id, e)
            raise
        except SQLAlchemyError as e:
            err = RemoteFailure()
            self._fail(owner_id, err, cause=e)
            raise err from e

        self.db.refresh(order)
        self.order = order
        self.state = CheckoutState.COMMITTED
        logger.info("Order %s committed for user %s, total %s", order.id, owner_id, order.total_amount)
        return order

    def _fail(self, owner_id: int, error: StoreError, cause: Optional[Exception] = None):
        self.db.rollback()
        self.error = error
        self.state = CheckoutState.FAILED
        logger.error("Checkout failed for user %s: %s", owner_id, cause or error)

    def _cart_lines(self, owner_id: int) -> List[CartItem]:
        return (
            self.db.query(CartItem)
            .filter(CartItem.user_id == owner_id)
            .order_by(CartItem.created_at.asc(), CartItem.id.asc())
            .all()
        )

    def _products(self, lines: List[CartItem]) -> Dict[int, Product]:
        ids = {line.product_id for line in lines}
        rows = self.db.query(Product).filter(Product.id.in_(ids)).all()
        return {p.id: p for p in rows}

    def _submit(self, owner_id: int, lines: List[CartItem], shipping_address: Optional[dict]) -> Order:
        products = self._products(lines)
        for line in lines:
            product = products.get(line.product_id)
            if product is None or not product.is_active:
                name = product.name if product else f"product {line.product_id}"
                raise ProductUnavailable(f"{name} is no longer available")

        # 1. Order header, total at the prices read in this transaction
        total = sum(
            (Decimal(products[line.product_id].price) * line.quantity for line in lines), Decimal("0")
        ).quantize(CENT)
        order = Order(
            user_id=owner_id,
            total_amount=total,
            status=OrderStatus.PENDING.value,
            shipping_address=shipping_address,
        )
        self.db.add(order)
        self.db.flush()

        # 2. Order lines with captured price and size
        for line in lines:
            order.items.append(OrderItem(
                product_id=line.product_id,
                quantity=line.quantity,
                price=products[line.product_id].price,
                selected_size=line.selected_size,
            ))
        self.db.flush()

        # 3. Reserve stock
        for line in lines:
            self._reserve(products[line.product_id], line.quantity)

        # 4. Clear the cart
        self.db.query(CartItem).filter(CartItem.user_id == owner_id).delete(synchronize_session=False)
        return order

    def _reserve(self, product: Product, quantity: int):
        result = self.db.execute(
            update(Product)
            .where(
                Product.id == product.id,
                Product.is_active.is_(True),
                Product.stock_quantity >= quantity,
            )
            .values(stock_quantity=Product.stock_quantity - quantity)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 1:
            return

        row = self.db.execute(
            select(Product.stock_quantity, Product.is_active).where(Product.id == product.id)
        ).first()
        if row is None or not row.is_active:
            raise ProductUnavailable(f"{product.name} is no longer available")
        raise StockExhausted(product.id, row.stock_quantity, quantity, product.name)
