# backend/services/exceptions.py


class StoreError(Exception):
    """Base class for every failure raised by the storefront services."""

    status_code = 400

    def __init__(self, message: str = ""):
        self.message = message or self.__class__.__doc__ or self.__class__.__name__
        super().__init__(self.message)


class Unauthenticated(StoreError):
    """No caller identity present"""
    status_code = 401


class EmptyCart(StoreError):
    """Cart is empty"""
    status_code = 400


class InvalidQuantity(StoreError):
    """Quantity must be at least 1"""
    status_code = 400


class InvalidVariant(StoreError):
    """Selected size is not available for this product"""
    status_code = 400


class StockExhausted(StoreError):
    status_code = 409

    def __init__(self, product_id: int, available: int, required: int, name: str = ""):
        self.product_id = product_id
        self.available = available
        self.required = required
        label = name or f"product {product_id}"
        super().__init__(f"Insufficient stock for {label}. Available: {available}, required: {required}")


class ProductUnavailable(StoreError):
    """Product is no longer available"""
    status_code = 409


class ProductNotFound(StoreError):
    """Product not found"""
    status_code = 404


class CartLineNotFound(StoreError):
    """Cart item not found"""
    status_code = 404


class OrderNotFound(StoreError):
    """Order not found"""
    status_code = 404


class InvalidStatusTransition(StoreError):
    status_code = 400

    def __init__(self, current: str, requested: str):
        self.current = current
        self.requested = requested
        super().__init__(f"Cannot change status from {current} to {requested}")


class RemoteFailure(StoreError):
    """Storage backend failed, please retry"""
    status_code = 503
