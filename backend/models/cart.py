# backend/models/cart.py
from sqlalchemy import Column, Integer, ForeignKey, String, DateTime, UniqueConstraint, CheckConstraint, Index, func, text
from sqlalchemy.orm import relationship
from database import Base

# A single (item, variant, quantity) entry in a user's cart
class CartItem(Base):
    __tablename__ = "cart_items"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), index=True, nullable=False)
    quantity = Column(Integer, CheckConstraint("quantity >= 1"), nullable=False, default=1)
    selected_size = Column(String, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    product = relationship("Product")

    __table_args__ = (
        # One line per (owner, item, variant)
        UniqueConstraint("user_id", "product_id", "selected_size", name="uq_cartitem_user_product_size"),
        # NULLs are distinct in the constraint above, so sizeless lines need their own index
        Index(
            "uq_cartitem_user_product_nosize", "user_id", "product_id", unique=True,
            sqlite_where=text("selected_size IS NULL"),
            postgresql_where=text("selected_size IS NULL"),
        ),
    )
