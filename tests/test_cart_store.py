"""Tests for the per-owner cart store."""

from decimal import Decimal

import pytest
from sqlalchemy.exc import IntegrityError

from models.cart import CartItem
from services.cart_store import CartStore, cart_total
from services.exceptions import (
    CartLineNotFound, InvalidQuantity, InvalidVariant, ProductNotFound,
    StockExhausted, Unauthenticated,
)


@pytest.fixture
def store(db):
    return CartStore(db)


class TestAdd:
    def test_add_creates_line_with_quantity_one(self, store, make_user, make_product):
        user = make_user()
        product = make_product()

        line = store.add(user.id, product.id, "8")

        assert line.quantity == 1
        assert line.selected_size == "8"
        assert len(store.lines(user.id)) == 1

    def test_same_item_and_size_increments(self, store, make_user, make_product):
        user = make_user()
        product = make_product()

        store.add(user.id, product.id, "8")
        store.add(user.id, product.id, "8")

        lines = store.lines(user.id)
        assert len(lines) == 1
        assert lines[0].quantity == 2

    def test_different_size_is_a_separate_line(self, store, make_user, make_product):
        user = make_user()
        product = make_product()

        store.add(user.id, product.id, "8")
        store.add(user.id, product.id, "9")

        assert sorted(line.selected_size for line in store.lines(user.id)) == ["8", "9"]

    def test_product_without_sizes_accepts_no_size(self, store, make_user, make_product):
        user = make_user()
        product = make_product(sizes=())

        store.add(user.id, product.id)
        store.add(user.id, product.id)

        lines = store.lines(user.id)
        assert len(lines) == 1
        assert lines[0].quantity == 2
        assert lines[0].selected_size is None

    def test_database_rejects_duplicate_sizeless_lines(self, db, make_user, make_product):
        user = make_user()
        product = make_product(sizes=())
        db.add(CartItem(user_id=user.id, product_id=product.id, selected_size=None))
        db.commit()

        db.add(CartItem(user_id=user.id, product_id=product.id, selected_size=None))
        with pytest.raises(IntegrityError):
            db.commit()
        db.rollback()

        assert len(CartStore(db).lines(user.id)) == 1

    def test_add_that_loses_insert_race_increments(self, store, make_user, make_product, monkeypatch):
        user = make_user()
        product = make_product(sizes=(), stock=5)
        store.add(user.id, product.id)

        # First lookup misses the line, as if another request inserted it meanwhile
        real_matching = CartStore._matching
        calls = []

        def stale_matching(self, *args):
            calls.append(args)
            return None if len(calls) == 1 else real_matching(self, *args)

        monkeypatch.setattr(CartStore, "_matching", stale_matching)
        line = store.add(user.id, product.id)

        assert line.quantity == 2
        lines = store.lines(user.id)
        assert len(lines) == 1
        assert lines[0].quantity == 2

    def test_unknown_size_rejected(self, store, make_user, make_product):
        user = make_user()
        product = make_product(sizes=("8",))

        with pytest.raises(InvalidVariant):
            store.add(user.id, product.id, "12")
        assert store.lines(user.id) == []

    def test_inactive_product_rejected(self, store, make_user, make_product):
        user = make_user()
        product = make_product(is_active=False)

        with pytest.raises(ProductNotFound):
            store.add(user.id, product.id, "8")

    def test_missing_product_rejected(self, store, make_user):
        user = make_user()
        with pytest.raises(ProductNotFound):
            store.add(user.id, 999, "8")

    def test_cannot_exceed_stock(self, store, make_user, make_product):
        user = make_user()
        product = make_product(stock=1)

        store.add(user.id, product.id, "8")
        with pytest.raises(StockExhausted) as exc_info:
            store.add(user.id, product.id, "8")

        assert exc_info.value.available == 1
        assert exc_info.value.required == 2
        assert store.lines(user.id)[0].quantity == 1

    def test_requires_identity(self, store, make_product):
        product = make_product()
        with pytest.raises(Unauthenticated):
            store.add(None, product.id, "8")


class TestSetQuantity:
    @pytest.mark.parametrize("qty", [0, -1])
    def test_below_one_fails_and_leaves_cart_unchanged(self, store, make_user, make_product, qty):
        user = make_user()
        product = make_product()
        line = store.add(user.id, product.id, "8", quantity=3)

        with pytest.raises(InvalidQuantity):
            store.set_quantity(user.id, line.id, qty)

        assert store.lines(user.id)[0].quantity == 3

    def test_updates_quantity(self, store, make_user, make_product):
        user = make_user()
        product = make_product()
        line = store.add(user.id, product.id, "8")

        store.set_quantity(user.id, line.id, 4)

        assert store.lines(user.id)[0].quantity == 4

    def test_above_stock_fails(self, store, make_user, make_product):
        user = make_user()
        product = make_product(stock=2)
        line = store.add(user.id, product.id, "8")

        with pytest.raises(StockExhausted):
            store.set_quantity(user.id, line.id, 3)

    def test_other_owners_line_is_not_found(self, store, make_user, make_product):
        alice = make_user("alice@shop.io")
        bob = make_user("bob@shop.io")
        product = make_product()
        line = store.add(alice.id, product.id, "8")

        with pytest.raises(CartLineNotFound):
            store.set_quantity(bob.id, line.id, 2)


class TestRemoveAndClear:
    def test_remove_line(self, store, make_user, make_product):
        user = make_user()
        product = make_product()
        line = store.add(user.id, product.id, "8")

        store.remove(user.id, line.id)

        assert store.lines(user.id) == []

    def test_remove_other_owners_line(self, store, make_user, make_product):
        alice = make_user("alice@shop.io")
        bob = make_user("bob@shop.io")
        product = make_product()
        line = store.add(alice.id, product.id, "8")

        with pytest.raises(CartLineNotFound):
            store.remove(bob.id, line.id)
        assert len(store.lines(alice.id)) == 1

    def test_clear_only_touches_owner(self, store, db, make_user, make_product):
        alice = make_user("alice@shop.io")
        bob = make_user("bob@shop.io")
        product = make_product()
        store.add(alice.id, product.id, "8")
        store.add(alice.id, product.id, "9")
        store.add(bob.id, product.id, "8")

        removed = store.clear(alice.id)

        assert removed == 2
        assert store.lines(alice.id) == []
        assert db.query(CartItem).filter(CartItem.user_id == bob.id).count() == 1


class TestCartTotal:
    def test_total_is_sum_of_lines(self, store, make_user, make_product):
        user = make_user()
        cheap = make_product(name="Converse", price="59.99")
        pricey = make_product(name="Nike Air Max 270", price="129.99", brand="Nike")
        store.add(user.id, cheap.id, "8")
        store.add(user.id, pricey.id, "9", quantity=2)

        assert cart_total(store.lines(user.id)) == Decimal("319.97")

    def test_empty_cart_total_is_zero(self):
        assert cart_total([]) == Decimal("0.00")

    def test_total_follows_current_price(self, store, db, make_user, make_product):
        user = make_user()
        product = make_product(price="59.99")
        store.add(user.id, product.id, "8", quantity=2)

        product.price = Decimal("10.00")
        db.commit()

        assert cart_total(store.lines(user.id)) == Decimal("20.00")
