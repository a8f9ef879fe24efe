"""Tests for Product stock keeping, invariants and reviews."""

import pytest
from protean.exceptions import ValidationError
from protean.utils.reflection import declared_fields

from storefront.catalogue.events import ProductCreated, ReviewAdded, StockReleased, StockReserved
from storefront.catalogue.product import Product, SizeStock


def _make_product(**overrides):
    defaults = {
        "name": "Classic Tee",
        "description": "Soft cotton crew neck",
        "price": 300.0,
        "sizes": [{"size": "M", "stock": 5}, {"size": "L", "stock": 3}],
        "colors": [{"name": "Navy Blue", "hex": "#000080"}],
    }
    defaults.update(overrides)
    return Product.create(**defaults)


class TestCreation:
    def test_total_stock_is_sum_of_sizes(self):
        product = _make_product()
        assert product.total_stock == 8
        assert product.gender == "unisex"
        assert product.is_active is True

    def test_raises_product_created(self):
        product = _make_product()
        event = next(e for e in product._events if isinstance(e, ProductCreated))
        assert event.total_stock == 8

    def test_duplicate_size_rejected(self):
        with pytest.raises(ValidationError) as exc:
            _make_product(sizes=[{"size": "M", "stock": 1}, {"size": "M", "stock": 2}])
        assert "Each size may only be listed once" in str(exc.value)

    def test_discount_above_price_rejected(self):
        with pytest.raises(ValidationError):
            _make_product(discount_price=350.0)

    def test_negative_stock_rejected(self):
        with pytest.raises(ValidationError):
            _make_product(sizes=[{"size": "M", "stock": -1}])


class TestStock:
    def test_size_stock_defaults_to_zero_and_is_optional(self):
        assert declared_fields(SizeStock)["stock"].required is False
        assert SizeStock(size="XL").stock == 0

    def test_stock_for_unknown_size_is_zero(self):
        assert _make_product().stock_for("XXL") == 0

    def test_has_stock(self):
        product = _make_product()
        assert product.has_stock("M", 5) is True
        assert product.has_stock("M", 6) is False

    def test_inactive_product_has_no_stock(self):
        product = _make_product()
        product.is_active = False
        assert product.has_stock("M", 1) is False

    def test_reserve_decrements_size_and_total(self):
        product = _make_product()
        product.reserve("M", 2)

        assert product.stock_for("M") == 3
        assert product.total_stock == 6
        event = next(e for e in product._events if isinstance(e, StockReserved))
        assert event.remaining == 3

    def test_reserve_all_remaining_units(self):
        product = _make_product()
        product.reserve("L", 3)
        assert product.stock_for("L") == 0

    def test_reserve_beyond_stock_changes_nothing(self):
        product = _make_product()

        with pytest.raises(ValidationError) as exc:
            product.reserve("L", 4)

        assert "Insufficient stock for Classic Tee in size L" in str(exc.value)
        assert product.stock_for("L") == 3
        assert product.total_stock == 8

    def test_reserve_unknown_size_refused(self):
        with pytest.raises(ValidationError):
            _make_product().reserve("XXL", 1)

    def test_release_returns_units(self):
        product = _make_product()
        product.reserve("M", 2)
        product.release("M", 2)

        assert product.stock_for("M") == 5
        assert product.total_stock == 8
        assert any(isinstance(e, StockReleased) for e in product._events)

    def test_release_recreates_delisted_size(self):
        product = _make_product()
        product.release("XL", 2)

        assert product.stock_for("XL") == 2
        assert product.total_stock == 10

    def test_colour_match_is_case_insensitive_substring(self):
        product = _make_product()
        assert product.has_colour("navy") is True
        assert product.has_colour("red") is False


class TestReviews:
    def test_review_updates_rating_and_count(self):
        product = _make_product()
        product.add_review(user_id="u1", rating=5, name="asha")
        product.add_review(user_id="u2", rating=2, comment="Shrank after a wash")

        assert product.num_reviews == 2
        assert product.rating == pytest.approx(3.5)
        assert any(isinstance(e, ReviewAdded) for e in product._events)

    def test_one_review_per_user(self):
        product = _make_product()
        product.add_review(user_id="u1", rating=4)

        with pytest.raises(ValidationError) as exc:
            product.add_review(user_id="u1", rating=1)
        assert "Product already reviewed" in str(exc.value)
        assert product.num_reviews == 1

    def test_rating_must_be_between_1_and_5(self):
        with pytest.raises(ValidationError):
            _make_product().add_review(user_id="u1", rating=6)
