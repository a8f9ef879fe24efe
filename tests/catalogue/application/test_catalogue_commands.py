"""Application tests for product, category and review command handlers."""

import json

import pytest
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain

from storefront.catalogue.category import Category, CreateCategory
from storefront.catalogue.creation import CreateProduct
from storefront.catalogue.product import Product
from storefront.catalogue.reviews import AddReview


def _create_product(**overrides):
    defaults = {
        "name": "Linen Kurta",
        "description": "Breathable straight-cut kurta",
        "price": 600.0,
        "sizes": json.dumps([{"size": "M", "stock": 10}, {"size": "L", "stock": 4}]),
        "colors": json.dumps([{"name": "Indigo", "hex": "#3F51B5"}]),
        "images": json.dumps(["https://cdn.example.com/kurta.jpg"]),
    }
    defaults.update(overrides)
    return current_domain.process(CreateProduct(**defaults), asynchronous=False)


class TestCreateProductHandler:
    def test_create_product(self):
        product_id = _create_product(gender="male", brand="Fabindia")

        product = current_domain.repository_for(Product).get(product_id)
        assert product.name == "Linen Kurta"
        assert product.total_stock == 14
        assert product.stock_for("L") == 4
        assert product.colors[0].name == "Indigo"
        assert product.images == ["https://cdn.example.com/kurta.jpg"]
        assert product.gender == "male"

    def test_without_sizes_has_no_stock(self):
        product_id = _create_product(sizes=None, colors=None, images=None)
        product = current_domain.repository_for(Product).get(product_id)
        assert product.total_stock == 0
        assert product.gender == "unisex"

    def test_in_existing_category(self, make_category):
        category = make_category()
        product_id = _create_product(category_id=category.id)
        assert str(current_domain.repository_for(Product).get(product_id).category_id) == str(category.id)

    def test_unknown_category_not_found(self):
        with pytest.raises(ObjectNotFoundError) as exc:
            _create_product(category_id="missing")
        assert "Category not found" in str(exc.value)


class TestCreateCategoryHandler:
    def test_slug_derived_from_name(self):
        category_id = current_domain.process(CreateCategory(name="Ethnic Wear", gender="female"), asynchronous=False)

        category = current_domain.repository_for(Category).get(category_id)
        assert category.slug == "ethnic-wear"
        assert category.is_main is True

    def test_duplicate_slug_rejected(self):
        current_domain.process(CreateCategory(name="Jeans", gender="male"), asynchronous=False)
        with pytest.raises(ValidationError) as exc:
            current_domain.process(CreateCategory(name="Jeans", gender="female"), asynchronous=False)
        assert "Category with this slug already exists" in str(exc.value)

    def test_subcategory(self, make_category):
        parent = make_category(name="Topwear")
        category_id = current_domain.process(
            CreateCategory(name="Shirts", gender="male", parent_id=parent.id), asynchronous=False
        )
        assert str(current_domain.repository_for(Category).get(category_id).parent_id) == str(parent.id)

    def test_only_two_levels(self, make_category):
        parent = make_category(name="Topwear")
        child = make_category(name="Shirts", parent=parent)

        with pytest.raises(ValidationError) as exc:
            current_domain.process(
                CreateCategory(name="Formal Shirts", gender="male", parent_id=child.id), asynchronous=False
            )
        assert "Subcategories cannot have subcategories" in str(exc.value)

    def test_unknown_parent_not_found(self):
        with pytest.raises(ObjectNotFoundError):
            current_domain.process(
                CreateCategory(name="Shirts", gender="male", parent_id="missing"), asynchronous=False
            )


class TestAddReviewHandler:
    def test_review_carries_reviewer_name(self, user, make_product):
        product = make_product()

        current_domain.process(
            AddReview(product_id=product.id, user_id=user.id, rating=4, comment="Fits well"), asynchronous=False
        )

        refreshed = current_domain.repository_for(Product).get(product.id)
        assert refreshed.num_reviews == 1
        assert refreshed.rating == 4.0
        assert refreshed.reviews[0].name == user.username

    def test_unknown_product(self, user):
        with pytest.raises(ObjectNotFoundError) as exc:
            current_domain.process(AddReview(product_id="missing", user_id=user.id, rating=4), asynchronous=False)
        assert "Product missing not found" in str(exc.value)
