"""Product aggregate root with per-size stock, colours and reviews.

Stock lives on SizeStock entities; ``total_stock`` is always their sum.
Order placement reserves stock through ``reserve`` (a conditional
decrement that refuses to go below zero) and cancellation hands it back
through ``release``.
"""

from datetime import UTC, datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import (
    Boolean,
    DateTime,
    Float,
    HasMany,
    Identifier,
    Integer,
    List,
    String,
    Text,
)

from storefront.domain import storefront


class ProductGender(Enum):
    MALE = "male"
    FEMALE = "female"
    UNISEX = "unisex"


@storefront.entity(part_of="Product")
class SizeStock:
    """Units on hand for one size label (``"M"``, ``"42"``, ``"Free"``)."""

    size: String(required=True, max_length=20)
    stock: Integer(min_value=0, default=0)


@storefront.entity(part_of="Product")
class Colour:
    name: String(required=True, max_length=50)
    hex: String(max_length=7)


@storefront.entity(part_of="Product")
class Review:
    user_id: Identifier(required=True)
    name: String(max_length=100)
    rating: Integer(required=True, min_value=1, max_value=5)
    comment: Text()
    created_at: DateTime()


@storefront.aggregate
class Product:
    name: String(required=True, max_length=200)
    description: Text(required=True)
    brand: String(max_length=100)
    category_id: Identifier()
    gender: String(choices=ProductGender, default=ProductGender.UNISEX.value)
    price: Float(required=True, min_value=0.0)
    discount_price: Float(min_value=0.0)
    images: List(String(max_length=500))
    sizes: HasMany(SizeStock)
    colors: HasMany(Colour)
    total_stock: Integer(default=0, min_value=0)
    rating: Float(default=0.0, min_value=0.0, max_value=5.0)
    num_reviews: Integer(default=0)
    reviews: HasMany(Review)
    is_featured: Boolean(default=False)
    is_active: Boolean(default=True)
    created_at: DateTime()
    updated_at: DateTime()

    @invariant.post
    def total_stock_matches_sizes(self):
        expected = sum(s.stock for s in self.sizes)
        if (self.total_stock or 0) != expected:
            raise ValidationError({"total_stock": ["Total stock must equal the sum of per-size stock"]})

    @invariant.post
    def size_labels_must_be_unique(self):
        labels = [s.size for s in self.sizes]
        if len(labels) != len(set(labels)):
            raise ValidationError({"sizes": ["Each size may only be listed once"]})

    @invariant.post
    def discount_price_below_price(self):
        if self.discount_price is not None and self.price is not None and self.discount_price > self.price:
            raise ValidationError({"discount_price": ["Discount price cannot exceed price"]})

    @classmethod
    def create(
        cls,
        name,
        description,
        price,
        sizes=(),
        colors=(),
        images=None,
        brand=None,
        category_id=None,
        gender=ProductGender.UNISEX.value,
        discount_price=None,
        is_featured=False,
    ):
        """Build a product from plain data.

        Args:
            sizes: iterable of dicts with ``size`` and ``stock``.
            colors: iterable of dicts with ``name`` and optional ``hex``.
        """
        from storefront.catalogue.events import ProductCreated

        now = datetime.now(UTC)
        size_entities = [SizeStock(size=s["size"], stock=s.get("stock", 0)) for s in sizes]
        product = cls(
            name=name,
            description=description,
            price=price,
            discount_price=discount_price,
            brand=brand,
            category_id=category_id,
            gender=gender,
            images=list(images or []),
            sizes=size_entities,
            colors=[Colour(name=c["name"], hex=c.get("hex")) for c in colors],
            total_stock=sum(s.stock for s in size_entities),
            is_featured=is_featured,
            created_at=now,
            updated_at=now,
        )
        product.raise_(
            ProductCreated(
                product_id=product.id,
                name=product.name,
                price=product.price,
                total_stock=product.total_stock,
                created_at=now,
            )
        )
        return product

    # -------------------------------------------------------------------
    # Stock
    # -------------------------------------------------------------------
    def size_entry(self, size) -> SizeStock | None:
        return next((s for s in self.sizes if s.size == size), None)

    def stock_for(self, size) -> int:
        entry = self.size_entry(size)
        return entry.stock if entry else 0

    def has_stock(self, size, quantity) -> bool:
        return self.is_active and self.stock_for(size) >= quantity

    def has_colour(self, name) -> bool:
        wanted = (name or "").lower()
        return any(wanted in (c.name or "").lower() for c in self.colors)

    def _adjust_stock(self, entry, delta):
        with atomic_change(self):
            entry.stock += delta
            self.total_stock = sum(s.stock for s in self.sizes)
            self.updated_at = datetime.now(UTC)

    def reserve(self, size, quantity):
        """Take ``quantity`` units of ``size`` out of stock, or refuse without changing anything."""
        from storefront.catalogue.events import StockReserved

        if quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})

        entry = self.size_entry(size)
        if entry is None or entry.stock < quantity:
            raise ValidationError({"stock": [f"Insufficient stock for {self.name} in size {size}"]})

        self._adjust_stock(entry, -quantity)
        self.raise_(
            StockReserved(
                product_id=self.id,
                size=size,
                quantity=quantity,
                remaining=entry.stock,
            )
        )

    def release(self, size, quantity):
        """Return ``quantity`` units of ``size`` to stock."""
        from storefront.catalogue.events import StockReleased

        if quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})

        entry = self.size_entry(size)
        if entry is None:
            # The size was delisted after the order was placed
            entry = SizeStock(size=size, stock=0)
            self.add_sizes(entry)

        self._adjust_stock(entry, quantity)
        self.raise_(
            StockReleased(
                product_id=self.id,
                size=size,
                quantity=quantity,
                remaining=entry.stock,
            )
        )

    # -------------------------------------------------------------------
    # Reviews
    # -------------------------------------------------------------------
    def add_review(self, user_id, rating, comment=None, name=None):
        from storefront.catalogue.events import ReviewAdded

        if any(str(r.user_id) == str(user_id) for r in self.reviews):
            raise ValidationError({"review": ["Product already reviewed"]})

        review = Review(
            user_id=user_id,
            name=name,
            rating=rating,
            comment=comment,
            created_at=datetime.now(UTC),
        )
        with atomic_change(self):
            self.add_reviews(review)
            self.num_reviews = len(self.reviews)
            self.rating = sum(r.rating for r in self.reviews) / self.num_reviews

        self.raise_(
            ReviewAdded(
                product_id=self.id,
                review_id=review.id,
                user_id=user_id,
                rating=rating,
                average_rating=self.rating,
            )
        )
        return review
