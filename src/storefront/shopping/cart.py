"""Cart aggregate: one per user, an ordered list of line items.

A line is identified by product, size and colour name; adding the same
combination again increases its quantity. Each line remembers the unit
price the product had when it was first added.
"""

from datetime import UTC, datetime

from protean import atomic_change
from protean.exceptions import ObjectNotFoundError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String

from storefront.domain import storefront


@storefront.entity(part_of="Cart")
class CartItem:
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    size = String(required=True, max_length=20)
    color_name = String(max_length=50)
    color_hex = String(max_length=7)
    price = Float(required=True, min_value=0.0)
    added_at = DateTime()

    def matches(self, product_id, size, color_name) -> bool:
        return str(self.product_id) == str(product_id) and self.size == size and self.color_name == color_name


@storefront.aggregate
class Cart:
    user_id = Identifier(required=True, unique=True)
    items = HasMany(CartItem)
    updated_at = DateTime()

    @classmethod
    def open(cls, user_id):
        return cls(user_id=user_id, items=[], updated_at=datetime.now(UTC))

    @property
    def total_items(self) -> int:
        return sum(i.quantity for i in self.items)

    @property
    def total_amount(self) -> float:
        return sum(i.price * i.quantity for i in self.items)

    def find_item(self, item_id) -> CartItem:
        item = next((i for i in self.items if str(i.id) == str(item_id)), None)
        if item is None:
            raise ObjectNotFoundError("Item not found in cart")
        return item

    def add_item(self, product_id, quantity, size, price, color_name=None, color_hex=None):
        from storefront.shopping.events import CartItemAdded

        now = datetime.now(UTC)
        existing = next((i for i in self.items if i.matches(product_id, size, color_name)), None)

        with atomic_change(self):
            if existing:
                existing.quantity += quantity
                item = existing
            else:
                item = CartItem(
                    product_id=product_id,
                    quantity=quantity,
                    size=size,
                    color_name=color_name,
                    color_hex=color_hex,
                    price=price,
                    added_at=now,
                )
                self.add_items(item)
            self.updated_at = now

        self.raise_(
            CartItemAdded(
                cart_id=self.id,
                item_id=item.id,
                product_id=product_id,
                size=size,
                quantity=quantity,
            )
        )
        return item

    def update_quantity(self, item_id, quantity):
        """Set a line's quantity; zero drops the line."""
        item = self.find_item(item_id)
        if quantity == 0:
            self.remove_item(item_id)
            return

        with atomic_change(self):
            item.quantity = quantity
            self.updated_at = datetime.now(UTC)

    def remove_item(self, item_id):
        from storefront.shopping.events import CartItemRemoved

        item = next((i for i in self.items if str(i.id) == str(item_id)), None)
        if item is None:
            return

        self.remove_items(item)
        self.updated_at = datetime.now(UTC)
        self.raise_(CartItemRemoved(cart_id=self.id, item_id=item_id))

    def clear(self):
        from storefront.shopping.events import CartCleared

        for item in list(self.items):
            self.remove_items(item)
        self.updated_at = datetime.now(UTC)
        self.raise_(CartCleared(cart_id=self.id, user_id=self.user_id))


@storefront.repository(part_of=Cart)
class CartRepository:
    def for_user(self, user_id) -> Cart | None:
        return self._dao.query.filter(user_id=str(user_id)).all().first

    def owned_by(self, user_id) -> Cart:
        cart = self.for_user(user_id)
        if cart is None:
            raise ObjectNotFoundError("Cart not found")
        return cart
