"""Order aggregate: an immutable purchase snapshot with a guarded lifecycle.

Items, prices and the shipping address are copied at placement time and
never change afterwards. The only mutations are status transitions, each
of which appends an entry to ``status_history``.

State Machine (8 states):
    PENDING → CONFIRMED → PROCESSING → SHIPPED → OUT_FOR_DELIVERY → DELIVERED
    DELIVERED → RETURNED
    CANCELLED (from PENDING, CONFIRMED, PROCESSING, SHIPPED, OUT_FOR_DELIVERY)
"""

import secrets
import time
from datetime import UTC, datetime
from enum import Enum

from protean import atomic_change
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import (
    DateTime,
    Float,
    HasMany,
    Identifier,
    Integer,
    String,
    Text,
    ValueObject,
)

from storefront.domain import storefront


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    OUT_FOR_DELIVERY = "out_for_delivery"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"
    RETURNED = "returned"


class PaymentMethod(Enum):
    COD = "cod"
    ONLINE = "online"
    UPI = "upi"


class PaymentStatus(Enum):
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"


# State machine transition map
_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.CONFIRMED, OrderStatus.CANCELLED},
    OrderStatus.CONFIRMED: {OrderStatus.PROCESSING, OrderStatus.CANCELLED},
    OrderStatus.PROCESSING: {OrderStatus.SHIPPED, OrderStatus.CANCELLED},
    OrderStatus.SHIPPED: {OrderStatus.OUT_FOR_DELIVERY, OrderStatus.CANCELLED},
    OrderStatus.OUT_FOR_DELIVERY: {OrderStatus.DELIVERED, OrderStatus.CANCELLED},
    OrderStatus.DELIVERED: {OrderStatus.RETURNED},
    OrderStatus.CANCELLED: set(),  # Terminal
    OrderStatus.RETURNED: set(),  # Terminal
}

# States from which cancellation is allowed
_CANCELLABLE_STATES = {status for status, targets in _VALID_TRANSITIONS.items() if OrderStatus.CANCELLED in targets}

PLACED_NOTE = "Order placed successfully"
DEFAULT_CANCELLATION_NOTE = "Cancelled by user"


def generate_order_number() -> str:
    """``ORD`` + epoch milliseconds + four random digits."""
    return f"ORD{int(time.time() * 1000)}{secrets.randbelow(10000):04d}"


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@storefront.value_object(part_of="Order")
class ShippingAddress:
    """Where the order goes, copied from the address book at placement time."""

    full_name = String(required=True, max_length=100)
    phone = String(required=True, max_length=15)
    address_line1 = String(required=True, max_length=255)
    address_line2 = String(max_length=255)
    city = String(required=True, max_length=100)
    state = String(required=True, max_length=100)
    pincode = String(required=True, max_length=10)
    country = String(max_length=100)


@storefront.value_object(part_of="Order")
class DeliveryWindow:
    min_days = Integer(default=3)
    max_days = Integer(default=7)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@storefront.entity(part_of="Order")
class OrderItem:
    """A purchased line: product details and unit price as they were at purchase time."""

    product_id = Identifier(required=True)
    name = String(required=True, max_length=200)
    image = String(max_length=500)
    quantity = Integer(required=True, min_value=1)
    size = String(required=True, max_length=20)
    color_name = String(max_length=50)
    color_hex = String(max_length=7)
    price = Float(required=True, min_value=0.0)


@storefront.entity(part_of="Order")
class StatusEntry:
    status = String(required=True, choices=OrderStatus)
    timestamp = DateTime(required=True)
    note = Text()


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@storefront.aggregate
class Order:
    order_number = String(required=True, max_length=30, unique=True)
    user_id = Identifier(required=True)
    items = HasMany(OrderItem)
    shipping_address = ValueObject(ShippingAddress)
    payment_method = String(required=True, choices=PaymentMethod)
    payment_status = String(choices=PaymentStatus, default=PaymentStatus.PENDING.value)
    items_price = Float(required=True, min_value=0.0)
    delivery_charge = Float(default=0.0)
    gst = Float(default=0.0)
    discount = Float(default=0.0)
    coupon_code = String(max_length=50)
    total_amount = Float(required=True)
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    status_history = HasMany(StatusEntry)
    expected_delivery = ValueObject(DeliveryWindow)
    delivered_at = DateTime()
    cancelled_at = DateTime()
    cancellation_reason = Text()
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def place(cls, user_id, items, shipping_address, payment_method, pricing, coupon_code=None):
        """Record a new pending order.

        Args:
            items: iterable of dicts with the OrderItem fields.
            shipping_address: dict of ShippingAddress fields.
            pricing: the breakdown produced by ``price_order``.
        """
        from storefront.ordering.events import OrderPlaced

        now = datetime.now(UTC)
        order_items = [OrderItem(**item) for item in items]
        if not order_items:
            raise ValidationError({"items": ["Cart is empty"]})

        payment_status = PaymentStatus.PENDING if payment_method == PaymentMethod.COD.value else PaymentStatus.PAID

        order = cls(
            order_number=generate_order_number(),
            user_id=user_id,
            items=order_items,
            shipping_address=ShippingAddress(**shipping_address),
            payment_method=payment_method,
            payment_status=payment_status.value,
            items_price=pricing["items_price"],
            delivery_charge=pricing["delivery_charge"],
            gst=pricing["gst"],
            discount=pricing["discount"],
            coupon_code=coupon_code,
            total_amount=pricing["total_amount"],
            status=OrderStatus.PENDING.value,
            status_history=[StatusEntry(status=OrderStatus.PENDING.value, timestamp=now, note=PLACED_NOTE)],
            expected_delivery=DeliveryWindow(min_days=3, max_days=7),
            created_at=now,
            updated_at=now,
        )
        order.raise_(
            OrderPlaced(
                order_id=order.id,
                order_number=order.order_number,
                user_id=user_id,
                item_count=len(order_items),
                total_amount=order.total_amount,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # State machine
    # -------------------------------------------------------------------
    def _assert_can_transition(self, target_status):
        current = OrderStatus(self.status)
        if target_status not in _VALID_TRANSITIONS.get(current, set()):
            raise ValidationError({"status": [f"Cannot transition from {current.value} to {target_status.value}"]})

    def _record(self, status, note, now):
        self.status = status.value
        self.add_status_history(StatusEntry(status=status.value, timestamp=now, note=note))
        self.updated_at = now

    @property
    def is_cancellable(self) -> bool:
        return OrderStatus(self.status) in _CANCELLABLE_STATES

    def advance_to(self, status, note=None):
        """Move forward along the lifecycle. Cancellation goes through ``cancel``."""
        from storefront.ordering.events import OrderStatusChanged

        try:
            target = OrderStatus(status)
        except ValueError as exc:
            raise ValidationError({"status": [f"Unknown order status: {status}"]}) from exc

        if target == OrderStatus.CANCELLED:
            return self.cancel(note)

        self._assert_can_transition(target)
        previous = self.status
        now = datetime.now(UTC)

        with atomic_change(self):
            self._record(target, note, now)
            if target == OrderStatus.DELIVERED:
                self.delivered_at = now

        self.raise_(
            OrderStatusChanged(
                order_id=self.id,
                previous_status=previous,
                new_status=target.value,
                note=note,
                changed_at=now,
            )
        )

    def cancel(self, reason=None):
        """Cancel the order. Restocking is the caller's job; see ``CancelOrderHandler``."""
        from storefront.ordering.events import OrderCancelled

        if not self.is_cancellable:
            raise ValidationError({"status": [f"Cannot cancel order with status: {self.status}"]})

        previous = self.status
        now = datetime.now(UTC)

        with atomic_change(self):
            self._record(OrderStatus.CANCELLED, reason or DEFAULT_CANCELLATION_NOTE, now)
            self.cancelled_at = now
            self.cancellation_reason = reason
            if self.payment_status == PaymentStatus.PAID.value:
                self.payment_status = PaymentStatus.REFUNDED.value

        self.raise_(
            OrderCancelled(
                order_id=self.id,
                previous_status=previous,
                reason=reason,
                cancelled_at=now,
            )
        )

    def tracking(self) -> dict:
        return {
            "order_number": self.order_number,
            "current_status": self.status,
            "status_history": [
                {"status": entry.status, "timestamp": entry.timestamp, "note": entry.note}
                for entry in sorted(self.status_history, key=lambda e: e.timestamp)
            ],
            "expected_delivery": {
                "min_days": self.expected_delivery.min_days,
                "max_days": self.expected_delivery.max_days,
            }
            if self.expected_delivery
            else None,
            "delivered_at": self.delivered_at,
            "ordered_at": self.created_at,
        }


@storefront.repository(part_of=Order)
class OrderRepository:
    def fetch(self, order_id) -> Order:
        try:
            return self.get(order_id)
        except ObjectNotFoundError as exc:
            raise ObjectNotFoundError("Order not found") from exc

    def for_user(self, user_id, status=None, page=1, limit=10):
        """One page of a user's orders, newest first. Returns ``(orders, total)``."""
        query = self._dao.query.filter(user_id=str(user_id))
        if status:
            query = query.filter(status=status)

        result = query.order_by("-created_at").offset((page - 1) * limit).limit(limit).all()
        return result.items, result.total
