"""Order price breakdown: delivery charge, GST and coupon discount.

Rates and thresholds come from the ``[custom]`` section of the domain
configuration.
"""

from decimal import ROUND_HALF_UP, Decimal

from protean.utils.globals import current_domain


def round_half_up(value: float) -> int:
    """Round to the nearest whole unit, halves away from zero."""
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def coupon_rate(code: str | None) -> float:
    """Fractional discount for ``code``; unknown or empty codes give 0."""
    if not code:
        return 0.0
    coupons = current_domain.config["custom"].get("COUPONS", {})
    return float(coupons.get(code.strip().upper(), 0.0))


def price_order(items_price: float, coupon_code: str | None = None) -> dict:
    custom = current_domain.config["custom"]

    if items_price >= custom["FREE_DELIVERY_THRESHOLD"]:
        delivery_charge = 0
    else:
        delivery_charge = custom["DELIVERY_CHARGE"]

    gst = round_half_up(items_price * custom["GST_RATE"])
    discount = round_half_up(items_price * coupon_rate(coupon_code))

    return {
        "items_price": items_price,
        "delivery_charge": delivery_charge,
        "gst": gst,
        "discount": discount,
        "total_amount": items_price + delivery_charge + gst - discount,
    }
