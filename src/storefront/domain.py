"""Storefront domain: accounts, catalogue, shopping cart, favorites and orders.

A single domain holds every aggregate so that order placement can reserve
product stock, record the order and empty the cart in one Unit of Work.
"""

import structlog
from protean.domain import Domain

storefront = Domain(name="storefront")

logger = structlog.get_logger(__name__)
