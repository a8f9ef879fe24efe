"""Storefront: e-commerce backend built on Protean and FastAPI."""
