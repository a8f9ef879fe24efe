import os
from itertools import count
from pathlib import Path

import pytest
from protean.integrations.pytest import DomainFixture

ADDRESS = {
    "full_name": "Asha Rao",
    "phone": "9876543210",
    "address_line1": "12 MG Road",
    "city": "Bengaluru",
    "state": "Karnataka",
    "pincode": "560001",
    "country": "India",
}

PASSWORD = "s3cret-pass"


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_sessionstart(session):
    """Select the configuration overlay before any domain module is imported."""
    os.environ["PROTEAN_ENV"] = session.config.option.env


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = str(Path(item.fspath))

        if "/domain/" in test_path:
            item.add_marker(pytest.mark.domain)
        elif "/application/" in test_path:
            item.add_marker(pytest.mark.application)
        elif "/bdd/" in test_path:
            item.add_marker(pytest.mark.bdd)
        elif "/integration/" in test_path:
            item.add_marker(pytest.mark.integration)
            # Integration tests are often slower
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)


@pytest.fixture(scope="session")
def storefront_bed():
    from storefront.domain import storefront

    bed = DomainFixture(storefront)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(storefront_bed):
    with storefront_bed.domain_context():
        yield


@pytest.fixture(autouse=True)
def outbox():
    """The in-memory mail adapter, fresh for every test."""
    from storefront.mail import get_email_gateway, reset_email_gateway

    reset_email_gateway()
    yield get_email_gateway()
    reset_email_gateway()


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------
@pytest.fixture()
def address_fields():
    return dict(ADDRESS)


@pytest.fixture()
def make_user():
    from protean.utils.globals import current_domain

    from storefront.account.security import hash_secret
    from storefront.account.user import User

    sequence = count(1)

    def _make(password=PASSWORD, verified=True, role="user", with_address=True, **overrides):
        n = next(sequence)
        user = User.register(
            username=overrides.get("username", f"shopper{n}"),
            email=overrides.get("email", f"shopper{n}@example.com"),
            password_hash=hash_secret(password),
            contact=overrides.get("contact", f"98765432{n:02d}"),
            gender=overrides.get("gender", "female"),
            role=role,
        )
        if verified:
            user.verify_email()
        if with_address:
            user.add_address(**ADDRESS)
        current_domain.repository_for(User).add(user)
        return current_domain.repository_for(User).get(user.id)

    return _make


@pytest.fixture()
def user(make_user):
    return make_user()


@pytest.fixture()
def admin(make_user):
    return make_user(role="admin", username="admin1", email="admin@example.com", contact="9000000001")


@pytest.fixture()
def make_category():
    from protean.utils.globals import current_domain

    from storefront.catalogue.category import Category, slugify

    def _make(name="Shirts", gender="male", parent=None, **overrides):
        category = Category(
            name=name,
            slug=overrides.get("slug", f"{gender}-{slugify(name)}"),
            gender=gender,
            parent_id=parent.id if parent else None,
            is_active=overrides.get("is_active", True),
        )
        current_domain.repository_for(Category).add(category)
        return category

    return _make


@pytest.fixture()
def make_product():
    from protean.utils.globals import current_domain

    from storefront.catalogue.product import Product

    def _make(name="Classic Tee", price=300.0, stock=None, colors=("Navy",), category=None, **overrides):
        stock = stock if stock is not None else {"M": 5, "L": 3}
        product = Product.create(
            name=name,
            description=overrides.get("description", f"{name} in soft cotton"),
            price=price,
            sizes=[{"size": size, "stock": units} for size, units in stock.items()],
            colors=[{"name": c, "hex": "#000080"} for c in colors],
            images=overrides.get("images", [f"https://cdn.example.com/{name.lower().replace(' ', '-')}.jpg"]),
            brand=overrides.get("brand", "Roadster"),
            category_id=category.id if category else None,
            gender=overrides.get("gender", "unisex"),
        )
        if overrides.get("is_active") is False:
            product.is_active = False
        current_domain.repository_for(Product).add(product)
        return current_domain.repository_for(Product).get(product.id)

    return _make


# ---------------------------------------------------------------------------
# HTTP
# ---------------------------------------------------------------------------
@pytest.fixture()
def client():
    from fastapi.testclient import TestClient

    from storefront.app import create_app

    return TestClient(create_app(init_domain=False))


@pytest.fixture()
def auth_headers():
    from storefront.account.security import issue_token

    def _headers(user):
        return {"Authorization": f"Bearer {issue_token(user.id)}"}

    return _headers
