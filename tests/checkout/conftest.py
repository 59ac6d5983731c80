from datetime import UTC, datetime, timedelta

import pytest
from protean.integrations.pytest import DomainFixture
from protean.utils.globals import current_domain


@pytest.fixture(scope="session")
def checkout_bed():
    from checkout.domain import checkout

    bed = DomainFixture(checkout)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(checkout_bed):
    with checkout_bed.domain_context():
        yield


@pytest.fixture()
def make_variant():
    """Register a variant through the catalogue command and return its id."""
    from checkout.catalogue.management import RegisterVariant

    def _make(product_name="Runner 2", base_price=500_000.0, stock_quantity=10, **overrides):
        attributes = {
            "product_id": "prod-001",
            "product_name": product_name,
            "size": "42",
            "color": "Black",
            "base_price": base_price,
            "stock_quantity": stock_quantity,
        }
        attributes.update(overrides)
        return current_domain.process(RegisterVariant(**attributes), asynchronous=False)

    return _make


@pytest.fixture()
def make_promotion():
    """Create a promotion valid from yesterday to next week and return its id."""
    from checkout.promotion.management import CreatePromotion

    def _make(code="SALE10", discount_type="percentage", discount_value=10.0, **overrides):
        now = datetime.now(UTC)
        attributes = {
            "code": code,
            "name": f"{code} promotion",
            "discount_type": discount_type,
            "discount_value": discount_value,
            "start_date": now - timedelta(days=1),
            "end_date": now + timedelta(days=7),
        }
        attributes.update(overrides)
        return current_domain.process(CreatePromotion(**attributes), asynchronous=False)

    return _make


@pytest.fixture()
def add_to_cart():
    from checkout.cart.items import AddToCart

    def _add(customer_id, variant_id, quantity=1):
        return current_domain.process(
            AddToCart(customer_id=customer_id, variant_id=variant_id, quantity=quantity),
            asynchronous=False,
        )

    return _add
