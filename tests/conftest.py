"""Suite-wide setup for the checkout tests.

The checkout domain is initialized once per session with the ``test``
overlay of ``domain.toml`` (memory providers, synchronous processing) unless
``PROTEAN_ENV`` already names another one, e.g. ``production`` to run the
suite against Postgres. Every test starts from empty stores.
"""

import os
from pathlib import Path

import pytest

# Test layers, keyed by the directory under tests/checkout/
LAYER_MARKERS = {"domain": "domain", "application": "application", "integration": "integration"}


def pytest_sessionstart(session):
    os.environ.setdefault("PROTEAN_ENV", "test")

    from checkout.domain import checkout

    checkout.init()
    checkout.domain_context().push()


def pytest_collection_modifyitems(config, items):
    """Mark each test with the layer it lives in, so ``-m domain`` and friends select by layer."""
    for item in items:
        layer = Path(item.fspath).parent.name
        if layer in LAYER_MARKERS:
            item.add_marker(getattr(pytest.mark, LAYER_MARKERS[layer]))


@pytest.fixture(scope="session", autouse=True)
def sql_schema():
    """Create the schema when the active overlay uses a SQL provider; a no-op on memory."""
    from checkout.domain import checkout
    from checkout.utils.db import drop_db, setup_db

    setup_db(checkout)
    yield
    drop_db(checkout)


@pytest.fixture(autouse=True)
def empty_stores():
    """Reset carts, orders, variants, promotions and notifications after each test."""
    yield

    from protean import current_domain

    for _, provider in current_domain.providers.items():
        provider._data_reset()
    current_domain.event_store.store._data_reset()
