"""In-process locks that serialize checkouts contending for the same rows.

Placing an order reads stock and promotion counters, validates them and then
writes them back. Two checkouts for the last unit of a variant must not both
pass validation, so the whole command runs while holding the lock of every
variant (and the promotion code) involved. Cancellations take the
same variant locks while they put stock back.

Keys are mapped onto a fixed set of lock stripes, so memory stays constant
however many customers and variants pass through. Unrelated keys may share
a stripe; that only serializes them. Stripes are de-duplicated and always
acquired in ascending order so that overlapping checkouts cannot deadlock.

Across processes the aggregates' optimistic versioning still applies: a
stale write raises ``ExpectedVersionError`` at commit time.
"""

import threading
from contextlib import ExitStack, contextmanager

STRIPE_COUNT = 256

_stripes = tuple(threading.Lock() for _ in range(STRIPE_COUNT))


def _stripe_index(key: str) -> int:
    return hash(key) % STRIPE_COUNT


def _lock_for(key: str) -> threading.Lock:
    return _stripes[_stripe_index(key)]


def _checkout_keys(variant_ids, promotion_code=None, customer_id=None) -> set[str]:
    keys = {f"variant:{variant_id}" for variant_id in variant_ids}
    if promotion_code:
        keys.add(f"promotion:{promotion_code.strip().upper()}")
    if customer_id:
        keys.add(f"customer:{customer_id}")
    return keys


@contextmanager
def checkout_locks(variant_ids, promotion_code=None, customer_id=None):
    """Hold the locks for every variant (and the promotion) of a checkout.

    ``customer_id`` additionally serializes one customer's checkouts, so a
    double-submitted cart is consumed only once.

    Usage:
        with checkout_locks(["var-1", "var-2"], "SALE10"):
            current_domain.process(PlaceOrder(...), asynchronous=False)
    """
    keys = _checkout_keys(variant_ids, promotion_code, customer_id)
    stripes = sorted({_stripe_index(key) for key in keys})

    with ExitStack() as stack:
        for index in stripes:
            stack.enter_context(_stripes[index])
        yield
