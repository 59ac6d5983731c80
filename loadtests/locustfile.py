"""Shoestore Checkout Load Testing — Locust entry point.

Discovers all user classes from the scenarios package.
Run specific scenarios with Locust's class selection.

Usage:
    # All scenarios (web UI):
    locust -f loadtests/locustfile.py --host http://localhost:8000

    # Full checkout journeys only:
    locust -f loadtests/locustfile.py CheckoutUser

    # Many shoppers racing for the last pairs of one variant:
    locust -f loadtests/locustfile.py LastPairsUser

    # Headless (CI mode):
    locust -f loadtests/locustfile.py CheckoutUser --headless \
           -u 50 -r 5 -t 300s --csv=results/loadtest
"""

import logging
import time

from locust import events

# Import all user classes so Locust discovers them
from loadtests.helpers.response import extract_error_detail
from loadtests.scenarios.checkout import CheckoutUser, LastPairsUser, OrderDeskUser  # noqa: F401

logger = logging.getLogger("loadtest")

# Expected refusals under contention; everything else is logged as an error
EXPECTED_STATUSES = {400, 409}


@events.request.add_listener
def on_request(request_type, name, response, exception, **_kw):
    """Log error details for every failed request.

    Extracts the API error envelope so you see "Product ... has only 0 left
    in stock" instead of just "400".
    """
    if exception:
        logger.error("[EXCEPTION] %s %s: %s", request_type, name, exception)
    elif response is not None and response.status_code >= 400:
        detail = extract_error_detail(response)
        level = logging.INFO if response.status_code in EXPECTED_STATUSES else logging.ERROR
        logger.log(level, "[%s] %s %s: %s", response.status_code, request_type, name, detail)


@events.test_start.add_listener
def on_test_start(environment, **_kwargs):
    """Log a marker when load test begins."""
    print(f"\n[LOADTEST] Started at {time.strftime('%H:%M:%S')}")
    print(f"[LOADTEST] Target host: {environment.host}")
    print()


@events.test_stop.add_listener
def on_test_stop(environment, **_kwargs):
    """Print the checkout outcome counts when the test ends."""
    print(f"\n[LOADTEST] Stopped at {time.strftime('%H:%M:%S')}")
    stats = environment.stats.get("POST /orders", "POST")
    print(f"[LOADTEST] Checkouts attempted: {stats.num_requests}, refused: {stats.num_failures}\n")
