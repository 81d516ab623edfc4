"""
End-to-end tests for catalog reads and writes through the wired tiers.
"""

from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from beautycatalog.application.dto.catalog_payloads import (
    ProductCreatePayload,
    ProductUpdatePayload,
    ServiceCreatePayload,
    ServiceUpdatePayload,
)
from beautycatalog.application.exceptions import AbortedError, MutationError
from beautycatalog.application.utils.cancellation import CancellationToken
from beautycatalog.domain.entities.catalog import CatalogService
from beautycatalog.domain.entities.catalog_filters import CatalogFilters


def _services(facade, filters=None, token=None):
    return asyncio.run(facade.fetch_catalog_services(filters, cancellation=token))


def _products(facade, filters=None, token=None):
    return asyncio.run(facade.fetch_catalog_products(filters, cancellation=token))


def test_at_home_services_come_only_from_specialized_endpoint(make_facade, upstream, datastore):
    """Test that at-home services are served by the specialized endpoint alone."""
    upstream.envelope(
        "/customer/athome/services",
        [
            {"id": "ah-2", "name": "Home Mani", "price": 25, "duration_minutes": 40},
            {"id": "ah-1", "name": "Home Facial", "price": "55.5"},
        ],
    )
    datastore.insert("service_catalog", {"id": "s1", "name": "Salon Facial", "is_active": True})

    services = _services(make_facade(), CatalogFilters(is_at_home=True))

    assert [s.id for s in services] == ["ah-2", "ah-1"]
    assert all(s.allows_products for s in services)
    assert services[0].duration == 40
    assert services[1].customer_price == 55.5
    assert upstream.paths == ["/customer/athome/services"]
    assert datastore.queries == []


def test_scenario_primary_datastore_matches_facial(make_facade, upstream, datastore):
    """Test that the primary datastore answers a search with active, name-ordered matches."""
    for row in [
        {"id": "3", "name": "Oxygen Facial", "description": "Hydration", "customer_price": 80, "is_active": True},
        {"id": "1", "name": "Classic Facial", "description": "Cleanse", "customer_price": 50, "is_active": True},
        {"id": "2", "name": "Peel", "description": "Facial peel", "customer_price": 70, "is_active": True},
        {"id": "4", "name": "Retired Facial", "description": None, "is_active": False},
        {"id": "5", "name": "Pedicure", "description": "Feet", "is_active": True},
    ]:
        datastore.insert("service_catalog", row)

    services = _services(make_facade(), CatalogFilters(search="facial"))

    assert [s.name for s in services] == ["Classic Facial", "Oxygen Facial", "Peel"]
    assert all(s.is_active is True for s in services)
    assert upstream.requests == []


def test_scenario_primary_unreachable_backend_answers(make_facade, upstream, datastore):
    """Test that the backend answers when the primary datastore is down."""
    datastore.fail("service_catalog")
    upstream.envelope("/catalog/services", [{"id": "x", "name": "Mani", "customerPrice": 20}])

    services = _services(make_facade())

    assert services == [
        CatalogService(
            id="x",
            name="Mani",
            slug=None,
            description=None,
            duration=60,
            customer_price=20.0,
            vendor_payout=0.0,
            category=None,
            icon=None,
            allows_products=False,
            is_active=True,
            products=(),
        )
    ]
    assert [q.table for q in datastore.queries] == ["service_catalog"]


def test_scenario_all_service_tiers_empty_or_failing(make_facade, upstream, datastore):
    """Test that exhausting every tier yields an empty list."""
    datastore.fail("services")
    upstream.on("GET", "/catalog/services", httpx.Response(503, text="unavailable"))

    services = _services(make_facade(), CatalogFilters(is_at_home=True))

    assert services == []
    assert upstream.paths == ["/customer/athome/services", "/catalog/services"]
    assert [q.table for q in datastore.queries] == ["service_catalog", "services"]


def test_legacy_tier_is_the_floor(make_facade, upstream, datastore):
    """Test that the legacy tables answer when everything above is empty."""
    upstream.envelope("/catalog/services", [], success=False)
    datastore.insert(
        "services",
        {
            "id": "legacy-1",
            "name": "Old Wax",
            "price": "42.50",
            "is_active": True,
            "service_category_map": [{"service_categories": {"name": "Waxing"}}],
        },
    )

    services = _services(make_facade())

    assert len(services) == 1
    assert services[0].customer_price == 42.5
    assert services[0].vendor_payout == 42.5
    assert services[0].category == "Waxing"


def test_products_explicitly_active_only_trust_empty_primary(make_facade, upstream, datastore):
    """Test that an explicit active-only product query trusts an empty primary result."""
    upstream.envelope("/catalog/products", [{"id": "p1", "name": "Mask", "isActive": True}])

    products = _products(make_facade(), CatalogFilters(show_inactive=False))

    assert products == []
    assert upstream.requests == []
    assert [q.table for q in datastore.queries] == ["product_catalog"]


def test_products_without_show_inactive_fall_through(make_facade, upstream, datastore):
    """Test that products fall through to the backend when show_inactive is absent."""
    upstream.envelope("/catalog/products", [{"id": "p1", "name": "Mask", "customer_price": "5"}])

    products = _products(make_facade())

    assert [p.id for p in products] == ["p1"]
    assert products[0].is_active is False
    assert upstream.paths == ["/catalog/products"]


def test_services_empty_primary_always_falls_through(make_facade, upstream, datastore):
    """Test that an empty primary service result always falls through."""
    upstream.envelope("/catalog/services", [{"id": "x", "name": "Mani"}])

    services = _services(make_facade(), CatalogFilters(show_inactive=False))

    assert [s.id for s in services] == ["x"]


def test_at_home_products_use_specialized_endpoint(make_facade, upstream, datastore):
    """Test that at-home products come from the specialized endpoint."""
    upstream.envelope("/customer/athome/products", [{"id": "p9", "name": "Home Kit", "price": 15}])

    products = _products(make_facade(), CatalogFilters(is_at_home=True))

    assert [p.id for p in products] == ["p9"]
    assert products[0].is_active is True
    assert datastore.queries == []


def test_repeated_fetches_are_identical(make_facade, datastore):
    """Test that the same query twice gives the same result."""
    datastore.insert("service_catalog", {"id": "1", "name": "Brow", "customer_price": "12", "is_active": True})
    datastore.insert("service_catalog", {"id": "2", "name": "Arms", "customer_price": 30, "is_active": True})
    facade = make_facade()

    first = _services(facade, CatalogFilters(search="r"))
    second = _services(facade, CatalogFilters(search="r"))

    assert first == second
    assert [s.name for s in first] == ["Arms", "Brow"]


def test_cancelled_before_start_makes_no_upstream_call(make_facade, upstream, datastore):
    """Test that a pre-cancelled token stops reads before any upstream call."""
    token = CancellationToken()
    token.cancel()

    with pytest.raises(AbortedError):
        _services(make_facade(), CatalogFilters(is_at_home=True), token)
    with pytest.raises(AbortedError):
        _products(make_facade(), None, token)

    assert upstream.requests == []
    assert datastore.queries == []


def test_cancel_while_backend_hangs_skips_legacy_tier(make_facade, upstream, datastore):
    """Test that cancelling during a slow backend call skips the remaining tiers."""
    async def hang(request):
        await asyncio.sleep(5)
        return httpx.Response(200, json={"success": True, "data": []})

    upstream.on("GET", "/catalog/services", hang)

    async def scenario():
        token = CancellationToken()
        asyncio.get_running_loop().call_later(0.05, token.cancel, "unmounted")
        return await make_facade().fetch_catalog_services(cancellation=token)

    with pytest.raises(AbortedError, match="unmounted"):
        asyncio.run(scenario())
    assert [q.table for q in datastore.queries] == ["service_catalog"]


def test_update_product_surfaces_body_as_error(make_facade, upstream):
    """Test that a failed update raises with the response body."""
    upstream.on("PUT", "/catalog/products/p1", httpx.Response(404, text="not found"))

    with pytest.raises(MutationError) as exc_info:
        asyncio.run(make_facade().update_catalog_product("p1", ProductUpdatePayload(name="Mask")))

    assert str(exc_info.value) == "not found"
    assert exc_info.value.status_code == 404
    assert len(upstream.requests) == 1


def test_create_service_posts_camel_case_with_auth(make_facade, upstream):
    """Test that creates post a camelCase body with the session token."""
    upstream.on(
        "POST",
        "/catalog/services",
        httpx.Response(
            201,
            json={"success": True, "data": {"id": "new", "name": "Lash Lift", "customerPrice": 45, "vendorPayout": 30}},
        ),
    )

    created = asyncio.run(
        make_facade().create_catalog_service(
            ServiceCreatePayload(name="Lash Lift", customer_price=45, vendor_payout=30, allows_products=True)
        )
    )

    assert created.id == "new"
    assert created.vendor_payout == 30.0
    request = upstream.requests[0]
    assert request.headers["Authorization"] == "Bearer session-token"
    assert request.headers["Content-Type"] == "application/json"
    assert json.loads(request.content) == {
        "name": "Lash Lift",
        "customerPrice": 45.0,
        "vendorPayout": 30.0,
        "allowsProducts": True,
    }


def test_update_service_sends_only_set_fields(make_facade, upstream):
    """Test that updates send only the fields that were set."""
    upstream.on("PUT", "/catalog/services/s1", httpx.Response(200, json={"success": True}))

    updated = asyncio.run(
        make_facade().update_catalog_service("s1", ServiceUpdatePayload(is_active=False, description=None))
    )

    assert updated is None
    assert json.loads(upstream.requests[0].content) == {"isActive": False, "description": None}


def test_delete_sends_auth_without_body(make_facade, upstream):
    """Test that deletes carry auth and no body."""
    upstream.on("DELETE", "/catalog/products/p1", httpx.Response(204))

    assert asyncio.run(make_facade().delete_catalog_product("p1")) is None

    request = upstream.requests[0]
    assert request.headers["Authorization"] == "Bearer session-token"
    assert "Content-Type" not in request.headers
    assert request.content == b""


def test_mutation_without_session_has_no_auth_header(make_facade, upstream):
    """Test that writes without a session send no Authorization header."""
    upstream.on("POST", "/catalog/products", httpx.Response(401, text="unauthorized"))

    with pytest.raises(MutationError, match="unauthorized"):
        asyncio.run(
            make_facade(token=None).create_catalog_product(
                ProductCreatePayload(name="Mask", customer_price=5, vendor_payout=3)
            )
        )
    assert "Authorization" not in upstream.requests[0].headers


def test_delete_service_failure_is_not_retried(make_facade, upstream, datastore):
    """Test that a failed delete is neither retried nor routed to a fallback."""
    upstream.on("DELETE", "/catalog/services/s1", httpx.Response(500, text="db locked"))

    with pytest.raises(MutationError, match="db locked"):
        asyncio.run(make_facade().delete_catalog_service("s1"))
    assert len(upstream.requests) == 1
    assert datastore.queries == []


def test_redirected_update_is_a_failure(make_facade, upstream):
    """Test that a 302 answer to a write raises instead of reporting success."""
    upstream.on("PUT", "/catalog/products/p1", httpx.Response(302, text="moved", headers={"Location": "/login"}))

    with pytest.raises(MutationError, match="moved") as exc_info:
        asyncio.run(make_facade().update_catalog_product("p1", ProductUpdatePayload(customer_price=12)))

    assert exc_info.value.status_code == 302
    assert len(upstream.requests) == 1


def test_not_modified_delete_is_a_failure(make_facade, upstream):
    """Test that a 304 answer to a delete raises MutationError."""
    upstream.on("DELETE", "/catalog/services/s1", httpx.Response(304))

    with pytest.raises(MutationError) as exc_info:
        asyncio.run(make_facade().delete_catalog_service("s1"))

    assert exc_info.value.status_code == 304


def test_redirected_backend_read_falls_through_to_legacy(make_facade, upstream, datastore):
    """Test that a redirected backend read counts as a tier failure, not as an envelope."""
    upstream.on(
        "GET",
        "/catalog/services",
        httpx.Response(302, json={"success": True, "data": [{"id": "x", "name": "Mani"}]}),
    )
    datastore.insert("services", {"id": "legacy-1", "name": "Old Wax", "price": 10, "is_active": True})

    services = _services(make_facade())

    assert [s.id for s in services] == ["legacy-1"]
