from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from tests.fixtures_data import MAMA_CASS_BUSINESS, OWNER_A, OWNER_B, TEST_JWT_SECRET, auth_headers
from whatsorder.core.database import Base, get_db
from whatsorder.core.errors import register_exception_handlers
from whatsorder.core.rate_limiter import InMemoryRateLimiterService
from whatsorder.identity.jwt_provider import JwtIdentityProvider
from whatsorder.identity.service import get_identity_provider
from whatsorder.middleware.public_rate_limit import PublicRateLimitMiddleware
from whatsorder.models.order import Order
from whatsorder.routers.businesses import router as businesses_router
from whatsorder.routers.orders import router as orders_router

ORDER_PAYLOAD = {
    "businessId": 1,
    "customerNote": "12 Allen Avenue, Ikeja",
    "totalPrice": 2500,
    "itemsSummary": "• 2x Egusi — ₦2,000\n• 1x Zobo — ₦500\nTotal: ₦2,500",
}


def _build_client(rate_limiter: InMemoryRateLimiterService | None = None, trusted_proxy_hops: int = 0):
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()

    app = FastAPI()
    if rate_limiter is not None:
        app.add_middleware(
            PublicRateLimitMiddleware, rate_limiter=rate_limiter, trusted_proxy_hops=trusted_proxy_hops
        )
    register_exception_handlers(app)
    app.include_router(businesses_router)
    app.include_router(orders_router)
    app.dependency_overrides[get_db] = lambda: db
    app.dependency_overrides[get_identity_provider] = lambda: JwtIdentityProvider(secret=TEST_JWT_SECRET)
    return TestClient(app), db


def test_order_for_unknown_business_is_accepted_without_credential():
    client, db = _build_client()

    response = client.post("/api/orders", json={**ORDER_PAYLOAD, "businessId": 4242})

    assert response.status_code == 201
    body = response.json()
    assert body["business_id"] == 4242
    assert body["payment_status"] == "pending"
    assert body["total_price"] == 2500
    assert db.query(Order).count() == 1


def test_order_body_is_validated():
    client, db = _build_client()

    missing_summary = client.post("/api/orders", json={"businessId": 1, "totalPrice": 100})
    negative_total = client.post("/api/orders", json={**ORDER_PAYLOAD, "totalPrice": -5})

    assert missing_summary.status_code == 400
    assert missing_summary.json()["code"] == "invalid_input"
    assert negative_total.status_code == 400
    assert db.query(Order).count() == 0


def test_owner_lists_only_own_orders_newest_first():
    client, _db = _build_client()
    business = client.post("/api/businesses", json=MAMA_CASS_BUSINESS, headers=auth_headers(OWNER_A)).json()

    client.post("/api/orders", json={**ORDER_PAYLOAD, "businessId": business["id"], "totalPrice": 100})
    client.post("/api/orders", json={**ORDER_PAYLOAD, "businessId": business["id"], "totalPrice": 200})
    client.post("/api/orders", json={**ORDER_PAYLOAD, "businessId": business["id"] + 1})

    response = client.get("/api/orders/me", headers=auth_headers(OWNER_A))

    assert response.status_code == 200
    assert [order["total_price"] for order in response.json()] == [200, 100]


def test_owner_without_business_gets_empty_order_list():
    client, _db = _build_client()
    client.post("/api/orders", json=ORDER_PAYLOAD)

    response = client.get("/api/orders/me", headers=auth_headers(OWNER_B))

    assert response.status_code == 200
    assert response.json() == []


def test_order_listing_requires_credential():
    client, _db = _build_client()

    assert client.get("/api/orders/me").status_code == 401


def test_public_order_endpoint_is_rate_limited_per_client_and_storefront():
    limiter = InMemoryRateLimiterService(limit=2, window_seconds=60)
    client, db = _build_client(rate_limiter=limiter)

    first = client.post("/api/orders", json=ORDER_PAYLOAD)
    second = client.post("/api/orders", json=ORDER_PAYLOAD)
    blocked = client.post("/api/orders", json=ORDER_PAYLOAD)
    other_storefront = client.post("/api/orders", json={**ORDER_PAYLOAD, "businessId": 2})

    assert first.status_code == 201
    assert second.status_code == 201
    assert blocked.status_code == 429
    assert blocked.json()["code"] == "rate_limited"
    assert int(blocked.headers["Retry-After"]) >= 1
    assert other_storefront.status_code == 201
    assert db.query(Order).count() == 3


def test_forwarded_for_is_ignored_without_trusted_proxy():
    limiter = InMemoryRateLimiterService(limit=1, window_seconds=60)
    client, db = _build_client(rate_limiter=limiter)

    first = client.post("/api/orders", json=ORDER_PAYLOAD, headers={"X-Forwarded-For": "203.0.113.1"})
    rotated = client.post("/api/orders", json=ORDER_PAYLOAD, headers={"X-Forwarded-For": "203.0.113.2"})

    assert first.status_code == 201
    assert rotated.status_code == 429
    assert db.query(Order).count() == 1


def test_forwarded_for_is_read_behind_trusted_proxy():
    limiter = InMemoryRateLimiterService(limit=1, window_seconds=60)
    client, db = _build_client(rate_limiter=limiter, trusted_proxy_hops=1)

    first = client.post("/api/orders", json=ORDER_PAYLOAD, headers={"X-Forwarded-For": "203.0.113.1"})
    spoofed = client.post(
        "/api/orders", json=ORDER_PAYLOAD, headers={"X-Forwarded-For": "198.51.100.7, 203.0.113.1"}
    )
    other_client = client.post("/api/orders", json=ORDER_PAYLOAD, headers={"X-Forwarded-For": "203.0.113.9"})

    assert first.status_code == 201
    assert spoofed.status_code == 429
    assert other_client.status_code == 201
    assert db.query(Order).count() == 2


def test_owner_endpoints_are_not_rate_limited():
    limiter = InMemoryRateLimiterService(limit=1, window_seconds=60)
    client, _db = _build_client(rate_limiter=limiter)
    headers = auth_headers(OWNER_A)

    responses = [client.get("/api/orders/me", headers=headers) for _ in range(3)]

    assert all(response.status_code == 200 for response in responses)
