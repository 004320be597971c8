from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from tests.fixtures_data import (
    MAMA_CASS_BUSINESS,
    OTHER_BUSINESS,
    OWNER_A,
    OWNER_B,
    TEST_JWT_SECRET,
    auth_headers,
    issue_token,
)
from whatsorder.core.database import Base, get_db
from whatsorder.core.errors import register_exception_handlers
from whatsorder.identity.jwt_provider import JwtIdentityProvider
from whatsorder.identity.service import get_identity_provider
from whatsorder.models.category import Category
from whatsorder.models.product import Product
from whatsorder.models.service import Service
from whatsorder.routers.businesses import router as businesses_router


def _build_client():
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()

    app = FastAPI()
    register_exception_handlers(app)
    app.include_router(businesses_router)
    app.dependency_overrides[get_db] = lambda: db
    app.dependency_overrides[get_identity_provider] = lambda: JwtIdentityProvider(secret=TEST_JWT_SECRET)
    return TestClient(app), db


def test_create_business_returns_free_plan_and_repeat_conflicts():
    client, _db = _build_client()

    created = client.post("/api/businesses", json=MAMA_CASS_BUSINESS, headers=auth_headers(OWNER_A))
    repeated = client.post("/api/businesses", json=MAMA_CASS_BUSINESS, headers=auth_headers(OWNER_A))

    assert created.status_code == 201
    body = created.json()
    assert body["plan"] == "free"
    assert body["owner_id"] == OWNER_A
    assert body["slug"] == "mama-cass-kitchen"
    assert body["whatsapp_number"] == "2348012345678"
    assert body["currency_symbol"] == "₦"

    assert repeated.status_code == 400
    assert repeated.json()["code"] == "conflict"


def test_second_owner_cannot_take_existing_slug():
    client, _db = _build_client()
    client.post("/api/businesses", json=MAMA_CASS_BUSINESS, headers=auth_headers(OWNER_A))

    response = client.post(
        "/api/businesses",
        json={**MAMA_CASS_BUSINESS, "name": "Copycat"},
        headers=auth_headers(OWNER_B),
    )

    assert response.status_code == 400
    assert response.json()["code"] == "conflict"


def test_create_business_normalizes_whatsapp_separators():
    client, _db = _build_client()

    response = client.post("/api/businesses", json=OTHER_BUSINESS, headers=auth_headers(OWNER_B))

    assert response.status_code == 201
    assert response.json()["whatsapp_number"] == "2348010000000"
    assert response.json()["description"] == "Suya and more"


def test_create_business_rejects_invalid_input():
    client, db = _build_client()
    headers = auth_headers(OWNER_A)

    cases = [
        {**MAMA_CASS_BUSINESS, "name": "   "},
        {**MAMA_CASS_BUSINESS, "name": "x" * 101},
        {**MAMA_CASS_BUSINESS, "slug": "Mama Cass"},
        {**MAMA_CASS_BUSINESS, "slug": "me"},
        {**MAMA_CASS_BUSINESS, "whatsappNumber": ""},
        {**MAMA_CASS_BUSINESS, "whatsappNumber": "12345"},
        {**MAMA_CASS_BUSINESS, "whatsappNumber": "0801-ABC-4567"},
    ]
    for payload in cases:
        response = client.post("/api/businesses", json=payload, headers=headers)
        assert response.status_code == 400, payload
        assert response.json()["code"] == "invalid_input"

    assert client.get("/api/businesses/me", headers=headers).status_code == 404


def test_owner_endpoints_require_credential():
    client, _db = _build_client()

    missing = client.post("/api/businesses", json=MAMA_CASS_BUSINESS)
    forged = client.get(
        "/api/businesses/me",
        headers={"Authorization": f"Bearer {issue_token(OWNER_A, secret='wrong')}"},
    )

    assert missing.status_code == 401
    assert missing.headers["WWW-Authenticate"] == "Bearer"
    assert missing.json()["code"] == "unauthorized"
    assert forged.status_code == 401


def test_session_cookie_is_accepted_when_header_missing():
    client, _db = _build_client()
    client.post("/api/businesses", json=MAMA_CASS_BUSINESS, headers=auth_headers(OWNER_A))

    client.cookies.set("sb-access-token", issue_token(OWNER_A))
    response = client.get("/api/businesses/me")

    assert response.status_code == 200
    assert response.json()["slug"] == "mama-cass-kitchen"


def test_update_business_keeps_slug_and_clears_omitted_fields():
    client, _db = _build_client()
    headers = auth_headers(OWNER_B)
    client.post("/api/businesses", json=OTHER_BUSINESS, headers=headers)

    response = client.put(
        "/api/businesses",
        json={"name": "Lagos Grill House", "whatsappNumber": "2348010000001", "slug": "ignored"},
        headers=headers,
    )

    assert response.status_code == 200
    body = response.json()
    assert body["name"] == "Lagos Grill House"
    assert body["whatsapp_number"] == "2348010000001"
    assert body["slug"] == "lagos-grill"
    assert body["description"] is None


def test_update_without_business_is_not_found():
    client, _db = _build_client()

    response = client.put(
        "/api/businesses",
        json={"name": "Nobody", "whatsappNumber": "2348010000001"},
        headers=auth_headers(OWNER_A),
    )

    assert response.status_code == 404
    assert response.json()["code"] == "not_found"


def test_public_catalog_by_slug_orders_lists_and_hides_owner():
    client, db = _build_client()
    created = client.post("/api/businesses", json=MAMA_CASS_BUSINESS, headers=auth_headers(OWNER_A)).json()
    business_id = created["id"]

    db.add_all(
        [
            Category(id=1, business_id=business_id, name="Soups"),
            Category(id=2, business_id=business_id, name="Drinks"),
            Product(id=1, business_id=business_id, category_id=1, name="Egusi", price=1000),
            Product(id=2, business_id=business_id, category_id=None, name="Zobo", price=500),
            Service(id=1, business_id=business_id, name="Catering", starting_price=50000),
        ]
    )
    db.commit()

    response = client.get("/api/businesses/mama-cass-kitchen")

    assert response.status_code == 200
    body = response.json()
    assert body["business"]["name"] == "Mama Cass Kitchen"
    assert "owner_id" not in body["business"]
    assert [category["name"] for category in body["categories"]] == ["Drinks", "Soups"]
    assert [product["id"] for product in body["products"]] == [2, 1]
    assert body["services"][0]["starting_price"] == 50000


def test_public_catalog_unknown_slug_is_not_found():
    client, _db = _build_client()

    response = client.get("/api/businesses/does-not-exist")

    assert response.status_code == 404


def test_slug_suggestion_adds_suffix_when_taken():
    client, _db = _build_client()

    free = client.get("/api/businesses/slug-suggestion", params={"name": "Mama Cass Kitchen!"})
    client.post("/api/businesses", json=MAMA_CASS_BUSINESS, headers=auth_headers(OWNER_A))
    taken = client.get("/api/businesses/slug-suggestion", params={"name": "Mama Cass Kitchen"})

    assert free.json() == {"slug": "mama-cass-kitchen", "available": True}
    assert taken.json() == {"slug": "mama-cass-kitchen-2", "available": True}
