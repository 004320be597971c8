import pytest

from whatsorder.core.errors import ConflictError, InvalidInputError, LimitExceededError, NotFoundError
from whatsorder.services.catalog import CatalogService
from whatsorder.store.memory_store import InMemoryCatalogStore
from whatsorder.store.records import (
    BusinessDraft,
    BusinessUpdate,
    CategoryDraft,
    OrderDraft,
    ProductDraft,
    ServiceDraft,
)

MAMA_CASS = BusinessDraft(name="Mama Cass Kitchen", slug="mama-cass-kitchen", whatsapp_number="2348012345678")
LAGOS_GRILL = BusinessDraft(name="Lagos Grill", slug="lagos-grill", whatsapp_number="2348010000000")


def _service(**kwargs) -> CatalogService:
    return CatalogService(InMemoryCatalogStore(), **kwargs)


def test_one_business_per_owner_and_unique_slug():
    service = _service()
    created = service.create_business("owner-a", MAMA_CASS)

    with pytest.raises(ConflictError):
        service.create_business("owner-a", LAGOS_GRILL)
    with pytest.raises(ConflictError):
        service.create_business("owner-b", MAMA_CASS)

    assert created.plan == "free"
    assert created.currency_symbol == "₦"


def test_store_rejects_duplicate_insert_directly():
    store = InMemoryCatalogStore()
    store.insert_business("owner-a", MAMA_CASS, plan="free", currency_symbol="₦")

    with pytest.raises(ConflictError):
        store.insert_business("owner-b", MAMA_CASS, plan="free", currency_symbol="₦")


def test_product_and_service_caps():
    service = _service(max_products=2, max_services=1)
    service.create_business("owner-a", MAMA_CASS)
    service.create_product("owner-a", ProductDraft(name="Egusi", price=1000))
    service.create_product("owner-a", ProductDraft(name="Zobo", price=500))
    service.create_service("owner-a", ServiceDraft(name="Catering", starting_price=50000))

    with pytest.raises(LimitExceededError):
        service.create_product("owner-a", ProductDraft(name="Puff", price=100))
    with pytest.raises(LimitExceededError):
        service.create_service("owner-a", ServiceDraft(name="Delivery", starting_price=500))

    assert len(service.list_products("owner-a")) == 2
    assert len(service.list_services("owner-a")) == 1


def test_cross_tenant_mutations_are_not_found_and_leave_rows_alone():
    service = _service()
    service.create_business("owner-a", MAMA_CASS)
    service.create_business("owner-b", LAGOS_GRILL)
    product = service.create_product("owner-a", ProductDraft(name="Egusi", price=1000))
    offering = service.create_service("owner-a", ServiceDraft(name="Catering", starting_price=50000))

    with pytest.raises(NotFoundError):
        service.update_product("owner-b", product.id, ProductDraft(name="Hacked", price=1))
    with pytest.raises(NotFoundError):
        service.delete_product("owner-b", product.id)
    with pytest.raises(NotFoundError):
        service.update_service("owner-b", offering.id, ServiceDraft(name="Hacked", starting_price=1))
    with pytest.raises(NotFoundError):
        service.delete_service("owner-b", offering.id)

    assert [item.name for item in service.list_products("owner-a")] == ["Egusi"]
    assert [item.name for item in service.list_services("owner-a")] == ["Catering"]


def test_category_rules():
    service = _service()
    service.create_business("owner-a", MAMA_CASS)
    service.create_business("owner-b", LAGOS_GRILL)
    soups = service.create_category("owner-a", CategoryDraft(name="Soups"))
    service.create_category("owner-a", CategoryDraft(name="Drinks"))
    grills = service.create_category("owner-b", CategoryDraft(name="Grills"))

    with pytest.raises(InvalidInputError):
        service.create_product("owner-a", ProductDraft(name="Suya", price=800, category_id=grills.id))

    egusi = service.create_product("owner-a", ProductDraft(name="Egusi", price=1000, category_id=soups.id))
    service.delete_category("owner-a", soups.id)
    service.delete_category("owner-a", soups.id)
    service.delete_category("owner-a", grills.id)

    assert [category.name for category in service.list_categories("owner-a")] == ["Drinks"]
    assert [category.name for category in service.list_categories("owner-b")] == ["Grills"]
    assert service.list_products("owner-a")[0].id == egusi.id
    assert service.list_products("owner-a")[0].category_id is None


def test_public_catalog_and_updates():
    service = _service()
    service.create_business("owner-a", MAMA_CASS)
    service.create_product("owner-a", ProductDraft(name="Egusi", price=1000))
    service.create_product("owner-a", ProductDraft(name="Zobo", price=500))
    service.update_own_business(
        "owner-a",
        BusinessUpdate(name="Mama Cass", whatsapp_number="2348012345679"),
    )

    snapshot = service.get_public_catalog("mama-cass-kitchen")

    assert snapshot.business.name == "Mama Cass"
    assert snapshot.business.slug == "mama-cass-kitchen"
    assert [product.name for product in snapshot.products] == ["Zobo", "Egusi"]
    with pytest.raises(NotFoundError):
        service.get_public_catalog("unknown")


def test_orders_are_lenient_and_scoped_on_read():
    service = _service()
    business = service.create_business("owner-a", MAMA_CASS)
    service.create_order(OrderDraft(business_id=business.id, total_price=100, items_summary="a"))
    service.create_order(OrderDraft(business_id=999, total_price=200, items_summary="b"))

    orders = service.list_own_orders("owner-a")

    assert [order.items_summary for order in orders] == ["a"]
    assert orders[0].payment_status == "pending"
    assert service.list_own_orders("owner-b") == []


def test_profile_onboarding_flag():
    service = _service()

    assert service.get_profile("owner-a").onboarding_completed is False
    assert service.complete_onboarding("owner-a").onboarding_completed is True
    assert service.get_profile("owner-a").onboarding_completed is True


def test_suggest_slug_falls_back_and_suffixes():
    service = _service()
    service.create_business("owner-a", MAMA_CASS)

    assert service.suggest_slug("Mama Cass Kitchen") == ("mama-cass-kitchen-2", True)
    assert service.suggest_slug("Café Délice") == ("cafe-delice", True)
    assert service.suggest_slug("!!!") == ("my-store", True)
