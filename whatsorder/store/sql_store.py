from __future__ import annotations

import logging

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from whatsorder.core.errors import ConflictError
from whatsorder.models.business import Business
from whatsorder.models.category import Category
from whatsorder.models.order import Order
from whatsorder.models.product import Product
from whatsorder.models.profile import Profile
from whatsorder.models.service import Service
from whatsorder.store.base import CatalogStore
from whatsorder.store.records import (
    BusinessDraft,
    BusinessRecord,
    BusinessUpdate,
    CategoryDraft,
    CategoryRecord,
    OrderDraft,
    OrderRecord,
    ProductDraft,
    ProductRecord,
    ProfileRecord,
    ServiceDraft,
    ServiceRecord,
)

logger = logging.getLogger(__name__)
STORE_PREFIX = "[CATALOG_STORE]"


def _business_record(row: Business) -> BusinessRecord:
    return BusinessRecord(
        id=row.id,
        owner_id=row.owner_id,
        name=row.name,
        slug=row.slug,
        whatsapp_number=row.whatsapp_number,
        description=row.description,
        logo_url=row.logo_url,
        currency_symbol=row.currency_symbol,
        plan=row.plan,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _category_record(row: Category) -> CategoryRecord:
    return CategoryRecord(id=row.id, business_id=row.business_id, name=row.name, created_at=row.created_at)


def _product_record(row: Product) -> ProductRecord:
    return ProductRecord(
        id=row.id,
        business_id=row.business_id,
        category_id=row.category_id,
        name=row.name,
        price=float(row.price),
        image_url=row.image_url,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _service_record(row: Service) -> ServiceRecord:
    return ServiceRecord(
        id=row.id,
        business_id=row.business_id,
        name=row.name,
        starting_price=float(row.starting_price),
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _order_record(row: Order) -> OrderRecord:
    return OrderRecord(
        id=row.id,
        business_id=row.business_id,
        customer_note=row.customer_note,
        total_price=float(row.total_price or 0),
        items_summary=row.items_summary,
        payment_status=row.payment_status,
        created_at=row.created_at,
    )


def _profile_record(row: Profile) -> ProfileRecord:
    return ProfileRecord(
        owner_id=row.owner_id,
        onboarding_completed=bool(row.onboarding_completed),
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


class SqlCatalogStore(CatalogStore):
    """Relational adapter over a SQLAlchemy session; one commit per write."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def _commit(self) -> None:
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

    # Businesses

    def get_business_by_owner(self, owner_id: str) -> BusinessRecord | None:
        row = self.db.query(Business).filter(Business.owner_id == owner_id).first()
        return _business_record(row) if row else None

    def get_business_by_slug(self, slug: str) -> BusinessRecord | None:
        row = self.db.query(Business).filter(Business.slug == slug).first()
        return _business_record(row) if row else None

    def slug_exists(self, slug: str) -> bool:
        return self.db.query(Business.id).filter(Business.slug == slug).first() is not None

    def insert_business(
        self,
        owner_id: str,
        draft: BusinessDraft,
        *,
        plan: str,
        currency_symbol: str,
    ) -> BusinessRecord:
        row = Business(
            owner_id=owner_id,
            name=draft.name,
            slug=draft.slug,
            whatsapp_number=draft.whatsapp_number,
            description=draft.description,
            logo_url=draft.logo_url,
            currency_symbol=currency_symbol,
            plan=plan,
        )
        self.db.add(row)
        try:
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            logger.info("%s business insert lost uniqueness race slug=%s", STORE_PREFIX, draft.slug)
            raise ConflictError("Business already exists or this link is already taken") from exc
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(row)
        return _business_record(row)

    def update_business(self, business_id: int, update: BusinessUpdate) -> BusinessRecord | None:
        row = self.db.query(Business).filter(Business.id == business_id).first()
        if not row:
            return None
        row.name = update.name
        row.whatsapp_number = update.whatsapp_number
        row.description = update.description
        row.logo_url = update.logo_url
        self._commit()
        self.db.refresh(row)
        return _business_record(row)

    # Categories

    def list_categories(self, business_id: int) -> list[CategoryRecord]:
        rows = (
            self.db.query(Category)
            .filter(Category.business_id == business_id)
            .order_by(Category.name.asc(), Category.id.asc())
            .all()
        )
        return [_category_record(row) for row in rows]

    def get_category(self, business_id: int, category_id: int) -> CategoryRecord | None:
        row = (
            self.db.query(Category)
            .filter(Category.id == category_id, Category.business_id == business_id)
            .first()
        )
        return _category_record(row) if row else None

    def insert_category(self, business_id: int, draft: CategoryDraft) -> CategoryRecord:
        row = Category(business_id=business_id, name=draft.name)
        self.db.add(row)
        self._commit()
        self.db.refresh(row)
        return _category_record(row)

    def delete_category(self, business_id: int, category_id: int) -> bool:
        row = (
            self.db.query(Category)
            .filter(Category.id == category_id, Category.business_id == business_id)
            .first()
        )
        if not row:
            return False
        (
            self.db.query(Product)
            .filter(Product.business_id == business_id, Product.category_id == category_id)
            .update({Product.category_id: None}, synchronize_session=False)
        )
        self.db.delete(row)
        self._commit()
        return True

    # Products

    def list_products(self, business_id: int) -> list[ProductRecord]:
        rows = (
            self.db.query(Product)
            .filter(Product.business_id == business_id)
            .order_by(Product.created_at.desc(), Product.id.desc())
            .all()
        )
        return [_product_record(row) for row in rows]

    def count_products(self, business_id: int) -> int:
        return int(
            self.db.query(func.count(Product.id)).filter(Product.business_id == business_id).scalar() or 0
        )

    def insert_product(self, business_id: int, draft: ProductDraft) -> ProductRecord:
        row = Product(
            business_id=business_id,
            category_id=draft.category_id,
            name=draft.name,
            price=draft.price,
            image_url=draft.image_url,
        )
        self.db.add(row)
        self._commit()
        self.db.refresh(row)
        return _product_record(row)

    def update_product(self, business_id: int, product_id: int, draft: ProductDraft) -> ProductRecord | None:
        row = (
            self.db.query(Product)
            .filter(Product.id == product_id, Product.business_id == business_id)
            .first()
        )
        if not row:
            return None
        row.name = draft.name
        row.price = draft.price
        row.category_id = draft.category_id
        row.image_url = draft.image_url
        self._commit()
        self.db.refresh(row)
        return _product_record(row)

    def delete_product(self, business_id: int, product_id: int) -> bool:
        deleted = (
            self.db.query(Product)
            .filter(Product.id == product_id, Product.business_id == business_id)
            .delete(synchronize_session=False)
        )
        self._commit()
        return bool(deleted)

    # Services

    def list_services(self, business_id: int) -> list[ServiceRecord]:
        rows = (
            self.db.query(Service)
            .filter(Service.business_id == business_id)
            .order_by(Service.created_at.desc(), Service.id.desc())
            .all()
        )
        return [_service_record(row) for row in rows]

    def count_services(self, business_id: int) -> int:
        return int(
            self.db.query(func.count(Service.id)).filter(Service.business_id == business_id).scalar() or 0
        )

    def insert_service(self, business_id: int, draft: ServiceDraft) -> ServiceRecord:
        row = Service(business_id=business_id, name=draft.name, starting_price=draft.starting_price)
        self.db.add(row)
        self._commit()
        self.db.refresh(row)
        return _service_record(row)

    def update_service(self, business_id: int, service_id: int, draft: ServiceDraft) -> ServiceRecord | None:
        row = (
            self.db.query(Service)
            .filter(Service.id == service_id, Service.business_id == business_id)
            .first()
        )
        if not row:
            return None
        row.name = draft.name
        row.starting_price = draft.starting_price
        self._commit()
        self.db.refresh(row)
        return _service_record(row)

    def delete_service(self, business_id: int, service_id: int) -> bool:
        deleted = (
            self.db.query(Service)
            .filter(Service.id == service_id, Service.business_id == business_id)
            .delete(synchronize_session=False)
        )
        self._commit()
        return bool(deleted)

    # Orders

    def insert_order(self, draft: OrderDraft) -> OrderRecord:
        row = Order(
            business_id=draft.business_id,
            customer_note=draft.customer_note,
            total_price=draft.total_price,
            items_summary=draft.items_summary,
            payment_status="pending",
        )
        self.db.add(row)
        self._commit()
        self.db.refresh(row)
        return _order_record(row)

    def list_orders(self, business_id: int) -> list[OrderRecord]:
        rows = (
            self.db.query(Order)
            .filter(Order.business_id == business_id)
            .order_by(Order.created_at.desc(), Order.id.desc())
            .all()
        )
        return [_order_record(row) for row in rows]

    # Profiles

    def _get_or_create_profile_row(self, owner_id: str) -> Profile:
        row = self.db.query(Profile).filter(Profile.owner_id == owner_id).first()
        if row:
            return row
        row = Profile(owner_id=owner_id, onboarding_completed=False)
        self.db.add(row)
        try:
            self.db.commit()
        except IntegrityError:
            # Created concurrently by another request for the same owner.
            self.db.rollback()
            return self.db.query(Profile).filter(Profile.owner_id == owner_id).one()
        self.db.refresh(row)
        return row

    def get_or_create_profile(self, owner_id: str) -> ProfileRecord:
        return _profile_record(self._get_or_create_profile_row(owner_id))

    def set_onboarding_completed(self, owner_id: str, completed: bool = True) -> ProfileRecord:
        row = self._get_or_create_profile_row(owner_id)
        row.onboarding_completed = completed
        self._commit()
        self.db.refresh(row)
        return _profile_record(row)
