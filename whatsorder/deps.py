# whatsorder/deps.py
from __future__ import annotations

import logging

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from whatsorder.core import config
from whatsorder.core.database import get_db
from whatsorder.core.errors import UnauthorizedError
from whatsorder.core.request_context import set_request_context
from whatsorder.identity.base import Identity, IdentityProvider, IdentityVerificationError
from whatsorder.identity.service import IdentityGateway, get_identity_provider
from whatsorder.services.catalog import CatalogService
from whatsorder.store.base import CatalogStore
from whatsorder.store.memory_store import memory_store
from whatsorder.store.sql_store import SqlCatalogStore

logger = logging.getLogger(__name__)


def get_current_identity(
    request: Request,
    provider: IdentityProvider = Depends(get_identity_provider),
) -> Identity:
    """Verifies the caller's credential on every request."""
    gateway = IdentityGateway(provider)
    try:
        identity = gateway.authenticate(
            request.headers.get("Authorization"),
            request.cookies.get(config.AUTH_COOKIE_NAME),
        )
    except IdentityVerificationError as exc:
        logger.info("[IDENTITY] rejected path=%s reason=%s", request.url.path, exc)
        raise UnauthorizedError("Invalid or expired session") from exc

    request.state.owner = identity
    set_request_context(owner_id=identity.subject)
    return identity


def get_owner_id(identity: Identity = Depends(get_current_identity)) -> str:
    return identity.subject


def get_catalog_store(db: Session = Depends(get_db)) -> CatalogStore:
    if config.CATALOG_STORE == "memory":
        return memory_store
    return SqlCatalogStore(db)


def get_catalog_service(
    request: Request,
    store: CatalogStore = Depends(get_catalog_store),
) -> CatalogService:
    def _remember_business(business) -> None:
        request.state.business_id = business.id

    return CatalogService(store, on_business=_remember_business)
