import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from whatsorder.core.config import (
    CORS_ORIGINS,
    DATABASE_URL,
    ENV,
    PUBLIC_ORDER_RATE_LIMIT,
    PUBLIC_ORDER_RATE_LIMIT_ENABLED,
    PUBLIC_ORDER_RATE_WINDOW_SECONDS,
    TRUSTED_PROXY_HOPS,
)
from whatsorder.core.database import Base, engine
from whatsorder.core.errors import register_exception_handlers
from whatsorder.core.logging_setup import configure_logging
from whatsorder.core.rate_limiter import InMemoryRateLimiterService
from whatsorder.core.startup_checks import (
    ensure_migrations_applied,
    validate_database_environment,
    validate_runtime_configuration,
)
from whatsorder.middleware.observability import ObservabilityMiddleware
from whatsorder.middleware.public_rate_limit import PublicRateLimitMiddleware
import whatsorder.models  # registers every table on Base.metadata before create_all

from whatsorder.routers.businesses import router as businesses_router
from whatsorder.routers.categories import router as categories_router
from whatsorder.routers.internal_metrics import router as internal_metrics_router
from whatsorder.routers.orders import router as orders_router
from whatsorder.routers.products import router as products_router
from whatsorder.routers.profile import router as profile_router
from whatsorder.routers.services import router as services_router

configure_logging()

logger = logging.getLogger(__name__)
STARTUP_PREFIX = "[STARTUP]"
ENVIRONMENT = os.getenv("ENVIRONMENT", ENV).strip().lower()
REPO_ROOT = Path(__file__).resolve().parents[1]
ALEMBIC_CONFIG_PATH = Path(
    os.getenv("ALEMBIC_CONFIG", str(REPO_ROOT / "alembic.ini"))
)

public_order_rate_limiter = InMemoryRateLimiterService(
    limit=PUBLIC_ORDER_RATE_LIMIT,
    window_seconds=PUBLIC_ORDER_RATE_WINDOW_SECONDS,
)


@asynccontextmanager
async def lifespan(_: FastAPI):
    _startup_tasks()
    yield


app = FastAPI(
    title="WhatsOrder API",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(
    PublicRateLimitMiddleware,
    rate_limiter=public_order_rate_limiter,
    enabled=PUBLIC_ORDER_RATE_LIMIT_ENABLED,
    trusted_proxy_hops=TRUSTED_PROXY_HOPS,
)
app.add_middleware(ObservabilityMiddleware)
register_exception_handlers(app)


def _startup_tasks() -> None:
    try:
        validate_database_environment()
        validate_runtime_configuration()
        if DATABASE_URL.startswith("sqlite"):
            # Local SQLite databases are created on the fly; other engines go through alembic.
            Base.metadata.create_all(bind=engine)
        else:
            ensure_migrations_applied(engine=engine, alembic_config_path=ALEMBIC_CONFIG_PATH)
        logger.info("%s ready env=%s", STARTUP_PREFIX, ENVIRONMENT)
    except Exception:
        logger.exception("%s ERROR startup failed", STARTUP_PREFIX)
        raise


# Routers
app.include_router(businesses_router)
app.include_router(categories_router)
app.include_router(products_router)
app.include_router(services_router)
app.include_router(orders_router)
app.include_router(profile_router)
app.include_router(internal_metrics_router)


@app.get("/")
def root():
    return {"status": "ok", "service": "whatsorder"}


@app.get("/health")
def health():
    return {"status": "healthy"}
