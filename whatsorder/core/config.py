import os
from dotenv import load_dotenv

# Loads .env from the project root
load_dotenv()


def _env_flag(name: str, default: str = "") -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./whatsorder.db")
ENV = os.getenv("ENV", "dev")
ENV_NORMALIZED = ENV.lower()
IS_DEV = ENV_NORMALIZED in {"dev", "development", "local"}
IS_STAGE = ENV_NORMALIZED in {"stage", "staging"}
IS_PROD = ENV_NORMALIZED in {"prod", "production"}

# Persistence adapter: "sql" (SQLAlchemy) or "memory"
CATALOG_STORE = os.getenv("CATALOG_STORE", "sql").strip().lower()

# Catalog caps per tenant
MAX_PRODUCTS_PER_BUSINESS = int(os.getenv("MAX_PRODUCTS_PER_BUSINESS", "50"))
MAX_SERVICES_PER_BUSINESS = int(os.getenv("MAX_SERVICES_PER_BUSINESS", "20"))
DEFAULT_PLAN = os.getenv("DEFAULT_PLAN", "free").strip() or "free"
DEFAULT_CURRENCY_SYMBOL = os.getenv("DEFAULT_CURRENCY_SYMBOL", "₦")

# Identity provider
IDENTITY_PROVIDER = os.getenv("IDENTITY_PROVIDER", "remote").strip().lower()
IDENTITY_PROVIDER_URL = os.getenv("IDENTITY_PROVIDER_URL", "").strip().rstrip("/")
IDENTITY_PROVIDER_API_KEY = os.getenv("IDENTITY_PROVIDER_API_KEY", "").strip()
IDENTITY_PROVIDER_TIMEOUT_SECONDS = float(os.getenv("IDENTITY_PROVIDER_TIMEOUT_SECONDS", "5"))
IDENTITY_JWT_SECRET = os.getenv("IDENTITY_JWT_SECRET", "")
IDENTITY_JWT_ALGORITHM = os.getenv("IDENTITY_JWT_ALGORITHM", "HS256")
IDENTITY_JWT_AUDIENCE = os.getenv("IDENTITY_JWT_AUDIENCE", "").strip() or None
AUTH_COOKIE_NAME = os.getenv("AUTH_COOKIE_NAME", "sb-access-token")

# Public order endpoint protection
PUBLIC_ORDER_RATE_LIMIT = int(os.getenv("PUBLIC_ORDER_RATE_LIMIT", "30"))
PUBLIC_ORDER_RATE_WINDOW_SECONDS = int(os.getenv("PUBLIC_ORDER_RATE_WINDOW_SECONDS", "60"))
PUBLIC_ORDER_RATE_LIMIT_ENABLED = _env_flag("PUBLIC_ORDER_RATE_LIMIT_ENABLED", "1")
# Reverse proxies whose X-Forwarded-For entries are trusted; 0 ignores the header
TRUSTED_PROXY_HOPS = int(os.getenv("TRUSTED_PROXY_HOPS", "0"))

# CORS
_cors_env = os.getenv("CORS_ORIGINS", "")
CORS_ORIGINS = [origin.strip() for origin in _cors_env.split(",") if origin.strip() and origin.strip() != "*"]

if not CORS_ORIGINS and IS_DEV:
    CORS_ORIGINS = [
        "http://localhost:5173",
        "http://localhost:3000",
        "http://127.0.0.1:5173",
    ]
