import os
from pathlib import Path

from dotenv import load_dotenv


# A .env next to the package is authoritative for local development, so it
# overrides anything already exported in the shell.
env_path = Path(__file__).resolve().parents[2] / ".env"
if env_path.exists():
    load_dotenv(env_path, override=True)


def _flag(name: str, default: str) -> bool:
    return str(os.getenv(name, default)).strip().lower() in {"1", "true", "yes", "on"}


class Settings:
    """Lightweight settings loader using environment variables."""

    raw_db = os.getenv("DATABASE_URL", "sqlite:///./pizza_store.db")
    # tolerate a duplicated "DATABASE_URL=" prefix coming from a malformed .env
    if isinstance(raw_db, str) and raw_db.startswith("DATABASE_URL="):
        raw_db = raw_db.split("=", 1)[1]
    DATABASE_URL: str = raw_db

    APP_ENV: str = os.getenv("APP_ENV", os.getenv("ENV", "development")).lower()
    _default_pool_size = 5 if APP_ENV == "development" else 10
    _default_max_overflow = 2 if APP_ENV == "development" else 20
    _default_pool_recycle = 900 if APP_ENV == "development" else 1800

    DB_POOL_SIZE: int = int(os.getenv("DB_POOL_SIZE", str(_default_pool_size)))
    DB_MAX_OVERFLOW: int = int(os.getenv("DB_MAX_OVERFLOW", str(_default_max_overflow)))
    DB_POOL_RECYCLE: int = int(os.getenv("DB_POOL_RECYCLE", str(_default_pool_recycle)))  # seconds

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
    # Log pool connect events every N occurrences
    DB_LOG_EVERY_N: int = int(os.getenv("DB_LOG_EVERY_N", "50"))
    REQUEST_LOG_VERBOSE: bool = _flag("REQUEST_LOG_VERBOSE", "0")
    REQUEST_LOG_INCLUDE_PREFIXES: str = os.getenv("REQUEST_LOG_INCLUDE_PREFIXES", "/orders,/specials,/toppings")

    CORS_ORIGINS: str = os.getenv(
        "CORS_ORIGINS",
        "http://localhost:8080,http://127.0.0.1:8080,http://localhost:5173,http://127.0.0.1:5173",
    )

    # Time zone used when rendering order times back to clients
    STORE_TIMEZONE: str = os.getenv("STORE_TIMEZONE", "UTC")

    # Order progress milestones, measured from the order's creation time
    ORDER_PLACED_SECONDS: int = int(os.getenv("ORDER_PLACED_SECONDS", "5"))
    ORDER_PREPARATION_SECONDS: int = int(os.getenv("ORDER_PREPARATION_SECONDS", "10"))
    ORDER_DELIVERY_SECONDS: int = int(os.getenv("ORDER_DELIVERY_SECONDS", "60"))

    MAX_TOPPINGS: int = int(os.getenv("MAX_TOPPINGS", "6"))

    # Seed Specials/Toppings at startup when the catalog is empty
    SEED_CATALOG: bool = _flag("SEED_CATALOG", "1")


settings = Settings()
