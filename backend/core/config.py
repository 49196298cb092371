import logging
import os

from dotenv import load_dotenv


load_dotenv()

logger = logging.getLogger(__name__)


def _get_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _get_list(value: str | None, default: list[str]) -> list[str]:
    if not value:
        return default
    return [item.strip() for item in value.split(",") if item.strip()]

APP_ENV = os.getenv("APP_ENV", "development")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./marketplace.db")
DB_POOL_SIZE = int(os.getenv("DB_POOL_SIZE", "10"))
DB_MAX_OVERFLOW = int(os.getenv("DB_MAX_OVERFLOW", "0"))

JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
JWT_EXPIRES_MINUTES = int(os.getenv("JWT_EXPIRES_MINUTES", "60"))

# Only for reproducing the legacy behaviour of signing with a built-in key.
ALLOW_INSECURE_JWT_SECRET = _get_bool(os.getenv("ALLOW_INSECURE_JWT_SECRET"), default=False)
INSECURE_DEFAULT_JWT_SECRET = "mysecretkey"

CORS_ALLOW_ORIGINS = _get_list(os.getenv("CORS_ALLOW_ORIGINS"), default=["http://localhost:3000"])


def get_jwt_secret_key() -> str:
    if JWT_SECRET_KEY:
        return JWT_SECRET_KEY
    if not ALLOW_INSECURE_JWT_SECRET:
        raise RuntimeError("JWT_SECRET_KEY must be set.")
    logger.warning("JWT_SECRET_KEY is not set; signing tokens with the insecure built-in key.")
    return INSECURE_DEFAULT_JWT_SECRET


def validate_runtime_config() -> None:
    secret_key = get_jwt_secret_key()
    if APP_ENV.lower() == "production" and secret_key == INSECURE_DEFAULT_JWT_SECRET:
        raise RuntimeError("JWT_SECRET_KEY must be set in production.")
    if JWT_EXPIRES_MINUTES <= 0:
        raise RuntimeError("JWT_EXPIRES_MINUTES must be a positive number of minutes.")
