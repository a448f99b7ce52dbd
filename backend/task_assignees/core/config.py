from dotenv import load_dotenv
import os

load_dotenv()  # Carrega variáveis do .env

TRUTHY_VALUES = {"1", "true", "yes", "sim", "on"}


def parse_boolean(value, default: bool = False) -> bool:
    raw = str(value or "").strip().lower()
    if not raw:
        return default
    return raw in TRUTHY_VALUES


def parse_cors_origins(value: str):
    if not value:
        return []
    if value.strip() == "*":
        return ["*"]
    return [origin.strip() for origin in value.split(",") if origin.strip()]


def normalize_prefix(value: str) -> str:
    prefix = "/" + str(value or "").strip().strip("/")
    return "" if prefix == "/" else prefix


DATABASE_URL = os.getenv("DATABASE_URL")
CUSTOM_EXTENSIONS_ENABLED = parse_boolean(os.getenv("CUSTOM_EXTENSIONS_ENABLED"), default=True)
CUSTOM_API_PREFIX = normalize_prefix(os.getenv("CUSTOM_API_PREFIX", "/api/custom"))
CORS_ORIGINS = os.getenv("CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000")
CORS_ORIGIN_REGEX = os.getenv("CORS_ORIGIN_REGEX") or None
DB_BOOTSTRAP_MODE = str(os.getenv("DB_BOOTSTRAP_MODE", "sync") or "sync").strip().lower()
