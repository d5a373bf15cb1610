import os
from dotenv import load_dotenv

# Chargement des variables d'environnement
load_dotenv()


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


SERVICE_NAME = "products-service"

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./products.db")
DATABASE_ECHO = _env_flag("DATABASE_ECHO")
SEED_PRODUCTS = _env_flag("SEED_PRODUCTS")

LOG_FILE = os.getenv("LOG_FILE", "logs.json")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

PORT = int(os.getenv("PORT", 8001))
