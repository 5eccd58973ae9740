import os


def _as_bool(value) -> bool:
    return str(value).strip().lower() in ("1", "true", "yes", "on")


class Settings:
    # API
    API_V1_STR = "/api/v1"
    PROJECT_NAME = "Document Hash Registry API"
    VERSION = "1.0.0"

    # CORS
    ALLOWED_ORIGINS = [o.strip() for o in os.getenv("ALLOWED_ORIGINS", "*").split(",") if o.strip()]

    # Storage: "memory" or "json"
    STORE_BACKEND = os.getenv("STORE_BACKEND", "memory").lower()
    STORE_PATH = os.getenv("STORE_PATH", "./data/registry.json")

    # Run initialize() on startup when the store has never been initialized
    AUTO_INITIALIZE = _as_bool(os.getenv("AUTO_INITIALIZE", "true"))

    # Logging
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
    LOG_FILE = os.getenv("LOG_FILE", "")

# Create settings instance
settings = Settings()
