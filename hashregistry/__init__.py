from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging
from dotenv import load_dotenv
from pathlib import Path

# Load .env from project root
env_path = Path(__file__).resolve().parents[1] / '.env'
load_dotenv(dotenv_path=str(env_path))

from .core.config import settings

# Configure logging
_handlers = [logging.StreamHandler()]
if settings.LOG_FILE:
    _handlers.append(logging.FileHandler(settings.LOG_FILE))
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=_handlers
)
logger = logging.getLogger(__name__)

from .core.errors import RegistryError
from .routes import auth, documents
from .services.registry import Registry
from .storage.kv import create_store


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Document Hash Registry API starting up...")
    logger.info(f"Store backend: {settings.STORE_BACKEND}")
    if settings.AUTO_INITIALIZE and app.state.registry.ensure_initialized():
        logger.info("Registry store initialized with count 0")
    yield
    logger.info("Document Hash Registry API shutting down...")


def create_app(registry: Registry = None) -> FastAPI:
    app = FastAPI(
        title=settings.PROJECT_NAME,
        description="Register document hashes and verify who registered them, and when",
        version=settings.VERSION,
        lifespan=lifespan
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    if registry is None:
        registry = Registry(store=create_store(settings.STORE_BACKEND, settings.STORE_PATH))
    app.state.registry = registry

    # Routers
    app.include_router(documents.router, prefix=f"{settings.API_V1_STR}/documents", tags=["Documents"])
    app.include_router(auth.router, prefix=f"{settings.API_V1_STR}/auth", tags=["Authorization"])
    app.add_exception_handler(RegistryError, documents.registry_error_handler)

    @app.get("/")
    def read_root():
        logger.info("Root endpoint accessed")
        return {"message": "API is running"}

    return app


app = create_app()
