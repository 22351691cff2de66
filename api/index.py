"""
Storefront State API - Main FastAPI Application

Single entry point exposing the session cart, wishlist and image cache.
"""
from contextlib import asynccontextmanager

from dotenv import load_dotenv

load_dotenv()

from fastapi import FastAPI  # noqa: E402
from fastapi.middleware.cors import CORSMiddleware  # noqa: E402

from storefront import __version__, config  # noqa: E402
from storefront.logging import get_logger  # noqa: E402
from storefront.routers import router  # noqa: E402
from storefront.routers.deps import close_clients, get_image_cache  # noqa: E402

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler"""
    # Startup
    get_image_cache()
    logger.info(f"Storefront API started (storage={config.STORAGE_BACKEND}, realtime={config.REALTIME_ENABLED})")
    yield
    # Shutdown
    close_clients()


app = FastAPI(
    title="Storefront State API",
    description="Session cart, wishlist and image cache for the storefront",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(router)
