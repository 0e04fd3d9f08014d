import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from app.core.cache import CacheAdapter
from app.core.config import settings
from app.core.logging import setup_logging
from shared.errors import SourceFetchError

# Routers
from products.routers.products import router as products_router
from users.routers.users import router as users_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: one cache adapter per process; a dead cache never blocks startup.
    setup_logging(settings)
    cache = CacheAdapter(settings)
    await cache.initialize()
    app.state.cache = cache
    yield
    # Shutdown
    await cache.close()


app = FastAPI(
    title=settings.app_name,
    version="0.1.0",
    debug=settings.debug,
    docs_url="/docs",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)


@app.exception_handler(SourceFetchError)
async def source_fetch_error_handler(request: Request, exc: SourceFetchError):
    logger.error("Route failure on %s %s: %s", request.method, request.url.path, exc, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error"},
    )


@app.get("/health", tags=["system"])
async def health():
    return {"status": "ok", "message": "Backend is healthy"}


app.include_router(products_router)
app.include_router(users_router)
