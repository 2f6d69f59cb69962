# storefront/main.py
from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from storefront.core.config import get_settings
from storefront.database import open_stores
from storefront.repositories.record_store import PersistenceError

# Routers
from storefront.routers.products import router as products_router
from storefront.routers.categories import router as categories_router
from storefront.routers.cart import router as cart_router
from storefront.routers.orders import router as orders_router

settings = get_settings()

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("uvicorn")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Startup:
      - Open the JSON stores under DATA_DIR (seeding the catalog if needed).

    Shutdown:
      - Nothing to release; every write is already on disk.
    """
    current = get_settings()
    logger.info(f"🔄 Startup: opening JSON stores in {current.DATA_DIR.resolve()}...")
    try:
        app.state.stores = open_stores(current)
        logger.info("✅ Startup: stores ready.")
    except Exception as e:
        logger.error(f"❌ Startup: could not open stores: {e}")
        raise
    yield


app = FastAPI(
    title=settings.PROJECT_NAME or "Storefront API",
    version="0.1.0",
    lifespan=lifespan,
)


# --- CORS configuration ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# --- Error mapping ---
@app.exception_handler(PersistenceError)
async def persistence_error_handler(request: Request, exc: PersistenceError):
    # Details are in the server log; the client only learns the write failed.
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Failed to save changes"},
    )


@app.exception_handler(ValidationError)
async def record_validation_error_handler(request: Request, exc: ValidationError):
    # Raised by a store when merged fields do not form a valid record.
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": jsonable_encoder(exc.errors(include_url=False, include_context=False))},
    )


# Versioned API prefix, e.g. /api/v1
app.include_router(products_router, prefix=settings.API_V1_STR)
app.include_router(categories_router, prefix=settings.API_V1_STR)
app.include_router(cart_router, prefix=settings.API_V1_STR)
app.include_router(orders_router, prefix=settings.API_V1_STR)


@app.get("/")
def root():
    """Health check endpoint."""
    return {"status": "ok", "service": "storefront"}
