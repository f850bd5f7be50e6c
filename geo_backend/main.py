"""
FastAPI application entry point for the GEO Metrics API.

Configures logging and CORS, opens the database pool for the application's
lifetime, and registers the calculation routers.

Run locally:
    uvicorn geo_backend.main:app --reload
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from geo_backend import __version__
from geo_backend.api import api_router
from geo_backend.core.config import get_settings
from geo_backend.core.database import init_db, close_db

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Open the asyncpg pool before serving and close it on shutdown."""
    logger.info(f"GEO Metrics API {__version__} starting")
    try:
        await init_db()
        logger.info("asyncpg pool ready")
    except Exception as e:
        # Requests retry pool creation through get_db_pool()
        logger.error(f"Could not open the asyncpg pool at startup: {e}")

    yield

    logger.info("GEO Metrics API stopping")
    try:
        await close_db()
    except Exception as e:
        logger.error(f"Could not close the asyncpg pool: {e}")


app = FastAPI(
    title="GEO Metrics API",
    version=__version__,
    description=(
        "Brand monitoring metrics for large-language-model answers. "
        "Computes the GEO score, the IGO indices and cross-provider "
        "hallucination risk from collected mention records."
    ),
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router)


@app.get("/health")
async def health_check():
    """Liveness probe; does not touch the database."""
    return {"status": "healthy"}


@app.get("/")
async def root():
    """Service name, version and where the OpenAPI docs live."""
    return {
        "name": "GEO Metrics API",
        "version": __version__,
        "docs": "/docs",
        "openapi": "/openapi.json",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("geo_backend.main:app", host="0.0.0.0", port=8000, reload=True)
