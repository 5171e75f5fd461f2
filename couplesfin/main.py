"""
Couples Finance Core FastAPI application.

Run with:
    uvicorn couplesfin.main:app
or
    couplesfin-api [--test]
"""
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from couplesfin.api.v1.router import router as api_v1_router
from couplesfin.config import get_settings, is_test_mode, set_test_mode
from couplesfin.logging_config import configure_logging, get_logger

# Must run before settings are read
if "--test" in sys.argv:
    set_test_mode(True)
    sys.argv.remove("--test")

settings = get_settings()

configure_logging(settings.LOG_LEVEL, enable_file_logging=settings.LOG_TO_FILE)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    logger.info(
        "Starting Couples Finance Core",
        version=settings.VERSION,
        base_currency=settings.BASE_CURRENCY,
        test_mode=is_test_mode(),
        )
    yield
    logger.info("Shutting down Couples Finance Core")


app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    openapi_url=f"{settings.API_V1_PREFIX}/openapi.json",
    docs_url=f"{settings.API_V1_PREFIX}/docs",
    redoc_url=f"{settings.API_V1_PREFIX}/redoc",
    lifespan=lifespan,
    )

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.BACKEND_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    )

app.include_router(api_v1_router, prefix=settings.API_V1_PREFIX)


@app.get("/")
async def root():
    """
    Root endpoint.
    Provides basic API information.
    """
    return {
        "name": settings.PROJECT_NAME,
        "version": settings.VERSION,
        "docs": f"{settings.API_V1_PREFIX}/docs",
        }


def run():
    """Console entry point: serve the API with uvicorn on settings.PORT."""
    uvicorn.run("couplesfin.main:app", host="0.0.0.0", port=settings.PORT)


if __name__ == "__main__":
    run()
