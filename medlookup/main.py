"""FastAPI application for the Medication Lookup API.

This module provides the main FastAPI application instance with CORS
middleware configuration, router registration and the startup hook that
loads the curated medications and enriches them from openFDA.
"""

# Load environment variables before any other imports
from dotenv import load_dotenv

load_dotenv()

import logging
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from medlookup.core import config
from medlookup.repositories.medication_repository import MedicationStore
from medlookup.routers import medications
from medlookup.services import HybridLoader, get_data_aggregator, get_openfda_service, load_curated_medications


# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# API version and metadata
API_VERSION = "0.1.0"
API_TITLE = "Medication Lookup API"
API_DESCRIPTION = """
Medication Lookup API.

This API provides endpoints for:
- Listing clinically reviewed (curated) medications
- Looking up a single medication by id
- Searching curated medications together with openFDA drug labels
"""


async def load_medications(store: MedicationStore) -> int:
    """Load the curated dataset into ``store``, enriching it from openFDA.

    Returns:
        Number of medications in the store afterwards.
    """
    curated = load_curated_medications(config.MEDICATIONS_CSV_PATH)

    if not config.ENRICH_ON_STARTUP:
        aggregator = get_data_aggregator()
        store.set_medications(aggregator.tag(med, "curated") for med in curated)
        logger.info("openFDA enrichment disabled - serving curated data only")
        return len(store)

    loader = HybridLoader(get_openfda_service())
    try:
        return await loader.populate(store, curated)
    except Exception as e:
        logger.exception(f"openFDA enrichment failed, starting with no medications: {e}")
        store.set_medications([])
        return 0


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan context manager.

    Loads and enriches the curated medications before the application
    starts serving requests, and closes the openFDA client on shutdown.

    Args:
        app: The FastAPI application instance.

    Yields:
        None after startup is complete.
    """
    service = get_openfda_service()
    if not service.is_configured:
        logger.warning("OPENFDA_API_KEY not set - openFDA requests are rate limited")

    count = await load_medications(app.state.medication_store)
    logger.info(f"Application startup complete ({count} medications loaded)")

    yield

    logger.info("Shutting down application...")
    await get_openfda_service().close()
    logger.info("openFDA service closed")


# Create FastAPI application instance
app = FastAPI(
    title=API_TITLE,
    description=API_DESCRIPTION,
    version=API_VERSION,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
)

# The curated store lives for the lifetime of the application
app.state.medication_store = MedicationStore()


# Configure CORS middleware
# Allow requests from Vite dev server (localhost:5173) by default
# Can be overridden via CORS_ORIGINS environment variable (comma-separated list)
_default_origins = [
    "http://localhost:5173",  # Vite dev server
    "http://127.0.0.1:5173",  # Vite dev server (alternative)
    "http://localhost:3000",  # Alternative dev server
    "http://127.0.0.1:3000",  # Alternative dev server
]

if config.CORS_ORIGINS:
    ALLOWED_ORIGINS = [
        origin.strip() for origin in config.CORS_ORIGINS.split(",") if origin.strip()
    ]
else:
    ALLOWED_ORIGINS = _default_origins

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "OPTIONS"],
    allow_headers=[
        "Content-Type",
        "Accept",
        "Origin",
        "X-Requested-With",
    ],
    expose_headers=["Content-Length", "Content-Type"],
)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Return a generic 500 body for unexpected errors."""
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


@app.get("/", tags=["Root"])
async def root() -> dict[str, Any]:
    """Root endpoint returning API information.

    Returns:
        Dict containing API metadata including name, version,
        description, and available documentation URLs.
    """
    return {
        "name": API_TITLE,
        "version": API_VERSION,
        "description": "Medication lookup backed by curated data and openFDA",
        "docs": {
            "swagger": "/docs",
            "redoc": "/redoc",
            "openapi": "/openapi.json",
        },
        "status": "operational",
    }


@app.get("/health", tags=["Health"])
async def health_check() -> dict[str, str]:
    """Health check endpoint for monitoring and load balancers.

    Returns:
        Dict with status indicating the API is healthy.
    """
    return {"status": "healthy"}


# Router registration
app.include_router(medications.router, prefix="/api", tags=["medications"])
