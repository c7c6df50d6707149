"""
Member Portal API application.

Serves the action gateway at /exec (the shape the member pages already call)
and the same operations as REST-style routes under /api/v1. Every outcome,
failures included, is answered with HTTP 200 and a success flag.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src.services.gateway_service import INTERNAL_ERROR_PREFIX, failure
from .v1.router import router as v1_router
from .v1 import gateway
from .deps import get_services, close_services

logger = logging.getLogger(__name__)

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S"
)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """Open the store connection once; tables are still read per request."""
    services = get_services()
    logger.info(f"Member Portal API ready (store: {services.config.store.backend})")

    yield

    close_services()
    logger.info("Member Portal API stopped")


app = FastAPI(
    title="Member Portal API",
    description="Member login, directory and profile lookup backed by spreadsheet tables",
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json"
)

# Static member pages call the API cross-origin
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)


# Failures never surface as HTTP errors
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=200,
        content=failure(f"{INTERNAL_ERROR_PREFIX}{exc}")
    )


@app.get("/health", tags=["System"])
async def health_check():
    """Liveness probe; does not touch the store."""
    return {"status": "healthy", "service": "member-portal-api"}


# Web app style entry point: /exec?action=...
app.include_router(gateway.router, prefix="/exec", tags=["Gateway"])

# REST-style routes
app.include_router(v1_router, prefix="/api/v1")


@app.get("/", tags=["System"])
async def root():
    return {
        "name": "Member Portal API",
        "version": "1.0.0",
        "gateway": "/exec",
        "docs": "/docs"
    }
