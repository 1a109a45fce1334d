"""
Interpolice Citation Service
Main FastAPI Application Entry Point

Initializes configuration, logging, database, the citation coordinator and
all API routers.
"""

import logging
import time
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from interpolice.citations import LADDER_VERSION
from interpolice.config import configure_logging
from interpolice.errors import ConflictError, NotFoundError

# Load environment variables
load_dotenv()
configure_logging()

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events - startup and shutdown"""
    logger.info("Starting Interpolice citation service")

    # Initialize database
    from interpolice.database.database import SessionLocal, init_db
    init_db()

    # Initialize services
    from interpolice.auth import init_auth_service
    from interpolice.citations import init_citation_coordinator
    init_auth_service()
    init_citation_coordinator(SessionLocal)
    logger.info("Citation coordinator and auth service initialized")

    yield

    logger.info("Interpolice citation service stopped")


app = FastAPI(
    title="Interpolice Citation Service",
    description="Citizen infractions with automatic penalty escalation",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ============================================
# Error Handlers
# ============================================

@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(ConflictError)
async def conflict_handler(request: Request, exc: ConflictError):
    return JSONResponse(status_code=409, content={"detail": str(exc)})


# ============================================
# Include API Routers
# ============================================

from interpolice.api import (  # noqa: E402
    auth_router,
    citizen_router,
    citation_router,
    citation_search_router,
    record_router,
    record_search_router,
)

# Auth routes: /api/auth/*
app.include_router(auth_router)

# Citizen registry: /api/citizens
app.include_router(citizen_router)

# Citations: /api/citizens/{id}/citations, /api/citations/*
app.include_router(citation_router)
app.include_router(citation_search_router)

# Criminal records: /api/citizens/{id}/records, /api/records/*
app.include_router(record_router)
app.include_router(record_search_router)


# ============================================
# Root Endpoints
# ============================================

@app.get("/", tags=["root"])
async def root():
    """Root endpoint - API information"""
    return {
        "name": "Interpolice Citation Service",
        "version": "1.0.0",
        "status": "operational",
        "penalty_ladder_version": LADDER_VERSION,
        "documentation": "/docs",
        "endpoints": {
            "auth": "/api/auth/*",
            "citizens": "/api/citizens",
            "citations": "/api/citizens/{citizen_id}/citations",
            "citation_search": "/api/citations/*",
            "records": "/api/citizens/{citizen_id}/records",
            "record_search": "/api/records/*",
        }
    }


@app.get("/api/health", tags=["health"])
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "timestamp": time.time(),
        "version": "1.0.0",
    }


# ============================================
# Entry Point
# ============================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "interpolice.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info"
    )
