"""
Courier CRM API - Main Application.

FastAPI application with CORS enabled for frontend communication.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api import __version__
from api.settings import get_settings

# Create FastAPI application
app = FastAPI(
    title="Courier CRM API",
    description="REST API for courier job requests, companies and couriers",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
)

# Configure CORS - origins come from CRM_CORS_ORIGINS (all origins by default)
app.add_middleware(
    CORSMiddleware,
    allow_origins=list(get_settings().cors_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health", tags=["Health"])
def health_check():
    """
    Health check endpoint.

    Returns the API status and version.
    """
    return {
        "status": "healthy",
        "version": __version__,
        "service": "courier-crm-api"
    }


@app.get("/", tags=["Root"])
def root():
    """
    Root endpoint with API information.
    """
    return {
        "message": "Courier CRM API",
        "version": __version__,
        "docs": "/docs",
        "health": "/health"
    }


# Import and include routers
from api.routers import companies, couriers, requests

app.include_router(requests.router, prefix="/api/v1", tags=["Requests"])
app.include_router(companies.router, prefix="/api/v1", tags=["Companies"])
app.include_router(couriers.router, prefix="/api/v1", tags=["Couriers"])
