# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the HeyProData API.
# It configures the FastAPI application with middleware, routers, and handlers.
#
# Usage:
#   uvicorn app.main:app --reload
# =============================================================================

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import settings
from app.exceptions import (
    HeyProException,
    heypro_exception_handler,
    http_exception_handler,
    unhandled_exception_handler,
    validation_exception_handler,
)
from app.routers import (
    applications,
    availability,
    collab,
    contacts,
    gigs,
    health,
    notifications,
    profile,
    slate,
    upload,
)
from app.auth import routes as auth_routes

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    The database client is created lazily on first use, so startup only
    reports configuration.
    """
    logger.info(f"Starting HeyProData API in {settings.ENVIRONMENT} mode")
    logger.info(f"CORS origins: {settings.cors_origins_list}")

    yield

    logger.info("Shutting down HeyProData API")


# Create FastAPI application
app = FastAPI(
    title="HeyProData API",
    description="""
## Crew & Gig Marketplace API

Profiles, gigs and applications, crew availability, collabs, the slate
feed and notifications for film and media professionals.

### Conventions

- Authenticate with `Authorization: Bearer <Supabase access token>`
- Every response is an envelope:
  - success: `{"success": true, "message": "...", "data": ...}`
  - failure: `{"success": false, "error": "...", "details": ...}`
- Lists take `page` and `limit` and return a `pagination` block
""",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {"name": "Auth", "description": "Token verification and current user"},
        {"name": "Profile", "description": "The caller's profile and roles"},
        {"name": "Gigs", "description": "Browse, post and manage gigs"},
        {"name": "Applications", "description": "The caller's gig applications"},
        {"name": "Availability", "description": "Crew availability calendar"},
        {"name": "Contacts", "description": "Crew contacts per gig"},
        {"name": "Collab", "description": "Creative collaboration posts"},
        {"name": "Notifications", "description": "Notification inbox"},
        {"name": "Slate", "description": "Social feed posts and likes"},
        {"name": "Upload", "description": "Photo and media uploads"},
        {"name": "Health", "description": "API health and readiness checks"},
    ],
)


# =============================================================================
# Middleware
# =============================================================================

# CORS middleware - allows cross-origin requests
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list if settings.is_production else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Exception Handlers
# =============================================================================

@app.exception_handler(HeyProException)
async def handle_heypro_exception(request: Request, exc: HeyProException):
    """Handle request contract exceptions raised by services and auth."""
    return await heypro_exception_handler(request, exc)


@app.exception_handler(RequestValidationError)
async def handle_validation_error(request: Request, exc: RequestValidationError):
    return await validation_exception_handler(request, exc)


@app.exception_handler(StarletteHTTPException)
async def handle_http_exception(request: Request, exc: StarletteHTTPException):
    return await http_exception_handler(request, exc)


@app.exception_handler(Exception)
async def handle_general_exception(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    return await unhandled_exception_handler(request, exc)


# =============================================================================
# Routers
# =============================================================================

API_PREFIX = "/api"

# Authentication endpoints
app.include_router(auth_routes.router, prefix=f"{API_PREFIX}/auth", tags=["Auth"])

# Health check endpoints
app.include_router(health.router, prefix=API_PREFIX, tags=["Health"])

# Profile endpoints
app.include_router(profile.router, prefix=f"{API_PREFIX}/profile", tags=["Profile"])

# Gig endpoints (including apply and creator-side applications)
app.include_router(gigs.router, prefix=f"{API_PREFIX}/gigs", tags=["Gigs"])

# Applicant-side application endpoints
app.include_router(
    applications.router,
    prefix=f"{API_PREFIX}/applications",
    tags=["Applications"]
)

# Availability calendar endpoints
app.include_router(
    availability.router,
    prefix=f"{API_PREFIX}/availability",
    tags=["Availability"]
)

# Crew contact endpoints
app.include_router(contacts.router, prefix=f"{API_PREFIX}/contacts", tags=["Contacts"])

# Collab endpoints
app.include_router(collab.router, prefix=f"{API_PREFIX}/collab", tags=["Collab"])

# Notification endpoints
app.include_router(
    notifications.router,
    prefix=f"{API_PREFIX}/notifications",
    tags=["Notifications"]
)

# Slate feed endpoints
app.include_router(slate.router, prefix=f"{API_PREFIX}/slate", tags=["Slate"])

# Upload endpoints
app.include_router(upload.router, prefix=f"{API_PREFIX}/upload", tags=["Upload"])


# =============================================================================
# Root Endpoint
# =============================================================================

@app.get("/", tags=["Root"])
async def root():
    """
    Root endpoint - returns API info.
    """
    return {
        "name": "HeyProData API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": f"{API_PREFIX}/health",
    }
