#!/usr/bin/env python3
# =============================================================================
# scripts/start_api.py - API Server Entry Point
# =============================================================================
# Starts the HeyProData API with uvicorn.
#
# Usage:
#   # Start server (development, auto-reload when DEBUG=true)
#   python scripts/start_api.py
#
#   # Or use uvicorn directly
#   uvicorn app.main:app --reload
#
# Prerequisites:
#   - Environment variables must be set (.env file)
# =============================================================================

import os
import sys

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import uvicorn

from app.config import settings


def main():
    """Start the API server."""
    print("=" * 60)
    print("HeyProData API")
    print("=" * 60)
    print()
    print(f"Environment: {settings.ENVIRONMENT}")
    print(f"Listening on http://{settings.API_HOST}:{settings.API_PORT}")
    print("Press Ctrl+C to stop")
    print()

    uvicorn.run(
        "app.main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=settings.DEBUG,
        log_level="debug" if settings.DEBUG else "info",
    )


if __name__ == "__main__":
    main()
