# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up mock environment variables before any imports
# - Swaps the Supabase client for an in-memory fake
# - Signs bearer tokens with the test JWT secret
# =============================================================================

import os
import time
from uuid import uuid4

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_ANON_KEY", "test-anon-key")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "test-service-key")
os.environ.setdefault("SUPABASE_JWT_SECRET", "test-jwt-secret-with-enough-length-for-hs256")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")

import pytest
from fastapi.testclient import TestClient
from jose import jwt

from app.config import settings
from app.main import app
from lib.supabase_client import SupabaseClient
from tests.fake_supabase import FakeSupabase

# Unique constraints the real schema enforces
UNIQUE_KEYS = {
    "user_roles": [("user_id", "role_name")],
    "applications": [("gig_id", "applicant_user_id")],
    "crew_availability": [("user_id", "availability_date")],
    "collab_interests": [("collab_id", "user_id")],
    "collab_collaborators": [("collab_id", "user_id")],
    "slate_likes": [("post_id", "user_id")],
    "slate_saved": [("post_id", "user_id")],
    "slate_shares": [("post_id", "user_id")],
}


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def db(monkeypatch):
    """In-memory database installed as the Supabase singleton."""
    fake = FakeSupabase(unique=UNIQUE_KEYS)
    monkeypatch.setattr(SupabaseClient, "_instance", fake)
    return fake


@pytest.fixture
def client(db):
    """
    Test client for the API.

    Unhandled errors come back as 500 envelopes instead of propagating.
    """
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture
def owner_id():
    return str(uuid4())


@pytest.fixture
def other_id():
    return str(uuid4())


@pytest.fixture
def make_token():
    """Build a signed Supabase-style access token."""

    def _make(user_id: str, expires_in: int = 3600, **claims):
        payload = {
            "sub": user_id,
            "aud": "authenticated",
            "role": "authenticated",
            "email": f"{user_id[:8]}@example.com",
            "iat": int(time.time()),
            "exp": int(time.time()) + expires_in,
            **claims,
        }
        return jwt.encode(payload, settings.SUPABASE_JWT_SECRET, algorithm="HS256")

    return _make


@pytest.fixture
def auth_headers(make_token):
    """Authorization header for a user id."""

    def _headers(user_id: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {make_token(user_id)}"}

    return _headers


@pytest.fixture
def complete_profile(db):
    """Seed a profile that passes the completeness gate."""

    def _seed(user_id: str, **extra):
        return db.seed(
            "user_profiles",
            user_id=user_id,
            name=extra.pop("name", "Sam Carter"),
            firstname="Sam",
            surname="Carter",
            country="UAE",
            city="Dubai",
            **extra,
        )

    return _seed


@pytest.fixture
def active_gig(db):
    """Seed an active gig created by the given user."""

    def _seed(created_by: str, **extra):
        row = {
            "title": "Gaffer for 3-day commercial",
            "slug": "gaffer-for-3-day-commercial",
            "description": "Experienced gaffer needed",
            "amount": 4500,
            "currency": "AED",
            "crew_count": 1,
            "status": "active",
            "expiry_date": None,
            "created_by": created_by,
        }
        row.update(extra)
        return db.seed("gigs", **row)

    return _seed
