# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the HeyProData API:
# - fake_supabase.py: In-memory stand-in for the PostgREST query builder
# - test_utils.py / test_models.py: Unit tests for helpers and schemas
# - test_auth.py: Bearer token handling
# - test_api_*.py: Request contract tests for each resource
#
# Run tests with: pytest
# =============================================================================
